"""
Tic-Tac-Toe - Board, moves and game-over detection.

Boards are immutable. A move is an (x, y) tile; X always moves first
and the turn number goes up each time play returns to X.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum

from ...search.policies import Attempt

BOARD_SIZE = 3

Move = tuple[int, int]

# Every row, column and diagonal as (x, y) tiles
LINES: tuple[tuple[Move, ...], ...] = (
    *(tuple((x, y) for x in range(BOARD_SIZE)) for y in range(BOARD_SIZE)),
    *(tuple((x, y) for y in range(BOARD_SIZE)) for x in range(BOARD_SIZE)),
    tuple((i, i) for i in range(BOARD_SIZE)),
    tuple((i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)),
)


class Player(Enum):
    N = "N"
    X = "X"
    O = "O"

    @property
    def opponent(self) -> Player:
        if self is Player.X:
            return Player.O
        if self is Player.O:
            return Player.X
        return Player.N


FIRST_PLAYER = Player.X


@dataclass(frozen=True)
class Board:
    """
    A tic-tac-toe position.

    cells holds BOARD_SIZE rows of BOARD_SIZE tiles, row-major.
    """
    cells: tuple[Player, ...] = (Player.N,) * (BOARD_SIZE * BOARD_SIZE)
    current: Player = FIRST_PLAYER
    turn_number: int = 1

    def at(self, move: Move) -> Player:
        x, y = move
        return self.cells[y * BOARD_SIZE + x]

    def moves_made(self) -> int:
        return sum(1 for cell in self.cells if cell is not Player.N)

    def render(self) -> str:
        """Rows of X, O and '.', top row first."""
        rows = []
        for y in range(BOARD_SIZE):
            row = self.cells[y * BOARD_SIZE:(y + 1) * BOARD_SIZE]
            rows.append(" ".join("." if c is Player.N else c.value for c in row))
        return "\n".join(rows)

    @classmethod
    def from_rows(cls, *rows: str, current: Player | None = None) -> Board:
        """
        Build a board from strings such as "X.O".

        The player to move defaults to whoever has made fewer moves.
        """
        cells = tuple(
            Player.N if ch == "." else Player(ch)
            for row in rows
            for ch in row.replace(" ", "")
        )
        if len(cells) != BOARD_SIZE * BOARD_SIZE:
            raise ValueError(f"Expected {BOARD_SIZE} rows of {BOARD_SIZE} tiles")
        if current is None:
            xs = sum(1 for c in cells if c is Player.X)
            os_ = sum(1 for c in cells if c is Player.O)
            current = Player.X if xs <= os_ else Player.O
        return cls(cells=cells, current=current)


def valid_moves(board: Board) -> list[Move]:
    """Unoccupied tiles, row by row."""
    return [
        (x, y)
        for y in range(BOARD_SIZE)
        for x in range(BOARD_SIZE)
        if board.at((x, y)) is Player.N
    ]


def game_over(board: Board) -> tuple[bool, Player]:
    """(is over, winner); the winner is Player.N for a tie or a game in progress."""
    for line in LINES:
        first = board.at(line[0])
        if first is not Player.N and all(board.at(tile) is first for tile in line):
            return True, first
    if any(cell is Player.N for cell in board.cells):
        return False, Player.N
    return True, Player.N


def make_move(board: Board, move: Move) -> Attempt:
    """Place the current player's mark; fails off-board, on taken tiles or after the game ends."""
    x, y = move
    if not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE):
        return Attempt.failure(board)
    if board.at(move) is not Player.N or game_over(board)[0]:
        return Attempt.failure(board)

    cells = list(board.cells)
    cells[y * BOARD_SIZE + x] = board.current
    current = board.current.opponent
    turn_number = board.turn_number + 1 if current is FIRST_PLAYER else board.turn_number
    return Attempt.success(replace(
        board, cells=tuple(cells), current=current, turn_number=turn_number,
    ))


def near_wins(board: Board, player: Player) -> int:
    """Lines where player holds all but one tile and the last is empty."""
    count = 0
    for line in LINES:
        marks = [board.at(tile) for tile in line]
        if marks.count(player) == BOARD_SIZE - 1 and marks.count(Player.N) == 1:
            count += 1
    return count
