"""
Map - The battlefield and its text format.

A map is immutable: every update returns a new map. Objects are stored
sparsely as (index, team, piece) entries sorted by tile index, where
index = x + y * width.

Text format (one map per file):

    5,5          width,height
    5,2          starting MP,starting AP
    {
    (20,0,5)     (index,team,piece) one per line
    (4,1,5)
    }
"""

from __future__ import annotations
from dataclasses import dataclass, replace
import dataclasses
from typing import Iterator
import re

from ...search.policies import Attempt
from .objects import Piece

Coord = tuple[int, int]
Entry = tuple[int, int, Piece]

DEFAULT_MP = 5
DEFAULT_AP = 2
MIN_DEFAULT_SIZE = 4


class MapFormatError(ValueError):
    """Raised when map text cannot be parsed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class Map:
    """Size, starting resources and the sparse field of objects."""
    width: int = 5
    height: int = 5
    starting_mp: int = DEFAULT_MP
    starting_ap: int = DEFAULT_AP
    field: tuple[Entry, ...] = ()

    _lookup: dict[int, tuple[int, Piece]] = dataclasses.field(
        init=False, repr=False, compare=False, hash=False,
    )

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Map size must be positive: {self.width}x{self.height}")
        entries = tuple(sorted(
            (index, team, Piece(piece)) for index, team, piece in self.field
        ))
        object.__setattr__(self, "field", entries)
        object.__setattr__(
            self, "_lookup",
            {index: (team, piece) for index, team, piece in entries},
        )

    @property
    def size(self) -> Coord:
        return (self.width, self.height)

    # =========================================================================
    # Coordinates
    # =========================================================================

    def is_valid(self, coord: Coord | None) -> bool:
        if coord is None:
            return False
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def to_index(self, coord: Coord) -> int:
        x, y = coord
        return x + y * self.width

    def to_coord(self, index: int) -> Coord:
        return (index % self.width, index // self.width)

    # =========================================================================
    # Reading and updating
    # =========================================================================

    def read(self, coord: Coord | None) -> tuple[int, Piece]:
        """(team, piece) at a tile; (0, NOTHING) for empty or invalid tiles."""
        if not self.is_valid(coord):
            return (0, Piece.NOTHING)
        return self._lookup.get(self.to_index(coord), (0, Piece.NOTHING))

    def update(self, coord: Coord, piece: Piece, team: int = 0) -> Attempt:
        """
        Place a piece at a tile, or clear it when piece is NOTHING.

        Fails for coordinates outside the map.
        """
        if not self.is_valid(coord):
            return Attempt.failure(self)

        index = self.to_index(coord)
        lookup = dict(self._lookup)
        if piece == Piece.NOTHING:
            lookup.pop(index, None)
        else:
            lookup[index] = (team, piece)

        entries = tuple((i, t, p) for i, (t, p) in lookup.items())
        return Attempt.success(replace(self, field=entries))

    def objects(self) -> Iterator[tuple[Coord, int, Piece]]:
        """Every (coord, team, piece) on the map in index order."""
        for index, team, piece in self.field:
            yield self.to_coord(index), team, piece

    def cleared(self) -> Map:
        return replace(self, field=())

    def render(self) -> str:
        """
        Rows of two-character tiles, top row first.

        ".." is empty, "##" a wall, and units show their initial and team
        ("L0" is a team 0 laser).
        """
        rows = []
        for y in range(self.height):
            tiles = []
            for x in range(self.width):
                team, piece = self.read((x, y))
                if piece == Piece.NOTHING:
                    tiles.append("..")
                elif piece == Piece.WALL:
                    tiles.append("##")
                else:
                    tiles.append(f"{piece.name[0]}{team % 10}")
            rows.append(" ".join(tiles))
        return "\n".join(rows)

    # =========================================================================
    # Layouts
    # =========================================================================

    @classmethod
    def default(cls, width: int = 5, height: int = 5) -> Map:
        """A map of the given size with the default unit placement."""
        return cls(width=width, height=height).with_default_placement()

    def with_default_placement(self) -> Map:
        """
        Replace all objects with two mirrored squads.

        Team 0 starts in the bottom-left corner, team 1 in the top-right.
        Maps smaller than 4x4 are returned unchanged.
        """
        if self.width < MIN_DEFAULT_SIZE or self.height < MIN_DEFAULT_SIZE:
            return self

        right = self.width - 1
        bottom = self.height - 1
        placement = [
            ((0, bottom), Piece.LASER, 0),
            ((1, bottom), Piece.BLASTER, 0),
            ((0, bottom - 1), Piece.SNIPER, 0),
            ((1, bottom - 1), Piece.MELEE, 0),
            ((right, 0), Piece.LASER, 1),
            ((right - 1, 0), Piece.BLASTER, 1),
            ((right, 1), Piece.SNIPER, 1),
            ((right - 1, 1), Piece.MELEE, 1),
        ]

        result = self.cleared()
        for coord, piece, team in placement:
            _, result = result.update(coord, piece, team)
        return result


# =============================================================================
# Text format
# =============================================================================

_PAIR = re.compile(r"^\s*(\d+)\s*,\s*(\d+)\s*$")
_ENTRY = re.compile(r"^\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)\s*$")


def dumps(m: Map) -> str:
    """Serialize a map to its text format."""
    lines = [
        f"{m.width},{m.height}",
        f"{m.starting_mp},{m.starting_ap}",
        "{",
    ]
    lines.extend(f"({index},{team},{int(piece)})" for index, team, piece in m.field)
    lines.append("}")
    return "\n".join(lines) + "\n"


def loads(text: str) -> Map:
    """
    Parse a map from its text format.

    Blank lines are ignored. Raises MapFormatError on malformed input,
    out-of-range indices, unknown pieces or duplicate tiles.
    """
    lines = [
        (number, line.strip())
        for number, line in enumerate(text.splitlines(), start=1)
        if line.strip()
    ]
    if len(lines) < 4:
        raise MapFormatError("Map text is incomplete", lines[-1][0] if lines else 1)

    width, height = _parse_pair(*lines[0], "size")
    if width <= 0 or height <= 0:
        raise MapFormatError(f"Map size must be positive: {width}x{height}", lines[0][0])
    starting_mp, starting_ap = _parse_pair(*lines[1], "MP/AP")

    number, opener = lines[2]
    if opener != "{":
        raise MapFormatError(f"Expected '{{', got {opener!r}", number)

    number, closer = lines[-1]
    if closer != "}":
        raise MapFormatError(f"Expected '}}', got {closer!r}", number)

    entries: dict[int, tuple[int, Piece]] = {}
    for number, line in lines[3:-1]:
        match = _ENTRY.match(line)
        if not match:
            raise MapFormatError(f"Malformed object entry {line!r}", number)
        index, team, raw_piece = (int(g) for g in match.groups())
        if index >= width * height:
            raise MapFormatError(f"Tile index {index} outside {width}x{height} map", number)
        try:
            piece = Piece(raw_piece)
        except ValueError:
            raise MapFormatError(f"Unknown piece {raw_piece}", number) from None
        if index in entries:
            raise MapFormatError(f"Duplicate tile index {index}", number)
        if piece != Piece.NOTHING:
            entries[index] = (team, piece)

    return Map(
        width=width,
        height=height,
        starting_mp=starting_mp,
        starting_ap=starting_ap,
        field=tuple((i, t, p) for i, (t, p) in entries.items()),
    )


def _parse_pair(number: int, line: str, what: str) -> tuple[int, int]:
    match = _PAIR.match(line)
    if not match:
        raise MapFormatError(f"Expected '<int>,<int>' for {what}, got {line!r}", number)
    return int(match.group(1)), int(match.group(2))
