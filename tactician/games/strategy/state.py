"""
Game State - A snapshot of a tactics game between two actions.

States are immutable and hashable so the search engine can use them as
dictionary keys. Every field takes part in equality: two states with
the same map but different remaining resources are different states.
"""

from __future__ import annotations
from dataclasses import dataclass, replace

from .map import Coord, Map
from .objects import is_unit


def count_teams(m: Map) -> tuple[tuple[int, int], ...]:
    """(team, unit count) for every team with units left, by team number."""
    counts: dict[int, int] = {}
    for _, team, piece in m.objects():
        if is_unit(piece):
            counts[team] = counts.get(team, 0) + 1
    return tuple(sorted(counts.items()))


@dataclass(frozen=True)
class GameState:
    """
    Complete state of a tactics game.

    Attributes:
        map: The battlefield
        teams: (team, unit count) pairs sorted by team
        current_team: Team whose turn it is
        selection: Tile of the selected unit, or None
        remaining_mp: Movement points left this turn
        remaining_ap: Action points left this turn
        turn_number: Full rounds played, starting at 1
    """
    map: Map
    teams: tuple[tuple[int, int], ...] = ()
    current_team: int = 0
    selection: Coord | None = None
    remaining_mp: int = 0
    remaining_ap: int = 0
    turn_number: int = 1

    @classmethod
    def new(cls, m: Map) -> GameState:
        """Starting state: first team to move, full resources, nothing selected."""
        teams = count_teams(m)
        return cls(
            map=m,
            teams=teams,
            current_team=teams[0][0] if teams else 0,
            selection=None,
            remaining_mp=m.starting_mp,
            remaining_ap=m.starting_ap,
            turn_number=1,
        )

    def team_counts(self) -> dict[int, int]:
        return dict(self.teams)

    def units_of(self, team: int) -> int:
        return self.team_counts().get(team, 0)

    def enemies_of(self, team: int) -> int:
        """Total units belonging to every other team."""
        return sum(count for t, count in self.teams if t != team)

    def with_map(self, m: Map) -> GameState:
        """Replace the map and recount the teams."""
        return replace(self, map=m, teams=count_teams(m))

    def evolve(self, **changes) -> GameState:
        return replace(self, **changes)
