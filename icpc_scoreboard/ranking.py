"""ICPC ranking comparator, committed flush snapshot and scroll live order.

Comparator (strict total order over teams evaluated on the same basis):
- more solved problems first;
- then smaller total penalty;
- then compare solve times largest-first, the first smaller time wins;
- then lexicographically smaller team name.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from .scoring import Team


class ContractViolation(RuntimeError):
    """Teams compared on inconsistent aggregates. A programming error."""


def compare_teams(a: Team, b: Team) -> int:
    """Three-way comparison: negative when `a` ranks ahead of `b`."""
    if a.solved_count != b.solved_count:
        return -1 if a.solved_count > b.solved_count else 1
    if a.total_penalty != b.total_penalty:
        return -1 if a.total_penalty < b.total_penalty else 1
    if len(a.solve_times) != len(b.solve_times):
        raise ContractViolation(
            f"solve time lists differ in length for {a.name!r} and {b.name!r}"
        )
    for ta, tb in zip(a.solve_times, b.solve_times):
        if ta != tb:
            return -1 if ta < tb else 1
    if a.name == b.name:
        return 0
    return -1 if a.name < b.name else 1


def better_team(a: Team, b: Team) -> bool:
    return compare_teams(a, b) < 0


ranking_key = cmp_to_key(compare_teams)


def order_teams(teams: Iterable[Team]) -> list[Team]:
    return sorted(teams, key=ranking_key)


@dataclass(frozen=True)
class FlushSnapshot:
    """Last committed ranking. Ranking queries read nothing else."""

    order: tuple[str, ...] = ()
    ranks: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_names(cls, names: Sequence[str]) -> FlushSnapshot:
        return cls(
            order=tuple(names),
            ranks=MappingProxyType({name: idx + 1 for idx, name in enumerate(names)}),
        )

    @classmethod
    def from_teams(cls, teams: Sequence[Team]) -> FlushSnapshot:
        return cls.from_names([team.name for team in teams])

    def rank_of(self, name: str) -> int:
        return self.ranks.get(name, 0)


@dataclass(frozen=True)
class StandingRow:
    team: str
    rank: int
    solved_count: int
    total_penalty: int
    cells: tuple[str, ...]


def standing_rows(order: Sequence[Team], *, frozen: bool) -> tuple[StandingRow, ...]:
    """Capture a rendered board; rows do not follow later state changes."""
    return tuple(
        StandingRow(
            team=team.name,
            rank=idx + 1,
            solved_count=team.solved_count,
            total_penalty=team.total_penalty,
            cells=team.cells(frozen),
        )
        for idx, team in enumerate(order)
    )


class LiveOrder:
    """Working order used while scrolling: a team array plus a name->slot index.

    Slots after `_cursor` never hold a team with concealed problems. A reveal
    only reorders slots at or above the revealed team's slot, so the cursor
    can stay where the last revealed team was picked.
    """

    def __init__(self, teams: Iterable[Team]):
        self.teams: list[Team] = order_teams(teams)
        self._slot: dict[str, int] = {team.name: idx for idx, team in enumerate(self.teams)}
        self._cursor = len(self.teams) - 1

    def slot_of(self, name: str) -> int:
        return self._slot[name]

    def last_concealed(self) -> Team | None:
        """Lowest-ranked team that still has a concealed problem."""
        while self._cursor >= 0:
            team = self.teams[self._cursor]
            if team.has_concealed():
                return team
            self._cursor -= 1
        return None

    def promote(self, team: Team) -> Team | None:
        """Move `team` up while it beats its predecessor.

        Returns the last team it passed, or None if it did not move.
        """
        pos = self._slot[team.name]
        passed: Team | None = None
        while pos > 0:
            above = self.teams[pos - 1]
            if not better_team(team, above):
                break
            self.teams[pos - 1], self.teams[pos] = team, above
            self._slot[team.name] = pos - 1
            self._slot[above.name] = pos
            passed = above
            pos -= 1
        return passed
