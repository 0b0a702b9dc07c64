"""Scroll controller: unveil concealed problems one at a time and re-rank.

Reveal order is fully determined by the current live order:
1. pick the lowest-ranked team that still has a concealed problem;
2. unveil its concealed problem with the smallest index;
3. bubble the team upward past every team it now beats.

The lowest-ranked candidate is recomputed after every single reveal.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .ranking import LiveOrder, StandingRow, standing_rows
from .scoring import Team, unveil_problem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankChange:
    team: str
    passed: str
    solved_count: int
    total_penalty: int


@dataclass(frozen=True)
class ScrollReport:
    before: tuple[StandingRow, ...]
    changes: tuple[RankChange, ...]
    after: tuple[StandingRow, ...]
    order: tuple[str, ...]


def run_scroll(teams: Iterable[Team]) -> ScrollReport:
    """Unveil every concealed problem and return the boards and rank changes.

    Callers are responsible for checking the contest is frozen and for
    committing `order` as the new flush snapshot.
    """
    teams = list(teams)
    for team in teams:
        team.recompute()
    live = LiveOrder(teams)
    before = standing_rows(live.teams, frozen=True)

    changes: list[RankChange] = []
    reveals = 0
    while True:
        team = live.last_concealed()
        if team is None:
            break
        problem_id = team.first_concealed_problem()
        unveil_problem(team, problem_id)
        reveals += 1
        passed = live.promote(team)
        if passed is not None:
            change = RankChange(
                team=team.name,
                passed=passed.name,
                solved_count=team.solved_count,
                total_penalty=team.total_penalty,
            )
            changes.append(change)
            logger.debug(
                f"{team.name} passed {passed.name} after unveiling problem {problem_id} "
                f"({team.solved_count} solved, penalty {team.total_penalty})"
            )

    # Nothing should be left; clear anything that is.
    for team in teams:
        for problem in team.problems:
            problem.concealment = None

    logger.info(f"Scroll unveiled {reveals} problems with {len(changes)} rank changes")
    return ScrollReport(
        before=before,
        changes=tuple(changes),
        after=standing_rows(live.teams, frozen=False),
        order=tuple(team.name for team in live.teams),
    )
