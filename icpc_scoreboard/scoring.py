"""Scoring engine: per-problem state, concealment buffers and team aggregates.

A submission always lands in the team's log. Whether it also changes the
scoreboard depends on the contest mode:

- running: the attempt is applied at once (first Accepted solves the problem,
  every earlier rejected attempt costs PENALTY_PER_REJECTION).
- frozen: attempts on unsolved problems are buffered in a ConcealmentRecord
  and only applied when the problem is unveiled during scroll.

Attempts on an already solved problem never change the score.
"""
from __future__ import annotations

import bisect
import logging
import operator
from dataclasses import dataclass, field

from .types import ACCEPTED, REJECTED_STATUSES

logger = logging.getLogger(__name__)

PENALTY_PER_REJECTION = 20


@dataclass(frozen=True)
class SubmissionRecord:
    problem: int
    status: str
    time: int


@dataclass
class ConcealmentRecord:
    """Submissions received on one problem while the scoreboard is frozen."""

    # wrong_before_ac at the moment the first concealed submission arrived
    pre_conceal_wrong: int
    events: list[tuple[str, int]] = field(default_factory=list)

    @property
    def concealed_count(self) -> int:
        return len(self.events)


@dataclass
class ProblemState:
    wrong_before_ac: int = 0
    solved: bool = False
    solved_time: int = 0
    concealment: ConcealmentRecord | None = None

    @property
    def concealed(self) -> bool:
        return self.concealment is not None

    @property
    def penalty(self) -> int:
        if not self.solved:
            return 0
        return PENALTY_PER_REJECTION * self.wrong_before_ac + self.solved_time

    def apply(self, status: str, time: int) -> bool:
        """Apply one attempt with running-mode rules.

        Returns True only when this attempt solved the problem.
        """
        if self.solved:
            return False
        if status == ACCEPTED:
            self.solved = True
            self.solved_time = time
            return True
        if status in REJECTED_STATUSES:
            self.wrong_before_ac += 1
        return False

    def conceal(self, status: str, time: int) -> None:
        if self.concealment is None:
            self.concealment = ConcealmentRecord(pre_conceal_wrong=self.wrong_before_ac)
        self.concealment.events.append((status, time))

    def unveil(self) -> None:
        """Replay concealed attempts in arrival order, then drop the record."""
        record = self.concealment
        if record is None:
            return
        for status, time in record.events:
            self.apply(status, time)
        self.concealment = None

    def display(self, frozen: bool) -> str:
        """Scoreboard cell: `+`, `+x`, `.`, `-x`, or `0/y` / `-x/y` while concealed."""
        if frozen and self.concealment is not None:
            x = self.concealment.pre_conceal_wrong
            y = self.concealment.concealed_count
            return f"0/{y}" if x == 0 else f"-{x}/{y}"
        if self.solved:
            return "+" if self.wrong_before_ac == 0 else f"+{self.wrong_before_ac}"
        return "." if self.wrong_before_ac == 0 else f"-{self.wrong_before_ac}"


@dataclass
class Team:
    name: str
    problems: list[ProblemState] = field(default_factory=list)
    submissions: list[SubmissionRecord] = field(default_factory=list)
    solved_count: int = 0
    total_penalty: int = 0
    # Times of applied solves, largest first.
    solve_times: list[int] = field(default_factory=list)

    def reset_problems(self, problem_count: int) -> None:
        self.problems = [ProblemState() for _ in range(problem_count)]
        self.solved_count = 0
        self.total_penalty = 0
        self.solve_times = []

    def record_solve(self, problem: ProblemState) -> None:
        """Fold a freshly solved problem into the aggregate."""
        self.solved_count += 1
        self.total_penalty += problem.penalty
        # solve_times is descending, so search on negated values.
        idx = bisect.bisect_left(self.solve_times, -problem.solved_time, key=operator.neg)
        self.solve_times.insert(idx, problem.solved_time)

    def recompute(self) -> None:
        """Rebuild the aggregate from applied problem states."""
        solved = [p for p in self.problems if p.solved]
        self.solved_count = len(solved)
        self.total_penalty = sum(p.penalty for p in solved)
        self.solve_times = sorted((p.solved_time for p in solved), reverse=True)

    def has_concealed(self) -> bool:
        return any(p.concealment is not None for p in self.problems)

    def first_concealed_problem(self) -> int | None:
        for idx, problem in enumerate(self.problems):
            if problem.concealment is not None:
                return idx
        return None

    def cells(self, frozen: bool) -> tuple[str, ...]:
        return tuple(p.display(frozen) for p in self.problems)


def apply_submission(
    team: Team, problem_id: int, status: str, time: int, *, frozen: bool
) -> None:
    """Log a submission and score or conceal it according to the contest mode."""
    team.submissions.append(SubmissionRecord(problem=problem_id, status=status, time=time))
    problem = team.problems[problem_id]
    if problem.solved:
        return
    if frozen:
        problem.conceal(status, time)
        logger.debug(
            f"Concealed {status} by {team.name} on problem {problem_id} "
            f"({problem.concealment.concealed_count} pending)"
        )
        return
    if problem.apply(status, time):
        team.record_solve(problem)
        logger.debug(
            f"{team.name} solved problem {problem_id} at {time}: "
            f"{team.solved_count} solved, penalty {team.total_penalty}"
        )


def unveil_problem(team: Team, problem_id: int) -> None:
    """Apply one concealed problem and refresh only this team's aggregate."""
    team.problems[problem_id].unveil()
    team.recompute()
