"""Core contest state transitions (pure, no I/O).

This module owns the contest-wide state and routes structured commands to
the scoring engine, the ranking comparator and the scroll controller.

Architecture:
- ContestState is a single explicitly owned object; every command handler
  receives it and mutates it in place.
- Commands are plain dicts with a 'type' field (ADDTEAM, START, SUBMIT, ...).
- apply_command() returns exactly one CommandOutcome per command: either a
  payload or a Rejection. A rejected command never changes the state.

Contest mode:
- running: submissions are scored immediately.
- frozen: submissions on unsolved problems are concealed until SCROLL.

Ranking queries only ever read the committed FlushSnapshot, which is
replaced by START (names in lexicographic order), FLUSH and SCROLL.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from .ranking import FlushSnapshot, order_teams
from .scoring import SubmissionRecord, Team, apply_submission
from .scroll import run_scroll
from .types import CommandPayload

logger = logging.getLogger(__name__)


@dataclass
class Rejection:
    """A precondition the command did not meet. State is left untouched."""

    kind: str
    message: str


@dataclass
class CommandOutcome:
    """Result of applying a core command."""

    command: str
    payload: Dict[str, Any] = field(default_factory=dict)
    rejection: Rejection | None = None

    @property
    def ok(self) -> bool:
        return self.rejection is None


@dataclass
class ContestState:
    started: bool = False
    frozen: bool = False
    ended: bool = False
    duration: int = 0
    problem_count: int = 0
    teams: Dict[str, Team] = field(default_factory=dict)
    snapshot: FlushSnapshot = field(default_factory=FlushSnapshot)


def default_state() -> ContestState:
    """Create a fresh contest with no teams, not started and not frozen."""
    return ContestState()


def _reject(command: str, kind: str, message: str) -> CommandOutcome:
    logger.info(f"{command} rejected ({kind}): {message}")
    return CommandOutcome(command=command, rejection=Rejection(kind=kind, message=message))


def register_team(state: ContestState, name: str) -> CommandOutcome:
    if state.started:
        return _reject("ADDTEAM", "already_started", "competition has started")
    if name in state.teams:
        return _reject("ADDTEAM", "duplicate_team", "duplicated team name")
    state.teams[name] = Team(name=name)
    logger.debug(f"Registered team {name}")
    return CommandOutcome(command="ADDTEAM", payload={"team": name})


def start_contest(state: ContestState, duration: int, problem_count: int) -> CommandOutcome:
    if state.started:
        return _reject("START", "already_started", "competition has started")
    state.started = True
    state.duration = duration
    state.problem_count = problem_count
    for team in state.teams.values():
        team.reset_problems(problem_count)
    # Before the first flush, teams rank by name.
    state.snapshot = FlushSnapshot.from_names(sorted(state.teams))
    logger.info(
        f"Contest started with {len(state.teams)} teams, "
        f"{problem_count} problems, duration {duration}"
    )
    return CommandOutcome(
        command="START",
        payload={"duration": duration, "problem_count": problem_count},
    )


def submit(
    state: ContestState, problem: int, team_name: str, status: str, time: int
) -> CommandOutcome:
    if not state.started:
        return _reject("SUBMIT", "not_started", "competition has not started")
    team = state.teams.get(team_name)
    if team is None:
        return _reject("SUBMIT", "unknown_team", "cannot find the team")
    if not 0 <= problem < state.problem_count:
        return _reject("SUBMIT", "problem_out_of_range", "cannot find the problem")
    apply_submission(team, problem, status, time, frozen=state.frozen)
    return CommandOutcome(
        command="SUBMIT",
        payload={"team": team_name, "problem": problem, "status": status, "time": time},
    )


def flush(state: ContestState) -> CommandOutcome:
    """Re-rank on current applied results and commit the order."""
    for team in state.teams.values():
        team.recompute()
    order = order_teams(state.teams.values())
    state.snapshot = FlushSnapshot.from_teams(order)
    logger.info("Scoreboard flushed")
    return CommandOutcome(command="FLUSH", payload={"order": state.snapshot.order})


def freeze(state: ContestState) -> CommandOutcome:
    if state.frozen:
        return _reject("FREEZE", "already_frozen", "scoreboard has been frozen")
    state.frozen = True
    logger.info("Scoreboard frozen")
    return CommandOutcome(command="FREEZE")


def scroll(state: ContestState) -> CommandOutcome:
    if not state.frozen:
        return _reject("SCROLL", "not_frozen", "scoreboard has not been frozen")
    logger.info("Scrolling scoreboard")
    report = run_scroll(state.teams.values())
    state.frozen = False
    state.snapshot = FlushSnapshot.from_names(report.order)
    return CommandOutcome(command="SCROLL", payload={"report": report})


def query_ranking(state: ContestState, team_name: str) -> CommandOutcome:
    if team_name not in state.teams:
        return _reject("QUERY_RANKING", "unknown_team", "cannot find the team")
    return CommandOutcome(
        command="QUERY_RANKING",
        payload={
            "team": team_name,
            "rank": state.snapshot.rank_of(team_name),
            "stale": state.frozen,
        },
    )


def query_submission(
    state: ContestState,
    team_name: str,
    problem: int | None = None,
    status: str | None = None,
) -> CommandOutcome:
    """Latest logged submission of a team matching both filters (None = ALL).

    The payload's `submission` is None when nothing matches.
    """
    team = state.teams.get(team_name)
    if team is None:
        return _reject("QUERY_SUBMISSION", "unknown_team", "cannot find the team")
    found: SubmissionRecord | None = None
    for record in team.submissions:
        if problem is not None and record.problem != problem:
            continue
        if status is not None and record.status != status:
            continue
        # Later log entries win ties on time.
        if found is None or record.time >= found.time:
            found = record
    return CommandOutcome(
        command="QUERY_SUBMISSION",
        payload={"team": team_name, "submission": found},
    )


def end(state: ContestState) -> CommandOutcome:
    state.ended = True
    logger.info("Contest ended")
    return CommandOutcome(command="END")


def apply_command(state: ContestState, cmd: CommandPayload) -> CommandOutcome:
    """Apply a contest command to the in-memory state.

    Args:
        state: Contest state, mutated in place when the command is accepted
        cmd: Command dict with 'type' field and command-specific params

    Returns:
        CommandOutcome with the command's payload, or a Rejection

    Raises:
        ValueError: If the command type is unknown
    """
    ctype = cmd.get("type")
    if state.ended:
        return _reject(str(ctype), "contest_ended", "competition has ended")

    if ctype == "ADDTEAM":
        return register_team(state, cmd["team"])
    elif ctype == "START":
        return start_contest(state, cmd["duration"], cmd["problem_count"])
    elif ctype == "SUBMIT":
        return submit(state, cmd["problem"], cmd["team"], cmd["status"], cmd["time"])
    elif ctype == "FLUSH":
        return flush(state)
    elif ctype == "FREEZE":
        return freeze(state)
    elif ctype == "SCROLL":
        return scroll(state)
    elif ctype == "QUERY_RANKING":
        return query_ranking(state, cmd["team"])
    elif ctype == "QUERY_SUBMISSION":
        return query_submission(state, cmd["team"], cmd.get("problem"), cmd.get("status"))
    elif ctype == "END":
        return end(state)
    raise ValueError(f"Unknown command type: {ctype!r}")
