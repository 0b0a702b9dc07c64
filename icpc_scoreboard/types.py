"""Type definitions for submission statuses and command payloads."""
from __future__ import annotations

from typing import Literal, Optional, TypedDict, get_args


Status = Literal["Accepted", "Wrong_Answer", "Runtime_Error", "Time_Limit_Exceed"]

CommandType = Literal[
    "ADDTEAM",
    "START",
    "SUBMIT",
    "FLUSH",
    "FREEZE",
    "SCROLL",
    "QUERY_RANKING",
    "QUERY_SUBMISSION",
    "END",
]

STATUSES: tuple[str, ...] = get_args(Status)
COMMAND_TYPES: frozenset[str] = frozenset(get_args(CommandType))

ACCEPTED = "Accepted"
# Judged outcomes that count as a wrong attempt before the first Accepted.
REJECTED_STATUSES: frozenset[str] = frozenset(STATUSES) - {ACCEPTED}


class CommandPayload(TypedDict, total=False):
    """
    TypedDict for command payloads sent to apply_command().

    Fields vary by command type.
    """
    # Common
    type: CommandType

    # ADDTEAM / SUBMIT / QUERY_RANKING / QUERY_SUBMISSION
    team: str

    # START
    duration: int
    problem_count: int

    # SUBMIT (problem is 0-based); on QUERY_SUBMISSION a missing or None
    # problem/status means ALL
    problem: Optional[int]
    status: Optional[Status]
    time: int
