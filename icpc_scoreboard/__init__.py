from .contest import (
    CommandOutcome,
    ContestState,
    Rejection,
    apply_command,
    default_state,
    end,
    flush,
    freeze,
    query_ranking,
    query_submission,
    register_team,
    scroll,
    start_contest,
    submit,
)
from .types import ACCEPTED, REJECTED_STATUSES, STATUSES, CommandPayload, Status
from .validation import ValidatedCmd, validate_cmd
from .scoring import (
    PENALTY_PER_REJECTION,
    ConcealmentRecord,
    ProblemState,
    SubmissionRecord,
    Team,
    apply_submission,
    unveil_problem,
)
from .ranking import (
    ContractViolation,
    FlushSnapshot,
    LiveOrder,
    StandingRow,
    better_team,
    compare_teams,
    order_teams,
)
from .scroll import RankChange, ScrollReport, run_scroll

__all__ = [
    "CommandOutcome",
    "CommandPayload",
    "ContestState",
    "Rejection",
    "apply_command",
    "default_state",
    "end",
    "flush",
    "freeze",
    "query_ranking",
    "query_submission",
    "register_team",
    "scroll",
    "start_contest",
    "submit",
    "ACCEPTED",
    "REJECTED_STATUSES",
    "STATUSES",
    "Status",
    "ValidatedCmd",
    "validate_cmd",
    "PENALTY_PER_REJECTION",
    "ConcealmentRecord",
    "ProblemState",
    "SubmissionRecord",
    "Team",
    "apply_submission",
    "unveil_problem",
    "ContractViolation",
    "FlushSnapshot",
    "LiveOrder",
    "StandingRow",
    "better_team",
    "compare_teams",
    "order_teams",
    "RankChange",
    "ScrollReport",
    "run_scroll",
]
