"""
Input validation schemas using Pydantic v2
Validates structured commands before they reach the contest core
"""

import logging
from typing import Optional, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .types import COMMAND_TYPES, STATUSES

logger = logging.getLogger(__name__)

# Problems are addressed by a single letter, so at most 26.
MAX_PROBLEMS = 26


class ValidatedCmd(BaseModel):
    """Command model with per-type field requirements"""

    type: str = Field(..., min_length=1, max_length=50, description="Command type")

    team: Optional[str] = Field(
        None, min_length=1, max_length=255, description="Team name"
    )

    # START fields
    duration: Optional[int] = Field(None, ge=0, description="Contest duration")
    problem_count: Optional[int] = Field(
        None, ge=1, le=MAX_PROBLEMS, description="Number of problems (1-26)"
    )

    # SUBMIT fields; on QUERY_SUBMISSION a missing problem/status means ALL
    problem: Optional[int] = Field(
        None, ge=0, lt=MAX_PROBLEMS, description="0-based problem index"
    )
    status: Optional[str] = Field(None, description="Judge status")
    time: Optional[int] = Field(None, ge=0, description="Submission time")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Validate command type is one of allowed types"""
        if v not in COMMAND_TYPES:
            raise ValueError(f"type must be one of {sorted(COMMAND_TYPES)}, got {v}")
        return v

    @field_validator("team")
    @classmethod
    def validate_team_name(cls, v: Optional[str]) -> Optional[str]:
        """Team names are single tokens of printable characters"""
        if v is None:
            return v
        if any(ch.isspace() for ch in v):
            raise ValueError("team name cannot contain whitespace")
        if not v.isprintable():
            raise ValueError("team name contains control characters")
        return v

    @model_validator(mode="after")
    def validate_command_fields(self) -> Self:
        """Validate required fields based on command type"""
        cmd_type = self.type

        if cmd_type in {"ADDTEAM", "QUERY_RANKING", "QUERY_SUBMISSION"}:
            if self.team is None:
                raise ValueError(f"{cmd_type} requires team")

        elif cmd_type == "START":
            if self.duration is None:
                raise ValueError("START requires duration")
            if self.problem_count is None:
                raise ValueError("START requires problem_count")

        elif cmd_type == "SUBMIT":
            for name in ("team", "problem", "status", "time"):
                if getattr(self, name) is None:
                    raise ValueError(f"SUBMIT requires {name}")
            # A QUERY_SUBMISSION status filter may name anything; it just
            # matches nothing.
            if self.status not in STATUSES:
                raise ValueError(f"status must be one of {STATUSES}, got {self.status}")

        return self

    model_config = ConfigDict(extra="forbid")


def validate_cmd(cmd_dict: dict) -> ValidatedCmd:
    """
    Validate a command dictionary

    Returns:
        ValidatedCmd: Validated command object

    Raises:
        ValueError: If validation fails
    """
    try:
        return ValidatedCmd(**cmd_dict)
    except Exception as e:
        logger.warning(f"Command validation failed: {e}")
        raise ValueError(f"Invalid command: {str(e)}")


# ==================== EXPORT ====================

__all__ = [
    "MAX_PROBLEMS",
    "ValidatedCmd",
    "validate_cmd",
]
