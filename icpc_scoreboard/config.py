"""Runtime configuration and logging setup.

Settings come from defaults, then environment variables, then explicit
overrides (the CLI passes its options as overrides).
"""
from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

ENV_PREFIX = "ICPC_SCOREBOARD_"

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off", ""}


class ScoreboardConfig(BaseModel):
    # Diagnostics go to stderr; protocol output always goes to stdout.
    log_level: str = "WARNING"
    # Abort on unparseable input lines instead of skipping them.
    strict: bool = False

    model_config = ConfigDict(extra="forbid")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {v}")
        return level


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"expected a boolean, got {raw!r}")


def load_config(
    env: Optional[Mapping[str, str]] = None, **overrides: Any
) -> ScoreboardConfig:
    """Build the configuration from environment variables and overrides.

    Overrides set to None are ignored, so unset CLI options fall through to
    the environment and then to the defaults.
    """
    if env is None:
        env = os.environ
    values: dict[str, Any] = {}
    if f"{ENV_PREFIX}LOG_LEVEL" in env:
        values["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"]
    if f"{ENV_PREFIX}STRICT" in env:
        values["strict"] = _parse_bool(env[f"{ENV_PREFIX}STRICT"])
    values.update({key: value for key, value in overrides.items() if value is not None})
    return ScoreboardConfig(**values)


def configure_logging(config: ScoreboardConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
