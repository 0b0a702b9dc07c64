"""Line protocol: parse text commands and format command outcomes.

Input lines:
    ADDTEAM <team>
    START DURATION <d> PROBLEM <p>
    SUBMIT <letter> BY <team> WITH <status> AT <time>
    FLUSH | FREEZE | SCROLL | END
    QUERY_RANKING <team>
    QUERY_SUBMISSION <team> WHERE PROBLEM=<letter|ALL> AND STATUS=<status|ALL>
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List

from .contest import CommandOutcome, ContestState, apply_command, default_state
from .ranking import StandingRow
from .scroll import ScrollReport
from .validation import validate_cmd

logger = logging.getLogger(__name__)

ALL = "ALL"

FROZEN_WARNING = (
    "[Warning]Scoreboard is frozen. The ranking may be inaccurate until it were scrolled."
)

_INFO_LINES = {
    "ADDTEAM": "[Info]Add successfully.",
    "START": "[Info]Competition starts.",
    "FLUSH": "[Info]Flush scoreboard.",
    "FREEZE": "[Info]Freeze scoreboard.",
    "SCROLL": "[Info]Scroll scoreboard.",
    "QUERY_RANKING": "[Info]Complete query ranking.",
    "QUERY_SUBMISSION": "[Info]Complete query submission.",
    "END": "[Info]Competition ends.",
}

_FAILURE_VERBS = {
    "ADDTEAM": "Add",
    "START": "Start",
    "SUBMIT": "Submit",
    "FLUSH": "Flush",
    "FREEZE": "Freeze",
    "SCROLL": "Scroll",
    "QUERY_RANKING": "Query ranking",
    "QUERY_SUBMISSION": "Query submission",
    "END": "End",
}


def problem_index(token: str) -> int:
    if len(token) != 1 or not "A" <= token <= "Z":
        raise ValueError(f"problem must be a single letter A-Z, got {token!r}")
    return ord(token) - ord("A")


def problem_letter(index: int) -> str:
    return chr(ord("A") + index)


def _expect(tokens: List[str], positions: Dict[int, str]) -> None:
    for pos, keyword in positions.items():
        if tokens[pos] != keyword:
            raise ValueError(f"expected {keyword} at position {pos}, got {tokens[pos]!r}")


def _filter_value(token: str, key: str) -> str | None:
    prefix = f"{key}="
    if not token.startswith(prefix):
        raise ValueError(f"expected {prefix}<value>, got {token!r}")
    value = token[len(prefix):]
    return None if value == ALL else value


def _parse_tokens(tokens: List[str]) -> Dict[str, Any]:
    ctype = tokens[0]
    arity = {
        "ADDTEAM": 2,
        "START": 5,
        "SUBMIT": 8,
        "FLUSH": 1,
        "FREEZE": 1,
        "SCROLL": 1,
        "QUERY_RANKING": 2,
        "QUERY_SUBMISSION": 6,
        "END": 1,
    }.get(ctype)
    if arity is None:
        raise ValueError(f"unknown command {ctype!r}")
    if len(tokens) != arity:
        raise ValueError(f"{ctype} takes {arity - 1} arguments, got {len(tokens) - 1}")

    if ctype in {"ADDTEAM", "QUERY_RANKING"}:
        return {"type": ctype, "team": tokens[1]}
    if ctype == "START":
        _expect(tokens, {1: "DURATION", 3: "PROBLEM"})
        return {"type": ctype, "duration": int(tokens[2]), "problem_count": int(tokens[4])}
    if ctype == "SUBMIT":
        _expect(tokens, {2: "BY", 4: "WITH", 6: "AT"})
        return {
            "type": ctype,
            "problem": problem_index(tokens[1]),
            "team": tokens[3],
            "status": tokens[5],
            "time": int(tokens[7]),
        }
    if ctype == "QUERY_SUBMISSION":
        _expect(tokens, {2: "WHERE", 4: "AND"})
        problem = _filter_value(tokens[3], "PROBLEM")
        return {
            "type": ctype,
            "team": tokens[1],
            "problem": None if problem is None else problem_index(problem),
            "status": _filter_value(tokens[5], "STATUS"),
        }
    return {"type": ctype}


def parse_line(line: str) -> Dict[str, Any] | None:
    """Parse one protocol line into a validated command dict.

    Returns None for blank lines.

    Raises:
        ValueError: If the line is not a well-formed command
    """
    tokens = line.split()
    if not tokens:
        return None
    cmd = validate_cmd(_parse_tokens(tokens))
    return cmd.model_dump(exclude_none=True)


def format_row(row: StandingRow) -> str:
    return " ".join(
        [row.team, str(row.rank), str(row.solved_count), str(row.total_penalty), *row.cells]
    )


def _format_scroll(report: ScrollReport) -> List[str]:
    lines = [format_row(row) for row in report.before]
    lines.extend(
        f"{c.team} {c.passed} {c.solved_count} {c.total_penalty}" for c in report.changes
    )
    lines.extend(format_row(row) for row in report.after)
    return lines


def format_outcome(outcome: CommandOutcome) -> List[str]:
    """Render a command outcome as output lines (possibly none)."""
    command = outcome.command
    if outcome.rejection is not None:
        verb = _FAILURE_VERBS.get(command, command)
        return [f"[Error]{verb} failed: {outcome.rejection.message}."]
    if command == "SUBMIT":
        return []

    lines = [_INFO_LINES[command]]
    payload = outcome.payload
    if command == "SCROLL":
        lines.extend(_format_scroll(payload["report"]))
    elif command == "QUERY_RANKING":
        if payload["stale"]:
            lines.append(FROZEN_WARNING)
        lines.append(f"{payload['team']} NOW AT RANKING {payload['rank']}")
    elif command == "QUERY_SUBMISSION":
        record = payload["submission"]
        if record is None:
            lines.append("Cannot find any submission.")
        else:
            lines.append(
                f"{payload['team']} {problem_letter(record.problem)} "
                f"{record.status} {record.time}"
            )
    return lines


def run_session(
    lines: Iterable[str],
    state: ContestState | None = None,
    *,
    strict: bool = False,
) -> Iterator[str]:
    """Feed protocol lines to a contest and yield the output lines.

    Stops after END. Malformed lines are skipped, or re-raised as ValueError
    when `strict` is set.
    """
    if state is None:
        state = default_state()
    for lineno, line in enumerate(lines, start=1):
        try:
            cmd = parse_line(line)
        except ValueError as e:
            if strict:
                raise ValueError(f"line {lineno}: {e}") from e
            logger.warning(f"Skipping line {lineno}: {e}")
            continue
        if cmd is None:
            continue
        outcome = apply_command(state, cmd)
        yield from format_outcome(outcome)
        if outcome.command == "END" and outcome.ok:
            break
