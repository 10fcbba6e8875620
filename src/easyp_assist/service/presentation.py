"""Mapping validator issues onto editor severities and text ranges."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from easyp_assist.models.errors import ValidateConfigResponse
from easyp_assist.parser.nodes import TextRange


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    WEAK_WARNING = "weak_warning"


def to_severity(severity: str | None) -> Severity:
    match (severity or "").lower():
        case "error":
            return Severity.ERROR
        case "warn" | "warning":
            return Severity.WARNING
        case _:
            return Severity.WEAK_WARNING


def to_text_range(text: str, line: int | None, column: int | None) -> TextRange | None:
    """Range from a 1-based *line*/*column* to the end of that line.

    Returns ``None`` for missing or out-of-range lines and for empty lines.
    An out-of-range column starts the range at the beginning of the line.
    """
    if line is None or line <= 0:
        return None
    lines = text.split("\n")
    if line > len(lines):
        return None
    start = sum(len(previous) + 1 for previous in lines[: line - 1])
    end = start + len(lines[line - 1].rstrip("\r"))
    if end <= start:
        return None
    range_start = start
    if column is not None and column > 0:
        requested = start + column - 1
        if start <= requested < end:
            range_start = requested
    return TextRange(range_start, end)


@dataclass(frozen=True)
class Diagnostic:
    """A validator issue placed in the document; file-level when ``range`` is None."""

    message: str
    severity: Severity
    code: str | None = None
    range: TextRange | None = None


def to_diagnostics(text: str, response: ValidateConfigResponse) -> list[Diagnostic]:
    return [
        Diagnostic(
            message=issue.message,
            severity=to_severity(issue.severity),
            code=issue.code,
            range=to_text_range(text, issue.line, issue.column),
        )
        for issue in response.issues
    ]
