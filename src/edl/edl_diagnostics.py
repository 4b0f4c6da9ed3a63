"""
Diagnostic reporting for the EDL parser.

The parser never raises on bad input. Every syntax problem becomes a call to a
`DiagnosticSink`, and parsing continues. This module defines that interface and
the in-memory sink used by the CLI and the tests.

Classes:
    Diagnostic: One reported problem (position, severity, message).
    DiagnosticSink (Protocol): `report(position, severity, message)`.
    DiagnosticCollector: Sink that records diagnostics in order.

Severities are the strings "error" and "warning".
"""

import logging
from typing import Any, Protocol

from edl.edl_lexer import Token

logger = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"
SEVERITIES = (ERROR, WARNING)


class Diagnostic:
    """A single error or warning tied to a source position.

    Attributes:
        line (int): 1-based line of the offending token.
        col (int): 1-based column of the offending token.
        severity (str): "error" or "warning".
        message (str): Human-readable description.
    """

    def __init__(self, line: int, col: int, severity: str, message: str) -> None:
        self.line = line
        self.col = col
        self.severity = severity
        self.message = message

    def __repr__(self) -> str:
        return f"Diagnostic({self.severity}, {self.line}:{self.col}, {self.message!r})"

    def __str__(self) -> str:
        return f"{self.line}:{self.col}: {self.severity}: {self.message}"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Diagnostic)
            and self.line == other.line
            and self.col == other.col
            and self.severity == other.severity
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((self.line, self.col, self.severity, self.message))


class DiagnosticSink(Protocol):  # pragma: no cover
    """Receives diagnostics from the parser. Reporting never stops parsing."""

    def report(self, position: Token, severity: str, message: str) -> None: ...  # pragma: no cover


class DiagnosticCollector:
    """Records every diagnostic in order and logs each one at DEBUG level.

    Attributes:
        diagnostics (list[Diagnostic]): Everything reported so far.
    """

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def report(self, position: Token, severity: str, message: str) -> None:
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown diagnostic severity: {severity!r}")
        diag = Diagnostic(position.line, position.col, severity, message)
        self.diagnostics.append(diag)
        logger.debug("reported %s", diag)

    def error(self, position: Token, message: str) -> None:
        self.report(position, ERROR, message)

    def warning(self, position: Token, message: str) -> None:
        self.report(position, WARNING, message)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == WARNING]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def has_errors(self) -> bool:
        return any(d.severity == ERROR for d in self.diagnostics)

    def messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    def format(self) -> str:
        """All diagnostics, one `line:col: severity: message` per line."""
        return "\n".join(str(d) for d in self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)
