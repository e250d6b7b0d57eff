"""Diagnostic value objects produced by checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

VALID_SEVERITIES: frozenset[str] = frozenset({"error", "warn"})


@dataclass(frozen=True, order=True)
class Diagnostic:
    """A single finding.

    Field order doubles as the sort order: by file, then position, then rule.
    """

    filename: str
    line: int
    column: int
    rule_id: str
    severity: str  # "error" | "warn"
    message: str

    @classmethod
    def at(cls, node: Any, *, filename: str, rule_id: str, severity: str, message: str) -> Diagnostic:
        """Build a diagnostic located at *node* (any object with ``line``/``column``)."""
        return cls(
            filename=filename,
            line=int(getattr(node, "line", 0)),
            column=int(getattr(node, "column", 1)),
            rule_id=rule_id,
            severity=severity,
            message=message,
        )

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}: {self.severity}: {self.message} ({self.rule_id})"
