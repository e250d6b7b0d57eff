"""Check engine: diagnostics, check descriptors, dispatch, and the run driver."""

from thriftlint.engine.check import (
    Check,
    CheckContext,
    FileContext,
    InvariantError,
    MultiFileCheck,
    Phase,
    SingleFileCheck,
)
from thriftlint.engine.diagnostic import Diagnostic
from thriftlint.engine.dispatch import Dispatcher, is_suppressed, nolint_prefixes
from thriftlint.engine.runner import PARSE_RULE_ID, Runner, RunResult, collect_files

__all__ = [
    "PARSE_RULE_ID",
    "Check",
    "CheckContext",
    "Diagnostic",
    "Dispatcher",
    "FileContext",
    "InvariantError",
    "MultiFileCheck",
    "Phase",
    "RunResult",
    "Runner",
    "SingleFileCheck",
    "collect_files",
    "is_suppressed",
    "nolint_prefixes",
]
