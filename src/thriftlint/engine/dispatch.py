"""Node visitor dispatch: fan one AST node out to every check registered for its kind."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from thriftlint.engine.check import CheckContext, MultiFileCheck
from thriftlint.engine.diagnostic import Diagnostic

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thriftlint.engine.check import Check, FileContext

logger = logging.getLogger(__name__)

NOLINT_ANNOTATION = "nolint"

# Sentinel prefix meaning "every rule" (``nolint = ""``).
_ALL_RULES = ""


def nolint_prefixes(node: Any, parents: tuple[Any, ...] = ()) -> frozenset[str]:
    """Collect ``nolint`` rule prefixes declared on *node* or any ancestor."""
    prefixes: set[str] = set()
    for owner in (*parents, node):
        for annotation in getattr(owner, "annotations", ()):
            if annotation.name != NOLINT_ANNOTATION:
                continue
            listed = [p.strip() for p in annotation.value.split(",") if p.strip()]
            prefixes.update(listed or [_ALL_RULES])
    return frozenset(prefixes)


def is_suppressed(rule_id: str, prefixes: frozenset[str]) -> bool:
    """Return True if *rule_id* is silenced by one of *prefixes*."""
    for prefix in prefixes:
        if prefix == _ALL_RULES or rule_id == prefix or rule_id.startswith(prefix + "."):
            return True
    return False


class Dispatcher:
    """Routes nodes to checks by concrete node class, in registration order.

    A check that raises is isolated: the failure becomes a fault diagnostic
    (see :attr:`faults`) and the remaining checks still run.
    """

    def __init__(self, checks: Sequence[Check]) -> None:
        self.checks: list[Check] = list(checks)
        self.faults: list[Diagnostic] = []
        self._by_kind: dict[type, list[Check]] = {}
        for check in self.checks:
            for kind in check.node_kinds:
                self._by_kind.setdefault(kind, []).append(check)

    def checks_for(self, kind: type) -> list[Check]:
        return list(self._by_kind.get(kind, ()))

    @property
    def multi_file_checks(self) -> list[MultiFileCheck[Any]]:
        return [c for c in self.checks if isinstance(c, MultiFileCheck)]

    def dispatch(
        self, node: Any, file_ctx: FileContext, parents: tuple[Any, ...] = ()
    ) -> list[Diagnostic]:
        """Run every matching check against *node*; never raises."""
        checks = self._by_kind.get(type(node))
        if not checks:
            return []

        suppressed = nolint_prefixes(node, parents)
        diagnostics: list[Diagnostic] = []
        for check in checks:
            if suppressed and is_suppressed(check.rule_id, suppressed):
                continue
            ctx = CheckContext(file=file_ctx, rule_id=check.rule_id, parents=parents)
            try:
                if isinstance(check, MultiFileCheck):
                    check.visit(ctx, node)
                else:
                    diagnostics.extend(check.fn(ctx, node))
            except Exception as exc:  # noqa: BLE001
                logger.exception(
                    "Check %s failed at %s:%s", check.rule_id, file_ctx.filename, getattr(node, "line", 0)
                )
                self.faults.append(
                    Diagnostic.at(
                        node,
                        filename=file_ctx.filename,
                        rule_id=check.rule_id,
                        severity="error",
                        message=f"internal error in check: {exc}",
                    )
                )
        return diagnostics
