"""Naming checks: reserved identifiers and namespace patterns."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from thriftlint.engine.check import SingleFileCheck
from thriftlint.idl.nodes import (
    Constant,
    Enum,
    EnumItem,
    Field,
    Function,
    Namespace,
    Service,
    Struct,
    Typedef,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from thriftlint.engine.check import CheckContext
    from thriftlint.engine.diagnostic import Diagnostic

NAMED_NODE_KINDS: tuple[type, ...] = (
    Struct,
    Field,
    Enum,
    EnumItem,
    Service,
    Function,
    Constant,
    Typedef,
)

# Namespace pattern scope that applies to every language.
ANY_SCOPE = "*"


def check_names_reserved(reserved: Iterable[str]) -> SingleFileCheck:
    """Report definitions, fields, and functions using a reserved name.

    Matching is case-insensitive.
    """
    names = frozenset(name.lower() for name in reserved)

    def fn(ctx: CheckContext, node: Any) -> list[Diagnostic]:
        if node.name.lower() in names:
            return [ctx.error(node, f"'{node.name}' is a reserved name")]
        return []

    return SingleFileCheck("names.reserved", NAMED_NODE_KINDS, fn)


def check_namespace_patterns(patterns: Sequence[tuple[str, str]]) -> SingleFileCheck:
    """Require namespace names for a scope to match a regular expression."""
    compiled = [(scope, re.compile(pattern)) for scope, pattern in patterns]

    def fn(ctx: CheckContext, node: Namespace) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for scope, pattern in compiled:
            if scope not in (node.scope, ANY_SCOPE):
                continue
            if not pattern.search(node.name):
                diagnostics.append(
                    ctx.error(
                        node,
                        f'"{node.name}" does not match the pattern "{pattern.pattern}" '
                        f'for namespace scope "{node.scope}"',
                    )
                )
        return diagnostics

    return SingleFileCheck("namespace.patterns", (Namespace,), fn)
