"""Enum checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from thriftlint.engine.check import SingleFileCheck
from thriftlint.idl.nodes import Enum

if TYPE_CHECKING:
    from thriftlint.engine.check import CheckContext
    from thriftlint.engine.diagnostic import Diagnostic


def check_enum_size(warning: int | None = None, error: int | None = None) -> SingleFileCheck:
    """Report enums with more items than *warning* (warn) or *error* (error)."""

    def fn(ctx: CheckContext, node: Enum) -> list[Diagnostic]:
        size = len(node.items)
        if error is not None and size > error:
            return [ctx.error(node, f"enumeration '{node.name}' has more than {error} items")]
        if warning is not None and size > warning:
            return [ctx.warning(node, f"enumeration '{node.name}' has more than {warning} items")]
        return []

    return SingleFileCheck("enum.size", (Enum,), fn)
