"""Constant reference check."""

from __future__ import annotations

from typing import TYPE_CHECKING

from thriftlint.engine.check import SingleFileCheck
from thriftlint.idl.nodes import ConstantReference

if TYPE_CHECKING:
    from thriftlint.engine.check import CheckContext
    from thriftlint.engine.diagnostic import Diagnostic


def check_constant_ref() -> SingleFileCheck:
    """Every constant reference must name a known constant or enum item."""

    def fn(ctx: CheckContext, node: ConstantReference) -> list[Diagnostic]:
        if ctx.resolve_constant(node.name) is None:
            return [ctx.error(node, f"unable to find a constant or enum value named '{node.name}'")]
        return []

    return SingleFileCheck("constant.ref", (ConstantReference,), fn)
