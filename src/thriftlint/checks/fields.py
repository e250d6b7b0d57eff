"""Field identifier checks.

Applied to struct/union/exception fields as well as function parameters and
``throws`` entries, which share the same node kind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from thriftlint.engine.check import SingleFileCheck
from thriftlint.idl.nodes import Field

if TYPE_CHECKING:
    from thriftlint.engine.check import CheckContext
    from thriftlint.engine.diagnostic import Diagnostic


def check_field_id_missing() -> SingleFileCheck:
    def fn(ctx: CheckContext, node: Field) -> list[Diagnostic]:
        if node.id is None:
            return [ctx.error(node, f"field '{node.name}' is missing an explicit field ID")]
        return []

    return SingleFileCheck("field.id.missing", (Field,), fn)


def check_field_id_negative() -> SingleFileCheck:
    def fn(ctx: CheckContext, node: Field) -> list[Diagnostic]:
        if node.id is not None and node.id < 0:
            return [ctx.error(node, f"field ID for '{node.name}' ({node.id}) is negative")]
        return []

    return SingleFileCheck("field.id.negative", (Field,), fn)


def check_field_id_zero() -> SingleFileCheck:
    def fn(ctx: CheckContext, node: Field) -> list[Diagnostic]:
        if node.id == 0:
            return [ctx.error(node, f"field ID for '{node.name}' is zero")]
        return []

    return SingleFileCheck("field.id.zero", (Field,), fn)
