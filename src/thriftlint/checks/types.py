"""Disallowed type check."""

from __future__ import annotations

from typing import TYPE_CHECKING

from thriftlint.engine.check import SingleFileCheck
from thriftlint.idl.nodes import BaseType, ListType, MapType, SetType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from thriftlint.engine.check import CheckContext
    from thriftlint.engine.diagnostic import Diagnostic

_CONTAINER_NAMES: dict[type, str] = {MapType: "map", ListType: "list", SetType: "set"}


def check_types_disallowed(disallowed: Iterable[str]) -> SingleFileCheck:
    names = frozenset(disallowed)

    def fn(ctx: CheckContext, node: BaseType | MapType | ListType | SetType) -> list[Diagnostic]:
        name = node.name if isinstance(node, BaseType) else _CONTAINER_NAMES[type(node)]
        if name in names:
            return [ctx.error(node, f"a disallowed type was used: {name}")]
        return []

    return SingleFileCheck("types.disallowed", (BaseType, MapType, ListType, SetType), fn)
