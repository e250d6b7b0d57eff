"""Container type checks: set values, map keys, and map values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from thriftlint.engine.check import SingleFileCheck
from thriftlint.idl.nodes import BaseType, Enum, ListType, MapType, SetType, Struct

if TYPE_CHECKING:
    from collections.abc import Iterable

    from thriftlint.engine.check import CheckContext
    from thriftlint.engine.diagnostic import Diagnostic
    from thriftlint.idl.nodes import FieldType

# Kinds accepted by ``map.value.disallowed`` besides the base type names.
CONTAINER_KINDS: frozenset[str] = frozenset({"map", "set", "list"})


def type_kind(ctx: CheckContext, field_type: FieldType) -> str | None:
    """Classify *field_type* after resolving references and typedefs.

    Returns a base type name (``"string"``), a container kind (``"map"``),
    ``"enum"``, a struct kind (``"union"``), or ``None`` if unresolved.
    """
    resolved = ctx.resolve_type(field_type)
    if isinstance(resolved, BaseType):
        return resolved.name
    if isinstance(resolved, MapType):
        return "map"
    if isinstance(resolved, SetType):
        return "set"
    if isinstance(resolved, ListType):
        return "list"
    if isinstance(resolved, Enum):
        return "enum"
    if isinstance(resolved, Struct):
        return resolved.kind
    return None


def _is_primitive(ctx: CheckContext, field_type: FieldType) -> bool:
    resolved = ctx.resolve_type(field_type)
    return isinstance(resolved, (BaseType, Enum))


def check_set_value_type() -> SingleFileCheck:
    """Set values must be primitive (base or enum) types."""

    def fn(ctx: CheckContext, node: SetType) -> list[Diagnostic]:
        if _is_primitive(ctx, node.value_type):
            return []
        return [ctx.error(node, "set value must be a primitive type")]

    return SingleFileCheck("set.value.type", (SetType,), fn)


def check_map_key_type() -> SingleFileCheck:
    """Map keys must be primitive (base or enum) types."""

    def fn(ctx: CheckContext, node: MapType) -> list[Diagnostic]:
        if _is_primitive(ctx, node.key_type):
            return []
        return [ctx.error(node, "map key must be a primitive type")]

    return SingleFileCheck("map.key.type", (MapType,), fn)


def check_map_value_disallowed(disallowed: Iterable[str]) -> SingleFileCheck:
    """Forbid map values of the given kinds (``map``, ``union``, ``string``, ...)."""
    kinds = frozenset(disallowed)

    def fn(ctx: CheckContext, node: MapType) -> list[Diagnostic]:
        kind = type_kind(ctx, node.value_type)
        if kind is not None and kind in kinds:
            return [ctx.error(node, f"map value must not be a {kind}")]
        return []

    return SingleFileCheck("map.value.disallowed", (MapType,), fn)
