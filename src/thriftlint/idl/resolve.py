"""Name resolution for type and constant references.

References are resolved against the local program's definitions and, for
qualified names such as ``shared.UserId``, against the included program whose
file stem is ``shared``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from thriftlint.idl.nodes import Constant, Enum, EnumItem, Typedef, TypeReference

if TYPE_CHECKING:
    from collections.abc import Mapping

    from thriftlint.idl.nodes import Definition, FieldType, Program

# Typedef chains longer than this are treated as unresolvable (self-referential).
_MAX_TYPEDEF_DEPTH = 32


def _split_qualified(
    name: str, program: Program, includes: Mapping[str, Program]
) -> tuple[str, Program]:
    """Return ``(local_name, owning_program)`` for a possibly include-qualified name."""
    prefix, _, rest = name.partition(".")
    if rest and prefix in includes:
        return rest, includes[prefix]
    return name, program


def resolve_type(
    ref: FieldType,
    program: Program,
    includes: Mapping[str, Program] | None = None,
) -> FieldType | Definition | None:
    """Resolve *ref* to the type or definition it ultimately names.

    Non-reference types are returned unchanged.  Typedefs are followed to
    their target.  Returns ``None`` when a reference cannot be resolved.
    """
    includes = includes or {}
    current: FieldType | Definition = ref
    owner = program
    for _ in range(_MAX_TYPEDEF_DEPTH):
        if isinstance(current, TypeReference):
            local_name, owner = _split_qualified(current.name, owner, includes)
            found = owner.lookup(local_name)
            if found is None:
                return None
            current = found
        elif isinstance(current, Typedef):
            current = current.type
        else:
            return current
    return None


def resolve_constant(
    name: str,
    program: Program,
    includes: Mapping[str, Program] | None = None,
) -> Constant | EnumItem | None:
    """Resolve a constant reference (``MAX``, ``Color.RED``, ``shared.Color.RED``)."""
    includes = includes or {}
    local_name, owner = _split_qualified(name, program, includes)

    found = owner.lookup(local_name)
    if isinstance(found, Constant):
        return found

    enum_name, _, item_name = local_name.rpartition(".")
    if not enum_name:
        return None
    enum = owner.lookup(enum_name)
    if isinstance(enum, Typedef):
        target = resolve_type(enum.type, owner)
        enum = target if isinstance(target, Enum) else None
    if not isinstance(enum, Enum):
        return None
    for item in enum.items:
        if item.name == item_name:
            return item
    return None
