"""Thrift AST node model.

Every node is a frozen dataclass carrying the ``line``/``column`` of the
token that starts it.  Identity is structural: two nodes with the same
fields compare equal.  Nodes built by hand (e.g. in tests) default to line 0,
column 1.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BASE_TYPE_NAMES: frozenset[str] = frozenset(
    {"bool", "byte", "i8", "i16", "i32", "i64", "double", "string", "binary", "uuid"}
)

STRUCT_KINDS: frozenset[str] = frozenset({"struct", "union", "exception"})

# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Annotation:
    """A ``name = "value"`` annotation attached to a type or definition."""

    name: str
    value: str = ""
    line: int = 0
    column: int = 1


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BaseType:
    """A primitive type such as ``i32`` or ``string``."""

    name: str
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class MapType:
    key_type: FieldType
    value_type: FieldType
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class ListType:
    value_type: FieldType
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class SetType:
    value_type: FieldType
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class TypeReference:
    """A reference to a named type, possibly qualified by an include (``shared.Id``)."""

    name: str
    line: int = 0
    column: int = 1


FieldType = BaseType | MapType | ListType | SetType | TypeReference

# ---------------------------------------------------------------------------
# Constant values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConstantInteger:
    value: int
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class ConstantDouble:
    value: float
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class ConstantString:
    value: str
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class ConstantBoolean:
    value: bool
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class ConstantReference:
    """A reference to a constant or enum item (``MAX``, ``Color.RED``, ``shared.MAX``)."""

    name: str
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class ConstantList:
    items: tuple[ConstantValue, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class ConstantMapItem:
    key: ConstantValue
    value: ConstantValue
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class ConstantMap:
    items: tuple[ConstantMapItem, ...] = ()
    line: int = 0
    column: int = 1


ConstantValue = (
    ConstantInteger
    | ConstantDouble
    | ConstantString
    | ConstantBoolean
    | ConstantReference
    | ConstantList
    | ConstantMap
)

# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Include:
    """An ``include "path"`` statement; *path* is the literal text as written."""

    path: str
    line: int = 0
    column: int = 1

    @property
    def name(self) -> str:
        """Name under which the included file's definitions are referenced."""
        base = self.path.rsplit("/", 1)[-1]
        return base.rsplit(".", 1)[0] if "." in base else base


@dataclass(frozen=True)
class CppInclude:
    path: str
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class Namespace:
    scope: str
    name: str
    line: int = 0
    column: int = 1


Header = Include | CppInclude | Namespace

# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Constant:
    name: str
    type: FieldType
    value: ConstantValue
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class Typedef:
    name: str
    type: FieldType
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class EnumItem:
    name: str
    value: int | None = None
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class Enum:
    name: str
    items: tuple[EnumItem, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class Field:
    """A struct field, function parameter, or ``throws`` entry.

    ``id`` is ``None`` when the field has no explicit identifier;
    ``requiredness`` is ``"required"``, ``"optional"``, or ``None``.
    """

    name: str
    type: FieldType
    id: int | None = None
    requiredness: str | None = None
    default: ConstantValue | None = None
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class Struct:
    name: str
    kind: str = "struct"  # "struct" | "union" | "exception"
    fields: tuple[Field, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class Function:
    name: str
    return_type: FieldType | None = None  # None for void
    parameters: tuple[Field, ...] = ()
    exceptions: tuple[Field, ...] = ()
    oneway: bool = False
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


@dataclass(frozen=True)
class Service:
    name: str
    functions: tuple[Function, ...] = ()
    parent: str | None = None
    annotations: tuple[Annotation, ...] = ()
    line: int = 0
    column: int = 1


Definition = Constant | Typedef | Enum | Struct | Service


@dataclass(frozen=True)
class Program:
    """The root of a parsed Thrift file."""

    headers: tuple[Header, ...] = ()
    definitions: tuple[Definition, ...] = ()
    line: int = 1
    column: int = 1

    @property
    def includes(self) -> tuple[Include, ...]:
        return tuple(h for h in self.headers if isinstance(h, Include))

    def lookup(self, name: str) -> Definition | None:
        """Return the top-level definition named *name*, or ``None``."""
        for definition in self.definitions:
            if definition.name == name:
                return definition
        return None


Node = (
    Program
    | Header
    | Definition
    | EnumItem
    | Field
    | Function
    | FieldType
    | ConstantValue
    | ConstantMapItem
    | Annotation
)
