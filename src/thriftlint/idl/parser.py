"""Thrift IDL parser.

A lark LALR grammar produces a parse tree with source positions; a
:class:`lark.Transformer` maps it onto the frozen dataclasses in
:mod:`thriftlint.idl.nodes`.  Syntax errors from lark are re-raised as
:class:`ParseError` carrying file, line and column.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from thriftlint.idl.nodes import (
    BASE_TYPE_NAMES,
    Annotation,
    BaseType,
    Constant,
    ConstantBoolean,
    ConstantDouble,
    ConstantInteger,
    ConstantList,
    ConstantMap,
    ConstantMapItem,
    ConstantReference,
    ConstantString,
    CppInclude,
    Enum,
    EnumItem,
    Field,
    Function,
    Include,
    ListType,
    MapType,
    Namespace,
    Program,
    Service,
    SetType,
    Struct,
    Typedef,
    TypeReference,
)

if TYPE_CHECKING:
    from pathlib import Path

    from lark.tree import Meta

    from thriftlint.idl.nodes import Definition, Header

THRIFT_GRAMMAR = r"""
start: _item*

_item: (_header | _definition) _sep?
_sep: "," | ";"

// Headers
_header: include | cpp_include | namespace
include: "include" STRING
cpp_include: "cpp_include" STRING
namespace: "namespace" (STAR | IDENT) (IDENT | STRING)

// Definitions
_definition: const | typedef | enum | struct | union | exception | service

const: "const" field_type IDENT "=" const_value [annotations]
typedef: "typedef" field_type IDENT [annotations]

enum: "enum" IDENT "{" enum_item* "}" [annotations]
enum_item: IDENT ["=" int_value] [annotations] _sep?

struct: "struct" IDENT "xsd_all"? "{" field* "}" [annotations]
union: "union" IDENT "xsd_all"? "{" field* "}" [annotations]
exception: "exception" IDENT "{" field* "}" [annotations]

service: "service" IDENT ["extends" IDENT] "{" function* "}" [annotations]
function: [ONEWAY] (VOID | field_type) IDENT "(" field* ")" [throws] [annotations] _sep?
throws: "throws" "(" field* ")"

field: [field_id] [requiredness] field_type IDENT ["=" const_value] [annotations] _sep?
field_id: int_value ":"
requiredness: REQUIRED | OPTIONAL

// Types
?field_type: simple_type | map_type | list_type | set_type
simple_type: IDENT [annotations]
map_type: "map" [cpp_type] "<" field_type "," field_type ">" [annotations]
set_type: "set" [cpp_type] "<" field_type ">" [annotations]
list_type: "list" "<" field_type ">" [cpp_type] [annotations]
cpp_type: "cpp_type" STRING

// Constant values
const_value: int_value -> const_int
    | DOUBLE -> const_double
    | STRING -> const_string
    | IDENT -> const_ident
    | "[" (const_value _sep?)* "]" -> const_list
    | "{" (const_map_item _sep?)* "}" -> const_map
const_map_item: const_value ":" const_value
int_value: INT | HEX

// Annotations
annotations: "(" (annotation _sep?)* ")"
annotation: IDENT ["=" STRING]

// Terminals
ONEWAY: "oneway"
VOID: "void"
REQUIRED: "required"
OPTIONAL: "optional"
STAR: "*"

IDENT: /[A-Za-z_][A-Za-z0-9_.]*/
STRING: /"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*'/
HEX.2: /[+-]?0[xX][0-9a-fA-F]+/
DOUBLE.2: /[+-]?(?:[0-9]+\.[0-9]*(?:[eE][+-]?[0-9]+)?|\.[0-9]+(?:[eE][+-]?[0-9]+)?|[0-9]+[eE][+-]?[0-9]+)/
INT: /[+-]?[0-9]+/

LINE_COMMENT: /(?:\/\/|#)[^\n]*/
BLOCK_COMMENT: /\/\*[\s\S]*?\*\//

%import common.WS
%ignore WS
%ignore LINE_COMMENT
%ignore BLOCK_COMMENT
"""

# Human-readable names for pattern terminals in error messages.
_TERMINAL_NAMES = {
    "IDENT": "identifier",
    "STRING": "string",
    "INT": "integer",
    "HEX": "integer",
    "DOUBLE": "number",
    "$END": "end of file",
}

# Beyond this many alternatives an error just names the offending token.
_MAX_EXPECTED = 3

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "'": "'"}
_ESCAPE_RE = re.compile(r"\\(.)")

_parser = Lark(
    THRIFT_GRAMMAR,
    parser="lalr",
    lexer="contextual",
    propagate_positions=True,
    maybe_placeholders=True,
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ParseError(Exception):
    """Raised when a Thrift document is syntactically invalid."""

    def __init__(self, filename: str, line: int, column: int, message: str) -> None:
        super().__init__(f"{filename}:{line}:{column}: {message}")
        self.filename = filename
        self.line = line
        self.column = column
        self.message = message


# ---------------------------------------------------------------------------
# Tree -> nodes
# ---------------------------------------------------------------------------


def _unquote(literal: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), literal[1:-1])


def _pos(meta: Meta) -> dict[str, int]:
    return {"line": meta.line, "column": meta.column}


def _annotations(value: tuple[Annotation, ...] | None) -> tuple[Annotation, ...]:
    return value or ()


@v_args(meta=True)
class _ToNodes(Transformer[Token, Program]):
    """Builds :mod:`~thriftlint.idl.nodes` objects bottom-up from the lark tree."""

    def start(self, meta: Meta, children: list[Any]) -> Program:
        headers: list[Header] = []
        definitions: list[Definition] = []
        for child in children:
            if isinstance(child, (Include, CppInclude, Namespace)):
                headers.append(child)
            else:
                definitions.append(child)
        return Program(headers=tuple(headers), definitions=tuple(definitions))

    # -- headers --

    def include(self, meta: Meta, children: list[Any]) -> Include:
        (path,) = children
        return Include(_unquote(path), **_pos(meta))

    def cpp_include(self, meta: Meta, children: list[Any]) -> CppInclude:
        (path,) = children
        return CppInclude(_unquote(path), **_pos(meta))

    def namespace(self, meta: Meta, children: list[Any]) -> Namespace:
        scope, name = children
        value = _unquote(name) if name.type == "STRING" else str(name)
        return Namespace(str(scope), value, **_pos(meta))

    # -- definitions --

    def const(self, meta: Meta, children: list[Any]) -> Constant:
        field_type, name, value, annotations = children
        return Constant(
            str(name), field_type, value, annotations=_annotations(annotations), **_pos(meta)
        )

    def typedef(self, meta: Meta, children: list[Any]) -> Typedef:
        field_type, name, annotations = children
        return Typedef(str(name), field_type, annotations=_annotations(annotations), **_pos(meta))

    def enum(self, meta: Meta, children: list[Any]) -> Enum:
        name, *items, annotations = children
        return Enum(str(name), tuple(items), annotations=_annotations(annotations), **_pos(meta))

    def enum_item(self, meta: Meta, children: list[Any]) -> EnumItem:
        name, value, annotations = children
        return EnumItem(str(name), value, annotations=_annotations(annotations), **_pos(meta))

    def _struct(self, kind: str, meta: Meta, children: list[Any]) -> Struct:
        name, *fields, annotations = children
        return Struct(
            str(name), kind, tuple(fields), annotations=_annotations(annotations), **_pos(meta)
        )

    def struct(self, meta: Meta, children: list[Any]) -> Struct:
        return self._struct("struct", meta, children)

    def union(self, meta: Meta, children: list[Any]) -> Struct:
        return self._struct("union", meta, children)

    def exception(self, meta: Meta, children: list[Any]) -> Struct:
        return self._struct("exception", meta, children)

    def service(self, meta: Meta, children: list[Any]) -> Service:
        name, parent, *functions, annotations = children
        return Service(
            str(name),
            tuple(functions),
            parent=None if parent is None else str(parent),
            annotations=_annotations(annotations),
            **_pos(meta),
        )

    def function(self, meta: Meta, children: list[Any]) -> Function:
        oneway, return_type, name, *rest = children
        *parameters, exceptions, annotations = rest
        if isinstance(return_type, Token):
            return_type = None
        return Function(
            str(name),
            return_type,
            tuple(parameters),
            exceptions or (),
            oneway=oneway is not None,
            annotations=_annotations(annotations),
            **_pos(meta),
        )

    def throws(self, meta: Meta, children: list[Any]) -> tuple[Field, ...]:
        return tuple(children)

    def field(self, meta: Meta, children: list[Any]) -> Field:
        field_id, requiredness, field_type, name, default, annotations = children
        return Field(
            str(name),
            field_type,
            id=field_id,
            requiredness=requiredness,
            default=default,
            annotations=_annotations(annotations),
            **_pos(meta),
        )

    def field_id(self, meta: Meta, children: list[Any]) -> int:
        return children[0]

    def requiredness(self, meta: Meta, children: list[Any]) -> str:
        return str(children[0])

    # -- types --

    def simple_type(self, meta: Meta, children: list[Any]) -> BaseType | TypeReference:
        name, annotations = children
        if name in BASE_TYPE_NAMES:
            return BaseType(str(name), annotations=_annotations(annotations), **_pos(meta))
        return TypeReference(str(name), **_pos(meta))

    def map_type(self, meta: Meta, children: list[Any]) -> MapType:
        _cpp_type, key_type, value_type, annotations = children
        return MapType(key_type, value_type, annotations=_annotations(annotations), **_pos(meta))

    def set_type(self, meta: Meta, children: list[Any]) -> SetType:
        _cpp_type, value_type, annotations = children
        return SetType(value_type, annotations=_annotations(annotations), **_pos(meta))

    def list_type(self, meta: Meta, children: list[Any]) -> ListType:
        value_type, _cpp_type, annotations = children
        return ListType(value_type, annotations=_annotations(annotations), **_pos(meta))

    def cpp_type(self, meta: Meta, children: list[Any]) -> str:
        return _unquote(children[0])

    # -- constant values --

    def int_value(self, meta: Meta, children: list[Any]) -> int:
        (token,) = children
        return int(token, 16) if token.type == "HEX" else int(token)

    def const_int(self, meta: Meta, children: list[Any]) -> ConstantInteger:
        return ConstantInteger(children[0], **_pos(meta))

    def const_double(self, meta: Meta, children: list[Any]) -> ConstantDouble:
        return ConstantDouble(float(children[0]), **_pos(meta))

    def const_string(self, meta: Meta, children: list[Any]) -> ConstantString:
        return ConstantString(_unquote(children[0]), **_pos(meta))

    def const_ident(self, meta: Meta, children: list[Any]) -> ConstantBoolean | ConstantReference:
        name = str(children[0])
        if name in ("true", "false"):
            return ConstantBoolean(name == "true", **_pos(meta))
        return ConstantReference(name, **_pos(meta))

    def const_list(self, meta: Meta, children: list[Any]) -> ConstantList:
        return ConstantList(tuple(children), **_pos(meta))

    def const_map(self, meta: Meta, children: list[Any]) -> ConstantMap:
        return ConstantMap(tuple(children), **_pos(meta))

    def const_map_item(self, meta: Meta, children: list[Any]) -> ConstantMapItem:
        key, value = children
        return ConstantMapItem(key, value, **_pos(meta))

    # -- annotations --

    def annotations(self, meta: Meta, children: list[Any]) -> tuple[Annotation, ...]:
        return tuple(children)

    def annotation(self, meta: Meta, children: list[Any]) -> Annotation:
        name, value = children
        return Annotation(str(name), "" if value is None else _unquote(value), **_pos(meta))


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def _describe_terminal(name: str) -> str:
    if name in _TERMINAL_NAMES:
        return _TERMINAL_NAMES[name]
    try:
        pattern = _parser.get_terminal(name).pattern
    except KeyError:
        return name.lower()
    return repr(pattern.value) if pattern.type == "str" else name.lower()


def _to_parse_error(exc: UnexpectedInput, text: str, filename: str) -> ParseError:
    if isinstance(exc, UnexpectedCharacters):
        return ParseError(filename, exc.line, exc.column, f"unexpected character {exc.char!r}")

    if isinstance(exc, UnexpectedToken):
        token = exc.token
        found = "end of file" if token.type == "$END" else repr(str(token))
        expected = sorted({_describe_terminal(name) for name in exc.expected})
        if expected and len(expected) <= _MAX_EXPECTED:
            message = f"expected {' or '.join(expected)}, found {found}"
        else:
            message = f"unexpected {found}"
        line = token.line if isinstance(token.line, int) else exc.line
        column = token.column if isinstance(token.column, int) else exc.column
        return ParseError(filename, line, column, message)

    # Input ended inside a construct.
    line = text.count("\n") + 1
    column = len(text) - (text.rfind("\n") + 1) + 1
    return ParseError(filename, line, column, "unexpected end of file")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse(text: str, filename: str = "<string>") -> Program:
    """Parse Thrift source *text* into a :class:`Program`.

    Raises :class:`ParseError` on invalid input.
    """
    try:
        tree = _parser.parse(text)
    except UnexpectedInput as exc:
        raise _to_parse_error(exc, text, filename) from None
    return _ToNodes().transform(tree)


def parse_file(path: Path) -> Program:
    """Read and parse the Thrift file at *path*.

    Raises ``OSError`` when the file cannot be read and :class:`ParseError`
    when it is not valid Thrift.
    """
    text = path.read_text(encoding="utf-8")
    return parse(text, str(path))
