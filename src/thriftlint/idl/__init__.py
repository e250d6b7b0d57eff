"""IDL domain: Thrift AST model, parser, walker, and symbol resolution."""

from thriftlint.idl.nodes import (
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
from thriftlint.idl.parser import ParseError, parse, parse_file
from thriftlint.idl.resolve import resolve_constant, resolve_type
from thriftlint.idl.walker import children, walk

__all__ = [
    "Annotation",
    "BaseType",
    "Constant",
    "ConstantBoolean",
    "ConstantDouble",
    "ConstantInteger",
    "ConstantList",
    "ConstantMap",
    "ConstantMapItem",
    "ConstantReference",
    "ConstantString",
    "CppInclude",
    "Enum",
    "EnumItem",
    "Field",
    "Function",
    "Include",
    "ListType",
    "MapType",
    "Namespace",
    "ParseError",
    "Program",
    "Service",
    "SetType",
    "Struct",
    "TypeReference",
    "Typedef",
    "children",
    "parse",
    "parse_file",
    "resolve_constant",
    "resolve_type",
    "walk",
]
