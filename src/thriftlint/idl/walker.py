"""Depth-first AST traversal in source order."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator


def _is_node(value: object) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def children(node: Any) -> Iterator[Any]:
    """Yield the direct child nodes of *node* in field-declaration order."""
    for field in dataclasses.fields(node):
        value = getattr(node, field.name)
        if isinstance(value, tuple):
            for item in value:
                if _is_node(item):
                    yield item
        elif _is_node(value):
            yield value


def walk(root: Any) -> Iterator[tuple[Any, tuple[Any, ...]]]:
    """Yield ``(node, parents)`` for *root* and every descendant, pre-order.

    *parents* is the ancestor chain, outermost first (empty for *root*).
    Uses an explicit stack so deeply nested types cannot hit the recursion limit.
    """
    stack: list[tuple[Any, tuple[Any, ...]]] = [(root, ())]
    while stack:
        node, parents = stack.pop()
        yield node, parents
        lineage = (*parents, node)
        # Push in reverse so the first child is visited first.
        stack.extend((child, lineage) for child in reversed(list(children(node))))
