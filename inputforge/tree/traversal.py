from __future__ import annotations

from typing import Iterator, List, Tuple

from ..contracts.enums import NodeKind
from .value import Path, ScalarNode, StructuredValue


def iter_leaves(tree: StructuredValue, prefix: Path = ()) -> Iterator[Tuple[Path, ScalarNode]]:
    """
    Pre-order depth-first walk yielding (path, leaf) for every scalar.

    Object entries come in stored order, list items by ascending index.
    Containers are never yielded, so an empty object or list contributes
    nothing. An explicit stack keeps deep trees clear of the recursion limit.
    """
    stack: List[Tuple[Path, StructuredValue]] = [(tuple(prefix), tree)]
    while stack:
        path, node = stack.pop()

        if node.kind is NodeKind.SCALAR:
            yield path, node
        elif node.kind is NodeKind.OBJECT:
            children = [(path + (k,), v) for k, v in node.items()]
            stack.extend(reversed(children))
        else:
            children = [(path + (i,), v) for i, v in enumerate(node)]
            stack.extend(reversed(children))


class Traversal:
    """Restartable leaf sequence over a tree; each iteration walks afresh."""

    def __init__(self, tree: StructuredValue) -> None:
        self._tree = tree

    def __iter__(self) -> Iterator[Tuple[Path, ScalarNode]]:
        return iter_leaves(self._tree)

    def paths(self) -> List[Path]:
        return [path for path, _ in self]

    def is_empty(self) -> bool:
        return next(iter(self), None) is None


def scalar_text(leaf: ScalarNode) -> str:
    """String form of a leaf as handed to a formatter as the original value."""
    value = leaf.value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
