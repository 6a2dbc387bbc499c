"""
Structured value model.

Nested request inputs are a tagged variant of three node kinds:

- ObjectNode: name -> node, insertion order kept for stable output only
- ListNode:   index-addressed sequence of nodes
- ScalarNode: str / int / float / bool / None leaf

Nodes never change after construction. `set_at` rebuilds every container on
the path from the root to the written node and shares the untouched siblings.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ..contracts.enums import NodeKind
from ..contracts.errors import PathNotFound
from .canonical import canonicalize, compute_hash

Key = Union[str, int]
Path = Tuple[Key, ...]
ScalarValue = Union[str, int, float, bool, None]

_SCALAR_TYPES = (str, int, float, bool)


class StructuredValue:
    """Base of the node variant. Dispatch on `kind`, not on the Python type."""

    __slots__ = ()
    kind: NodeKind

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructuredValue):
            return NotImplemented
        return structurally_equal(self, other)

    def __hash__(self) -> int:
        return hash(canonicalize(self))


class ScalarNode(StructuredValue):
    __slots__ = ("_value",)
    kind = NodeKind.SCALAR

    def __init__(self, value: ScalarValue) -> None:
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise TypeError(f"Unsupported scalar type: {type(value).__name__}")
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"Non-finite float is not a valid scalar: {value!r}")
        self._value = value

    @property
    def value(self) -> ScalarValue:
        return self._value

    def __repr__(self) -> str:
        return f"ScalarNode({self._value!r})"


class ObjectNode(StructuredValue):
    __slots__ = ("_entries",)
    kind = NodeKind.OBJECT

    def __init__(self, entries: Union[Mapping[str, StructuredValue], Iterable[Tuple[str, StructuredValue]]] = ()) -> None:
        data = dict(entries)
        for k, v in data.items():
            if not isinstance(k, str):
                raise TypeError(f"Object keys must be strings, got {type(k).__name__}")
            if not isinstance(v, StructuredValue):
                raise TypeError(f"Object entry {k!r} is not a StructuredValue")
        self._entries: Dict[str, StructuredValue] = data

    def __getitem__(self, key: str) -> StructuredValue:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> List[str]:
        return list(self._entries)

    def items(self) -> Iterator[Tuple[str, StructuredValue]]:
        return iter(list(self._entries.items()))

    def replace(self, key: str, node: StructuredValue) -> "ObjectNode":
        entries = dict(self._entries)
        entries[key] = node
        return ObjectNode(entries)

    def merge(self, other: Mapping[str, StructuredValue]) -> "ObjectNode":
        entries = dict(self._entries)
        entries.update(other)
        return ObjectNode(entries)

    def __repr__(self) -> str:
        return f"ObjectNode({self._entries!r})"


class ListNode(StructuredValue):
    __slots__ = ("_items",)
    kind = NodeKind.LIST

    def __init__(self, items: Iterable[StructuredValue] = ()) -> None:
        data = tuple(items)
        for i, v in enumerate(data):
            if not isinstance(v, StructuredValue):
                raise TypeError(f"List item {i} is not a StructuredValue")
        self._items: Tuple[StructuredValue, ...] = data

    def __getitem__(self, index: int) -> StructuredValue:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[StructuredValue]:
        return iter(self._items)

    def replace(self, index: int, node: StructuredValue) -> "ListNode":
        items = list(self._items)
        items[index] = node
        return ListNode(items)

    def __repr__(self) -> str:
        return f"ListNode({list(self._items)!r})"


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------
#
# All conversions share one post-order rebuild over an explicit stack, so
# nesting depth is bounded by memory rather than the interpreter's
# recursion limit.

def _rebuild(root: Any, split: Callable[[Any], Optional[Tuple[NodeKind, List[str], List[Any]]]],
             leaf: Callable[[Any], Any], join: Callable[[NodeKind, List[str], List[Any]], Any]) -> Any:
    """
    `split` returns (kind, keys, children) for a container and None for a
    leaf. Children are rebuilt first, then `join` assembles their parent.
    """
    parts = split(root)
    if parts is None:
        return leaf(root)

    # frame: kind, keys, children, rebuilt children
    frames = [(parts[0], parts[1], parts[2], [])]
    while True:
        kind, keys, children, done = frames[-1]
        if len(done) < len(children):
            child = children[len(done)]
            sub = split(child)
            if sub is None:
                done.append(leaf(child))
            else:
                frames.append((sub[0], sub[1], sub[2], []))
            continue

        built = join(kind, keys, done)
        frames.pop()
        if not frames:
            return built
        frames[-1][3].append(built)


def _split_node(node: StructuredValue):
    if node.kind is NodeKind.OBJECT:
        keys = node.keys()
        return NodeKind.OBJECT, keys, [node[k] for k in keys]
    if node.kind is NodeKind.LIST:
        return NodeKind.LIST, [], list(node)
    return None


def _join_nodes(kind: NodeKind, keys: List[str], children: List[StructuredValue]) -> StructuredValue:
    if kind is NodeKind.OBJECT:
        return ObjectNode(zip(keys, children))
    return ListNode(children)


def _split_python(data: Any):
    if isinstance(data, StructuredValue):
        return None
    if isinstance(data, Mapping):
        keys = list(data)
        return NodeKind.OBJECT, keys, [data[k] for k in keys]
    if isinstance(data, (list, tuple)):
        return NodeKind.LIST, [], list(data)
    return None


def _join_python(kind: NodeKind, keys: List[str], children: List[Any]) -> Any:
    if kind is NodeKind.OBJECT:
        return dict(zip(keys, children))
    return children


def from_python(data: Any) -> StructuredValue:
    """Build a tree from plain dict / list / scalar data. Nodes pass through."""
    return _rebuild(
        data,
        _split_python,
        lambda x: x if isinstance(x, StructuredValue) else ScalarNode(x),
        _join_nodes,
    )


def to_python(node: StructuredValue) -> Any:
    return _rebuild(node, _split_node, lambda leaf: leaf.value, _join_python)


def deep_clone(node: StructuredValue) -> StructuredValue:
    """Full independent copy of `node`; no container is shared with the input."""
    return _rebuild(node, _split_node, lambda leaf: ScalarNode(leaf.value), _join_nodes)


def structurally_equal(a: StructuredValue, b: StructuredValue) -> bool:
    """Same shape and leaf values; object key order is ignored."""
    return canonicalize(a) == canonicalize(b)


# ---------------------------------------------------------------------------
# Path-addressed access
# ---------------------------------------------------------------------------

def _is_index(key: object) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def _child(node: StructuredValue, key: Key, path: Sequence[Key], depth: int) -> StructuredValue:
    if isinstance(key, str):
        if node.kind is not NodeKind.OBJECT:
            raise PathNotFound(path, depth, f"name key {key!r} applied to a {node.kind.value}")
        if key not in node:
            raise PathNotFound(path, depth, f"no entry named {key!r}")
        return node[key]

    if _is_index(key):
        if node.kind is not NodeKind.LIST:
            raise PathNotFound(path, depth, f"index {key!r} applied to a {node.kind.value}")
        if not 0 <= key < len(node):
            raise PathNotFound(path, depth, f"index {key} out of range for list of {len(node)}")
        return node[key]

    raise PathNotFound(path, depth, f"unsupported key type {type(key).__name__}")


def get(tree: StructuredValue, path: Sequence[Key]) -> StructuredValue:
    """Return the node at `path`; the empty path is the root itself."""
    path = tuple(path)
    node = tree
    for depth, key in enumerate(path):
        node = _child(node, key, path, depth)
    return node


def set_at(tree: StructuredValue, path: Sequence[Key], value: Any) -> StructuredValue:
    """
    Return a new tree with `value` written at `path`.

    Intermediate keys must resolve to containers of the matching kind. The final
    key may name a missing object entry (it is added) but a list index must
    already exist. `tree` itself is never altered.
    """
    path = tuple(path)
    node = from_python(value)
    if not path:
        return node

    spine: List[StructuredValue] = [tree]
    for depth, key in enumerate(path[:-1]):
        spine.append(_child(spine[-1], key, path, depth))

    last = path[-1]
    parent = spine[-1]
    if isinstance(last, str):
        if parent.kind is not NodeKind.OBJECT:
            raise PathNotFound(path, len(path) - 1, f"name key {last!r} applied to a {parent.kind.value}")
    else:
        # Raises for a non-list parent or a missing index.
        _child(parent, last, path, len(path) - 1)

    rebuilt = parent.replace(last, node)
    for depth in range(len(path) - 2, -1, -1):
        rebuilt = spine[depth].replace(path[depth], rebuilt)
    return rebuilt
