from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from ..contracts.enums import NodeKind
from ..contracts.errors import ContractViolation, ParseError
from ..tree.traversal import Traversal, iter_leaves
from ..tree.value import (
    Key,
    Path,
    StructuredValue,
    compute_hash,
    deep_clone,
    from_python,
    get,
    set_at,
    structurally_equal,
    to_python,
)
from .base import SourceParser


class InputSet:
    """
    Inputs of one element instance plus the baseline captured at construction.

    Every write returns a new InputSet carrying the same baseline snapshot, so
    derived sets can always be diffed against, or reset to, what the element
    started with.
    """

    __slots__ = ("_inputs", "_baseline")

    def __init__(self, inputs: Any = None) -> None:
        root = from_python({} if inputs is None else inputs)
        self._inputs: StructuredValue = root
        self._baseline: StructuredValue = deep_clone(root)

    @classmethod
    def from_python(cls, data: Any) -> "InputSet":
        return cls(data)

    @classmethod
    def from_source(cls, raw: bytes, parser: SourceParser) -> "InputSet":
        """
        Build from a raw body through `parser`. A parse failure means no input
        set exists for the element; it always surfaces as ParseError.
        """
        try:
            tree = parser.parse(raw)
        except ParseError:
            raise
        except ValueError as e:
            raise ParseError(f"Source parser rejected body: {e}") from e
        return cls(tree)

    def _derive(self, root: StructuredValue) -> "InputSet":
        derived = InputSet.__new__(InputSet)
        derived._inputs = root
        derived._baseline = self._baseline
        return derived

    @property
    def inputs(self) -> StructuredValue:
        return self._inputs

    @property
    def baseline(self) -> StructuredValue:
        return self._baseline

    @property
    def dedup_key(self) -> str:
        return compute_hash(self._inputs)

    def leaves(self) -> Traversal:
        return Traversal(self._inputs)

    def is_empty(self) -> bool:
        return self.leaves().is_empty()

    def get(self, path: Sequence[Key]) -> StructuredValue:
        return get(self._inputs, path)

    def with_value(self, path: Sequence[Key], value: Any) -> "InputSet":
        return self._derive(set_at(self._inputs, path, value))

    def merge(self, entries: Mapping[str, Any]) -> "InputSet":
        """Add or overwrite top-level entries of an object root."""
        if self._inputs.kind is not NodeKind.OBJECT:
            raise ContractViolation(f"Cannot merge named entries into a {self._inputs.kind.value} root")
        return self._derive(self._inputs.merge({k: from_python(v) for k, v in entries.items()}))

    def update(self, data: Any) -> "InputSet":
        """Write every leaf of `data` at its own path, leaving other leaves alone."""
        result = self
        for path, leaf in iter_leaves(from_python(data)):
            result = result.with_value(path, leaf)
        return result

    def changed_paths(self) -> List[Path]:
        """Leaf paths whose value differs from the baseline, or that the baseline lacks."""
        original = dict(iter_leaves(self._baseline))
        return [
            path for path, leaf in iter_leaves(self._inputs)
            if path not in original or original[path] != leaf
        ]

    def reset(self) -> "InputSet":
        return self._derive(self._baseline)

    def to_python(self) -> Any:
        return to_python(self._inputs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InputSet):
            return NotImplemented
        return structurally_equal(self._inputs, other._inputs)

    def __hash__(self) -> int:
        return hash(self.dedup_key)

    def __repr__(self) -> str:
        return f"InputSet({self.to_python()!r})"
