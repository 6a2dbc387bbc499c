from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

from ..tree.value import Path


@dataclass(frozen=True)
class ImmutableInputNames:
    """
    Marks a path immutable when any name on it is listed, so a protected
    field (e.g. a CSRF token) stays protected wherever it is nested.
    """
    names: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, names: Iterable[str]) -> "ImmutableInputNames":
        return cls(frozenset(names))

    def is_immutable(self, path: Path) -> bool:
        return any(isinstance(key, str) and key in self.names for key in path)


@dataclass(frozen=True)
class PermissiveInputValidator:
    """
    Accepts any input data; names must be non-empty and free of NUL bytes.
    Serves as both the name validator and the payload validator.
    """

    def is_valid_input_name(self, name: str) -> bool:
        return bool(name) and "\0" not in name

    def is_valid_as_input_name_payload(self, payload: str) -> bool:
        return self.is_valid_input_name(payload)

    def is_valid_input_data(self, payload: str) -> bool:
        return True
