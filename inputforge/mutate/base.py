from __future__ import annotations

from typing import Protocol

from ..contracts.enums import FormatId
from ..tree.value import Path, StructuredValue


class SourceParser(Protocol):
    def parse(self, raw: bytes) -> StructuredValue: ...  # raises ParseError


class Formatter(Protocol):
    def format(self, payload: str, variant: FormatId, original: str) -> str: ...


class ImmutabilityFilter(Protocol):
    def is_immutable(self, path: Path) -> bool: ...


class NameValidator(Protocol):
    def is_valid_input_name(self, name: str) -> bool: ...
    def is_valid_as_input_name_payload(self, payload: str) -> bool: ...


class PayloadValidator(Protocol):
    def is_valid_input_data(self, payload: str) -> bool: ...


class DebugSink(Protocol):
    """Purely observational; a report never changes control flow."""

    def report(self, message: str, payload: str) -> None: ...
