"""
Default payload formatter.

Each variant decides how the payload sits relative to the value it replaces:

    straight     payload
    append       original + payload
    null         payload + NUL
    append_null  original + payload + NUL
    semicolon    ";" + payload

Scanners with their own payload library plug in a different Formatter.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..contracts.enums import FormatId
from ..contracts.errors import ContractViolation

NULL_BYTE = "\0"


@dataclass(frozen=True)
class DefaultFormatter:
    def format(self, payload: str, variant: FormatId, original: str) -> str:
        if variant == FormatId.STRAIGHT:
            return payload
        if variant == FormatId.APPEND:
            return original + payload
        if variant == FormatId.NULL:
            return payload + NULL_BYTE
        if variant == FormatId.APPEND_NULL:
            return original + payload + NULL_BYTE
        if variant == FormatId.SEMICOLON:
            return ";" + payload
        raise ContractViolation(f"Unknown format variant: {variant!r}")
