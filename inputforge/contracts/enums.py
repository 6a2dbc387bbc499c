from __future__ import annotations

from enum import Enum


class NodeKind(str, Enum):
    OBJECT = "object"
    LIST = "list"
    SCALAR = "scalar"


class MutationStrategyTag(str, Enum):
    VALUE = "value"
    EXTRA = "extra"
    NAME = "name"


class FormatId(str, Enum):
    STRAIGHT = "straight"
    APPEND = "append"
    NULL = "null"
    APPEND_NULL = "append_null"
    SEMICOLON = "semicolon"


DEFAULT_FORMATS = (
    FormatId.STRAIGHT,
    FormatId.APPEND,
    FormatId.NULL,
    FormatId.APPEND_NULL,
)
