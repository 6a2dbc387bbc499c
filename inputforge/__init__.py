"""
inputforge: structured-input mutation engine.

Enumerates mutated variants of nested request bodies (objects, lists,
scalars) for a web-application scanner. Generation is lazy, deterministic
and de-duplicated per run.
"""

from .contracts.enums import FormatId, MutationStrategyTag
from .contracts.errors import (
    ContractViolation,
    InvalidPayload,
    MutationEngineError,
    NameRejected,
    ParseError,
    PathNotFound,
    SoftSkip,
)
from .contracts.models import Mutant, MutationOptions
from .mutate.inputs import InputSet
from .mutate.session import MutationSession, generate

__all__ = [
    "ContractViolation",
    "FormatId",
    "InputSet",
    "InvalidPayload",
    "Mutant",
    "MutationEngineError",
    "MutationOptions",
    "MutationSession",
    "MutationStrategyTag",
    "NameRejected",
    "ParseError",
    "PathNotFound",
    "SoftSkip",
    "generate",
]
