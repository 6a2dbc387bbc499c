from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import DEFAULT_FORMATS, FormatId, MutationStrategyTag

if TYPE_CHECKING:
    from ..base.config import EngineConfig
    from ..mutate.inputs import InputSet
    from ..tree.value import Path

EXTRA_NAME = "extra_inputforge_input"
FUZZ_NAME = "inputforge_name_fuzz"
FUZZ_NAME_VALUE = "inputforge_name_fuzz_value"


class MutationOptions(BaseModel):
    """
    Options for one generation run. Frozen so a run can never observe
    its options changing underneath it.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    formats: Tuple[FormatId, ...] = Field(default=DEFAULT_FORMATS, max_length=32)
    enable_value_mutation: bool = True
    enable_extra_parameter: bool = False
    enable_name_fuzzing: bool = False

    extra_param_name: str = Field(default=EXTRA_NAME, min_length=1, max_length=256)
    fuzz_name: str = Field(default=FUZZ_NAME, min_length=1, max_length=256)
    fuzz_name_value: str = Field(default=FUZZ_NAME_VALUE, min_length=1, max_length=2048)

    @field_validator("formats")
    @classmethod
    def dedupe_formats(cls, v: Tuple[FormatId, ...]) -> Tuple[FormatId, ...]:
        # Ordered set: first occurrence wins.
        return tuple(dict.fromkeys(v))

    @classmethod
    def from_config(cls, config: "EngineConfig") -> "MutationOptions":
        m = config.mutation
        return cls(
            formats=m.formats,
            enable_value_mutation=m.enable_value_mutation,
            enable_extra_parameter=m.enable_extra_parameter,
            enable_name_fuzzing=m.enable_name_fuzzing,
            extra_param_name=m.extra_param_name,
            fuzz_name=m.fuzz_name,
            fuzz_name_value=m.fuzz_name_value,
        )


@dataclass(frozen=True)
class Mutant:
    """
    One generated variant of an input set. Owned by the caller once yielded.

    `affected_path` is None for strategies that add an entry rather than
    rewrite an existing leaf; `affected_input_name` still names that entry.
    """
    inputs: "InputSet"
    strategy: MutationStrategyTag
    seed: str
    affected_value: str
    affected_input_name: str
    format: Optional[FormatId] = None
    affected_path: Optional["Path"] = None

    @property
    def dedup_key(self) -> str:
        return self.inputs.dedup_key

    def to_python(self):
        return self.inputs.to_python()

    def describe(self) -> str:
        where = list(self.affected_path) if self.affected_path is not None else self.affected_input_name
        fmt = self.format.value if self.format else "-"
        return f"{self.strategy.value}:{fmt} @ {where!r} seed={self.seed!r}"
