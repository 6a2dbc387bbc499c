"""
Mutation strategies.

Each strategy first runs `preflight`, which raises a SoftSkip when it cannot
apply to this payload, then yields candidate mutants built from the baseline.
Candidates are not de-duplicated here; the session routes every one of them
through the run's ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Protocol, Tuple

from ..contracts.enums import MutationStrategyTag, NodeKind
from ..contracts.errors import InvalidPayload, NameRejected
from ..contracts.models import Mutant, MutationOptions
from ..tree.traversal import scalar_text
from ..tree.value import Path, ScalarNode
from .base import Formatter, ImmutabilityFilter, NameValidator, PayloadValidator
from .inputs import InputSet


@dataclass(frozen=True)
class StrategyContext:
    formatter: Formatter
    immutability: ImmutabilityFilter
    name_validator: NameValidator
    payload_validator: PayloadValidator


class MutationStrategy(Protocol):
    tag: MutationStrategyTag

    def enabled(self, options: MutationOptions) -> bool: ...

    def preflight(self, baseline: InputSet, payload: str, options: MutationOptions, ctx: StrategyContext) -> None: ...

    def candidates(
        self, baseline: InputSet, payload: str, options: MutationOptions, ctx: StrategyContext
    ) -> Iterator[Mutant]: ...


def _input_name(path: Path) -> str:
    return str(path[-1]) if path else ""


def _require_object_root(baseline: InputSet, payload: str, what: str) -> None:
    if baseline.inputs.kind is not NodeKind.OBJECT:
        raise NameRejected(
            f"{what} needs an object root, element inputs are a {baseline.inputs.kind.value}", payload
        )


class ValueMutation:
    """Rewrites one mutable leaf at a time with the formatted payload."""

    tag = MutationStrategyTag.VALUE

    def enabled(self, options: MutationOptions) -> bool:
        return options.enable_value_mutation

    def preflight(self, baseline: InputSet, payload: str, options: MutationOptions, ctx: StrategyContext) -> None:
        if not ctx.payload_validator.is_valid_input_data(payload):
            raise InvalidPayload("Payload not supported as input data", payload)

    def candidates(
        self, baseline: InputSet, payload: str, options: MutationOptions, ctx: StrategyContext
    ) -> Iterator[Mutant]:
        targets: List[Tuple[Path, ScalarNode]] = [
            (path, leaf) for path, leaf in baseline.leaves()
            if not ctx.immutability.is_immutable(path)
        ]

        for fmt in options.formats:
            for path, leaf in targets:
                mutated = ctx.formatter.format(payload, fmt, scalar_text(leaf))
                yield Mutant(
                    inputs=baseline.with_value(path, mutated),
                    strategy=self.tag,
                    seed=payload,
                    affected_value=mutated,
                    affected_input_name=_input_name(path),
                    format=fmt,
                    affected_path=path,
                )


class ExtraParameterInjection:
    """Adds one reserved top-level entry carrying the formatted payload."""

    tag = MutationStrategyTag.EXTRA

    def enabled(self, options: MutationOptions) -> bool:
        return options.enable_extra_parameter

    def preflight(self, baseline: InputSet, payload: str, options: MutationOptions, ctx: StrategyContext) -> None:
        _require_object_root(baseline, payload, "Extra parameter injection")
        if not ctx.name_validator.is_valid_input_name(options.extra_param_name):
            raise NameRejected(
                f"Extra name {options.extra_param_name!r} not supported as input name", payload
            )

    def candidates(
        self, baseline: InputSet, payload: str, options: MutationOptions, ctx: StrategyContext
    ) -> Iterator[Mutant]:
        name = options.extra_param_name
        for fmt in options.formats:
            # Nothing to merge against: the entry does not exist in the baseline.
            formatted = ctx.formatter.format(payload, fmt, "")
            yield Mutant(
                inputs=baseline.merge({name: formatted}),
                strategy=self.tag,
                seed=payload,
                affected_value=formatted,
                affected_input_name=name,
                format=fmt,
            )


class NameFuzzing:
    """Uses the payload itself as a top-level input name."""

    tag = MutationStrategyTag.NAME

    def enabled(self, options: MutationOptions) -> bool:
        return options.enable_name_fuzzing

    def preflight(self, baseline: InputSet, payload: str, options: MutationOptions, ctx: StrategyContext) -> None:
        _require_object_root(baseline, payload, "Parameter name fuzzing")
        if not ctx.name_validator.is_valid_as_input_name_payload(payload):
            raise InvalidPayload("Payload not supported as input name", payload)

    def candidates(
        self, baseline: InputSet, payload: str, options: MutationOptions, ctx: StrategyContext
    ) -> Iterator[Mutant]:
        yield Mutant(
            inputs=baseline.merge({payload: options.fuzz_name_value}),
            strategy=self.tag,
            seed=payload,
            affected_value=options.fuzz_name_value,
            affected_input_name=options.fuzz_name,
        )


# Declared order is the emission order.
STRATEGIES: Tuple[MutationStrategy, ...] = (
    ValueMutation(),
    ExtraParameterInjection(),
    NameFuzzing(),
)
