from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ..contracts.enums import MutationStrategyTag
from ..contracts.errors import ContractViolation, SoftSkip
from ..contracts.models import Mutant, MutationOptions
from .base import DebugSink, Formatter, ImmutabilityFilter, NameValidator, PayloadValidator
from .debug import LoggingDebugSink
from .filters import ImmutableInputNames, PermissiveInputValidator
from .formats import DefaultFormatter
from .inputs import InputSet
from .ledger import DedupLedger
from .strategies import STRATEGIES, StrategyContext

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    emitted: int = 0
    duplicates: int = 0
    skipped: List[MutationStrategyTag] = field(default_factory=list)
    exhausted: bool = False


class MutationSession:
    """
    Runs the mutation strategies for one baseline and one payload at a time.

    The session only holds collaborators. Each `generate` call gets a fresh
    DedupLedger, so calls are independent runs and several may be consumed
    side by side over the same baseline.
    """

    def __init__(
        self,
        formatter: Optional[Formatter] = None,
        immutability: Optional[ImmutabilityFilter] = None,
        name_validator: Optional[NameValidator] = None,
        payload_validator: Optional[PayloadValidator] = None,
        debug_sink: Optional[DebugSink] = None,
    ) -> None:
        validator = PermissiveInputValidator()
        self._ctx = StrategyContext(
            formatter=formatter or DefaultFormatter(),
            immutability=immutability or ImmutableInputNames(),
            name_validator=name_validator or validator,
            payload_validator=payload_validator or validator,
        )
        self._debug: DebugSink = debug_sink or LoggingDebugSink()
        # Stats of the run most recently returned by generate(), pulled or not.
        self.last_stats: Optional[GenerationStats] = None

    @classmethod
    def from_config(cls, config=None, **collaborators) -> "MutationSession":
        from ..base.config import get_config

        cfg = config or get_config()
        collaborators.setdefault("immutability", ImmutableInputNames.of(cfg.mutation.immutable_inputs))
        return cls(**collaborators)

    def generate(
        self,
        baseline: InputSet,
        payload: str,
        options: Optional[MutationOptions] = None,
    ) -> Iterator[Mutant]:
        """
        Lazily yield the unique mutants of `baseline` for `payload`.

        Argument errors raise here; everything else happens as the caller
        pulls. PathNotFound aborts the run, soft skips only drop one strategy.
        """
        if not isinstance(baseline, InputSet):
            raise ContractViolation(f"Baseline must be an InputSet, got {type(baseline).__name__}")
        if not isinstance(payload, str):
            raise ContractViolation(f"Payload must be a string, got {type(payload).__name__}")

        stats = GenerationStats()
        self.last_stats = stats
        return self._run(baseline, payload, options or MutationOptions(), stats)

    def _run(
        self, baseline: InputSet, payload: str, options: MutationOptions, stats: GenerationStats
    ) -> Iterator[Mutant]:
        if baseline.is_empty():
            logger.debug("[MutationSession] Baseline has no leaves; nothing to mutate")
            stats.exhausted = True
            return

        ledger = DedupLedger()

        for strategy in STRATEGIES:
            if not strategy.enabled(options):
                continue

            try:
                strategy.preflight(baseline, payload, options, self._ctx)
            except SoftSkip as e:
                stats.skipped.append(strategy.tag)
                self._debug.report(str(e), e.payload)
                continue

            for mutant in strategy.candidates(baseline, payload, options, self._ctx):
                if not ledger.admit(mutant.inputs):
                    stats.duplicates = ledger.rejected
                    continue
                stats.emitted += 1
                yield mutant

        stats.exhausted = True
        logger.info(
            f"[MutationSession] Run complete: {stats.emitted} mutants, "
            f"{stats.duplicates} duplicates dropped, skipped={[t.value for t in stats.skipped]}"
        )


def generate(baseline: InputSet, payload: str, options: Optional[MutationOptions] = None) -> Iterator[Mutant]:
    return MutationSession().generate(baseline, payload, options)
