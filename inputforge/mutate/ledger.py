from __future__ import annotations

import logging
from typing import Set

from .inputs import InputSet

logger = logging.getLogger(__name__)


class DedupLedger:
    """
    Content-addressed membership set for one generation run.

    Keys are SHA-256 digests of the canonical tree encoding, so two candidates
    with the same shape and leaf values collide no matter which strategy built
    them. Not thread-safe: give every concurrent run its own ledger.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self.rejected = 0

    def admit(self, candidate: InputSet) -> bool:
        key = candidate.dedup_key
        if key in self._seen:
            self.rejected += 1
            logger.debug(f"[DedupLedger] Duplicate candidate dropped: {key[:16]}")
            return False
        self._seen.add(key)
        return True

    def __contains__(self, candidate: object) -> bool:
        if isinstance(candidate, InputSet):
            return candidate.dedup_key in self._seen
        if isinstance(candidate, str):
            return candidate in self._seen
        return False

    def __len__(self) -> int:
        return len(self._seen)
