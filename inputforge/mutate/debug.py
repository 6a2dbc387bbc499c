from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class LoggingDebugSink:
    """Routes engine diagnostics to the standard logging tree at DEBUG."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def report(self, message: str, payload: str) -> None:
        self._log.debug(f"[MutationDebug] {message}: {payload!r}")
