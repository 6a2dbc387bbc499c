from __future__ import annotations


class MutationEngineError(Exception):
    """Base exception for the structured-input mutation engine."""


class ContractViolation(MutationEngineError):
    """Raised when an internal component violates a data contract or invariant."""


class PathNotFound(ContractViolation):
    """Raised when a path does not resolve through the containers of a tree."""

    def __init__(self, path, depth: int, reason: str) -> None:
        self.path = tuple(path)
        self.depth = depth
        super().__init__(f"Path {list(self.path)!r} not found at depth {depth}: {reason}")


class ParseError(MutationEngineError):
    """Raised by a source parser when raw input cannot become a tree."""


class SoftSkip(MutationEngineError):
    """
    A strategy cannot run for this payload. Never escapes a generation run:
    the session reports it to the debug sink and moves on.
    """

    def __init__(self, message: str, payload: str) -> None:
        super().__init__(message)
        self.payload = payload


class InvalidPayload(SoftSkip):
    """Payload fails a strategy's validity predicate."""


class NameRejected(SoftSkip):
    """Reserved input name rejected by the name validator."""
