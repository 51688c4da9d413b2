"""Custom exception hierarchy for the supplement engine."""

from __future__ import annotations


class SupplementEngineError(Exception):
    """Base exception for all supplement_engine errors."""


class InvalidRangeError(SupplementEngineError, ValueError):
    """A date range ends before it starts."""


class DanglingReferenceError(SupplementEngineError):
    """A conflict or action names a value id that is no longer present."""

    def __init__(self, message: str, value_id: str | None = None) -> None:
        super().__init__(message)
        self.value_id = value_id


class UnresolvableOverlapError(SupplementEngineError):
    """The requested resolution cannot remove the overlap.

    Raised when a removal would leave a scoped dimension empty (which would
    silently widen it to a wildcard), when there is nothing to remove, or
    when keep-one is requested while a partial removal is still possible.
    """


class NonConvergenceError(SupplementEngineError):
    """A resolution step did not reduce the number of conflicts."""

    def __init__(self, message: str, before: int = 0, after: int = 0) -> None:
        super().__init__(message)
        self.before = before
        self.after = after


class IncompleteSelectionError(SupplementEngineError):
    """Finalize was requested while conflicts are still unresolved."""


class SupplementValidationError(SupplementEngineError, ValueError):
    """A supplement draft failed the checks required before saving."""
