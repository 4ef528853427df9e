"""Exception taxonomy for ingest, derivative and geometry failures.

All errors derive from :class:`ValueError` so callers that already guard
numeric routines with ``except ValueError`` keep working. The session layer
converts them into structured :class:`dtakit.session.LoadResult` values.
"""

from __future__ import annotations


class DTAError(ValueError):
    """Base class for recoverable analysis failures."""


class IngestError(DTAError):
    """The input stream could not be read or tokenized into rows."""


class ValidationError(DTAError):
    """Too few valid, time-monotonic rows survived cleaning."""

    def __init__(
        self,
        message: str,
        *,
        valid_count: int = 0,
        invalid_count: int = 0,
        duplicate_count: int = 0,
    ) -> None:
        super().__init__(message)
        self.valid_count = int(valid_count)
        self.invalid_count = int(invalid_count)
        self.duplicate_count = int(duplicate_count)


class ComputationError(DTAError):
    """The derivative curve has too few points to be useful."""

    def __init__(self, message: str, *, derivative_count: int = 0) -> None:
        super().__init__(message)
        self.derivative_count = int(derivative_count)


class GeometryDegenerate(DTAError):
    """Parallel tangents, or a tangent lying entirely outside the viewport."""
