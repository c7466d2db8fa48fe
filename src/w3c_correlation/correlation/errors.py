"""Exception hierarchy for the correlation package."""


class CorrelationError(Exception):
    """Base exception for correlation errors."""

    pass


class InvalidTraceContextError(CorrelationError, ValueError):
    """Raised when a trace context is built from malformed identifiers."""

    pass
