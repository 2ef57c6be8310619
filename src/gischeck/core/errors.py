"""
Typed errors.

Geodesy never raises; these are for the layers that *assert* or *wait*:
- the poller (`PollTimeoutError`, `PollCancelledError`, `PollConfigError`)
- the `assert_*` validation helpers (`ValidationError`, `InvalidCoordinatesError`)

Every error carries a stable `code`, an optional `context` mapping for diagnostics,
and a `retryable` hint for callers that decide whether to re-run a flaky step.
"""

from __future__ import annotations

from typing import Any


class GisCheckError(Exception):
    """Base class for gischeck errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        context: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = dict(context or {})
        self.retryable = retryable


class PollTimeoutError(GisCheckError):
    """A polled condition never became true within its time budget."""

    def __init__(
        self,
        description: str,
        timeout_ms: int,
        *,
        attempts: int = 0,
        last_error: BaseException | None = None,
    ) -> None:
        context: dict[str, Any] = {"description": description, "timeout_ms": timeout_ms, "attempts": attempts}
        if last_error is not None:
            context["last_error"] = repr(last_error)
        super().__init__(
            f"Operation timed out: waiting for {description} (timeout: {timeout_ms}ms)",
            code="TIMEOUT_ERROR",
            context=context,
            retryable=True,
        )
        self.description = description
        self.timeout_ms = timeout_ms
        self.attempts = attempts
        self.last_error = last_error


class PollCancelledError(GisCheckError):
    """A wait was stopped by its cancel signal before the condition held."""

    def __init__(self, description: str, *, attempts: int = 0) -> None:
        super().__init__(
            f"Wait cancelled: {description}",
            code="POLL_CANCELLED",
            context={"description": description, "attempts": attempts},
        )
        self.description = description
        self.attempts = attempts


class PollConfigError(GisCheckError, ValueError):
    """Invalid poll options (non-positive interval, negative timeout)."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Configuration error: {detail}", code="CONFIGURATION_ERROR")


class ValidationError(GisCheckError):
    """A map-state assertion failed."""

    def __init__(self, validation: str, expected: Any, actual: Any, context: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Validation failed: {validation}. Expected: {expected}, Actual: {actual}",
            code="VALIDATION_ERROR",
            context={**(context or {}), "expected": expected, "actual": actual},
        )
        self.validation = validation
        self.expected = expected
        self.actual = actual


class InvalidCoordinatesError(ValidationError):
    """A coordinate fell outside the valid lat/lng ranges."""

    def __init__(self, lat: float, lng: float, reason: str) -> None:
        super().__init__(
            f"Invalid coordinates: lat={lat}, lng={lng}",
            "lat in [-90, 90] and lng in [-180, 180]",
            {"lat": lat, "lng": lng},
            {"reason": reason},
        )
        self.code = "INVALID_COORDINATES"
        self.lat = lat
        self.lng = lng
        self.reason = reason


def error_info(exc: BaseException) -> dict[str, Any]:
    """Extract a JSON-friendly summary of `exc` for reports and logs."""
    if isinstance(exc, GisCheckError):
        return {
            "message": exc.message,
            "code": exc.code,
            "context": exc.context,
            "retryable": exc.retryable,
        }
    return {
        "message": str(exc),
        "code": type(exc).__name__,
        "context": {},
        "retryable": False,
    }
