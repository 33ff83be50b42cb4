"""
API versioning exceptions.

Every request-level failure kind has its own exception so callers can map
it to a response. The resolver returns these as values on the result; it
only raises them from ``ResolutionResult.unwrap()``.
"""

from enum import Enum
from typing import Any


class ResolutionFailure(str, Enum):
    """Ways resolving a request's API version can fail."""

    VERSION_REQUIRED = "version_required"
    MALFORMED_VERSION = "malformed_version"
    CONFLICTING_VERSION = "conflicting_version"
    UNSUPPORTED_VERSION = "unsupported_version"


class VersioningError(Exception):
    """
    Base API versioning error.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for API responses
        status_code: HTTP status code for this error type
        context: Additional context data about the error
        recovery_hint: Suggested action to resolve the error
    """

    failure: ResolutionFailure | None = None

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 400,
        context: dict[str, Any] | None = None,
        recovery_hint: str | None = None,
    ):
        self.message = message
        self.error_code = error_code or "VERSIONING_ERROR"
        self.status_code = status_code
        self.context = context or {}
        self.recovery_hint = recovery_hint
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "context": self.context,
            "recovery_hint": self.recovery_hint,
        }


class PolicyError(VersioningError, ValueError):
    """Raised when a version policy is internally inconsistent."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, "INVALID_VERSION_POLICY", status_code=500, context=context)


class VersionRequiredError(VersioningError):
    """No version was supplied and no default applies."""

    failure = ResolutionFailure.VERSION_REQUIRED

    def __init__(self, message: str, supported: list[str] | None = None) -> None:
        super().__init__(
            message,
            "API_VERSION_REQUIRED",
            context={"supported_versions": supported or []},
            recovery_hint="Specify an API version in the URL, header or query string",
        )


class MalformedVersionError(VersioningError, ValueError):
    """A version candidate was found but could not be parsed."""

    failure = ResolutionFailure.MALFORMED_VERSION

    def __init__(self, message: str, raw: str | None = None, source: str | None = None) -> None:
        context: dict[str, Any] = {}
        if raw is not None:
            context["value"] = raw
        if source:
            context["source"] = source

        super().__init__(
            message,
            "INVALID_API_VERSION",
            context=context,
            recovery_hint="Use a version of the form '1' or '1.0', optionally prefixed with 'v'",
        )


class ConflictingVersionError(VersioningError):
    """Several sources supplied different versions for the same request."""

    failure = ResolutionFailure.CONFLICTING_VERSION

    def __init__(self, message: str, candidates: dict[str, str] | None = None) -> None:
        super().__init__(
            message,
            "AMBIGUOUS_API_VERSION",
            context={"candidates": candidates or {}},
            recovery_hint="Specify the API version in one place only, or use the same value everywhere",
        )


class UnsupportedVersionError(VersioningError):
    """The requested version is well-formed but not offered by the route."""

    failure = ResolutionFailure.UNSUPPORTED_VERSION

    def __init__(self, message: str, requested: str, supported: list[str] | None = None) -> None:
        super().__init__(
            message,
            "UNSUPPORTED_API_VERSION",
            context={"requested_version": requested, "supported_versions": supported or []},
            recovery_hint="Use one of the supported API versions",
        )
