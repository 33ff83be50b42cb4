"""
API version resolution.

``resolve`` is a pure function of the request's version signals and the
route's policy. Failures come back on the result instead of being raised,
so callers can still report the supported versions to the client.
"""

from dataclasses import dataclass
from datetime import date

import structlog

from .exceptions import (
    ConflictingVersionError,
    MalformedVersionError,
    ResolutionFailure,
    UnsupportedVersionError,
    VersioningError,
    VersionRequiredError,
)
from .policy import VersionPolicy
from .sources import VersionSignals, VersionSource
from .version import ApiVersion

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one request's API version."""

    version: ApiVersion | None
    supported_versions: tuple[ApiVersion, ...]
    deprecated_versions: tuple[ApiVersion, ...]
    error: VersioningError | None = None
    source: VersionSource | None = None
    sunset_date: date | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failure(self) -> ResolutionFailure | None:
        return self.error.failure if self.error is not None else None

    @property
    def is_default(self) -> bool:
        """True when the version was not supplied by the client."""
        return self.ok and self.source is None

    @property
    def deprecated(self) -> bool:
        return self.version is not None and self.version in self.deprecated_versions

    def unwrap(self) -> ApiVersion:
        """Return the resolved version or raise the resolution error."""
        if self.version is None:
            raise self.error or VersioningError("API version was not resolved")
        return self.version


def _failed(policy: VersionPolicy, error: VersioningError) -> ResolutionResult:
    return ResolutionResult(
        version=None,
        supported_versions=tuple(policy.supported),
        deprecated_versions=tuple(policy.deprecated),
        error=error,
    )


def resolve(signals: VersionSignals, policy: VersionPolicy) -> ResolutionResult:
    """
    Determine the effective API version for a request.

    Args:
        signals: Candidate version strings extracted from the request
        policy: The matched route's version policy

    Returns:
        ResolutionResult carrying either the version or the failure, plus
        the route's supported and deprecated versions
    """
    supported = [str(v) for v in policy.supported]
    candidates = signals.candidates(policy.readers)

    parsed: list[tuple[VersionSource, ApiVersion]] = []
    for candidate in candidates:
        try:
            parsed.append((candidate, ApiVersion.parse(candidate.raw)))
        except MalformedVersionError:
            logger.debug(
                "api_version.malformed", source=candidate.kind.value, value=candidate.raw
            )
            return _failed(
                policy,
                MalformedVersionError(
                    f"Invalid API version {candidate.raw!r} in {candidate.kind.value}",
                    raw=candidate.raw,
                    source=candidate.kind.value,
                ),
            )

    distinct = {version for _, version in parsed}
    if len(distinct) > 1:
        return _failed(
            policy,
            ConflictingVersionError(
                "Conflicting API versions: "
                + ", ".join(f"{s.kind.value}={v}" for s, v in parsed),
                candidates={s.kind.value: s.raw for s, _ in parsed},
            ),
        )

    source: VersionSource | None = None
    if parsed:
        source, version = parsed[0]
    elif policy.assume_default_when_unspecified and policy.default_version is not None:
        version = policy.default_version
    else:
        return _failed(
            policy,
            VersionRequiredError("An API version is required", supported=supported),
        )

    if not policy.is_supported(version):
        return _failed(
            policy,
            UnsupportedVersionError(
                f"API version {version} is not supported",
                requested=str(version),
                supported=supported,
            ),
        )

    # Report the route's spelling of the version ("1.0" rather than "v1")
    version = next(v for v in policy.supported if v == version)

    return ResolutionResult(
        version=version,
        supported_versions=tuple(policy.supported),
        deprecated_versions=tuple(policy.deprecated),
        source=source,
        sunset_date=policy.sunset_date(version),
    )
