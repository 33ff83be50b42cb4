"""
DotMac API Versioning - version negotiation for HTTP APIs.

Resolves the API version of a request from its URL segment, header and
query string against a per-route policy:

- ``resolve`` - pure resolution of request signals against a policy
- ``VersionedRouteRegistry`` - (route, version) -> handler table
- ``APIVersionMiddleware`` - FastAPI/Starlette integration
"""

from .exceptions import (
    ConflictingVersionError,
    MalformedVersionError,
    PolicyError,
    ResolutionFailure,
    UnsupportedVersionError,
    VersioningError,
    VersionRequiredError,
)
from .extract import extract_signals
from .headers import (
    DEPRECATED_VERSIONS_HEADER,
    SUPPORTED_VERSIONS_HEADER,
    build_version_headers,
)
from .logging import setup_logging
from .middleware import APIVersionMiddleware
from .policy import VersionPolicy
from .registry import RouteMethod, VersionedRoute, VersionedRouteRegistry
from .resolver import ResolutionResult, resolve
from .settings import VersioningSettings, get_settings, reset_settings
from .sources import DEFAULT_READERS, VersionSignals, VersionSource, VersionSourceKind
from .utils import format_deprecation_warning, get_api_version, get_latest_version, version_requires
from .version import ApiVersion, parse_version

__version__ = "1.0.0"

__all__ = [
    "ApiVersion",
    "parse_version",
    "VersionSourceKind",
    "VersionSource",
    "VersionSignals",
    "DEFAULT_READERS",
    "VersionPolicy",
    "ResolutionResult",
    "resolve",
    "ResolutionFailure",
    "VersioningError",
    "PolicyError",
    "VersionRequiredError",
    "MalformedVersionError",
    "ConflictingVersionError",
    "UnsupportedVersionError",
    "VersioningSettings",
    "get_settings",
    "reset_settings",
    "setup_logging",
    "extract_signals",
    "build_version_headers",
    "SUPPORTED_VERSIONS_HEADER",
    "DEPRECATED_VERSIONS_HEADER",
    "RouteMethod",
    "VersionedRoute",
    "VersionedRouteRegistry",
    "APIVersionMiddleware",
    "get_api_version",
    "get_latest_version",
    "format_deprecation_warning",
    "version_requires",
]
