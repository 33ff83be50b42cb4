"""Advisory response headers describing a route's versions."""

from collections.abc import Iterable

from .resolver import ResolutionResult
from .utils import format_deprecation_warning
from .version import ApiVersion

SUPPORTED_VERSIONS_HEADER = "api-supported-versions"
DEPRECATED_VERSIONS_HEADER = "api-deprecated-versions"
DEPRECATION_MESSAGE_HEADER = "X-Deprecation-Message"


def format_versions(versions: Iterable[ApiVersion]) -> str:
    return ", ".join(str(v) for v in versions)


def build_version_headers(
    result: ResolutionResult,
    *,
    version_header: str | None = "X-Api-Version",
    report_api_versions: bool = True,
) -> dict[str, str]:
    """
    Build response headers for a resolution result.

    Supported/deprecated lists are reported on failures too, so the client
    learns which versions it can use.

    Args:
        result: The resolution outcome
        version_header: Header echoing the resolved version, None to skip
        report_api_versions: Include the supported/deprecated lists

    Returns:
        Header name to value mapping
    """
    headers: dict[str, str] = {}

    if report_api_versions:
        headers[SUPPORTED_VERSIONS_HEADER] = format_versions(result.supported_versions)
        if result.deprecated_versions:
            headers[DEPRECATED_VERSIONS_HEADER] = format_versions(result.deprecated_versions)

    if result.version is None:
        return headers

    if version_header:
        headers[version_header] = str(result.version)

    if result.deprecated:
        headers["Deprecation"] = "true"
        headers[DEPRECATION_MESSAGE_HEADER] = format_deprecation_warning(
            result.version, sunset_date=result.sunset_date
        )
        if result.sunset_date is not None:
            headers["Sunset"] = result.sunset_date.isoformat()

    return headers
