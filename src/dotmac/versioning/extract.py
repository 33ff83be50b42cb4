"""Pull version candidates out of a Starlette/FastAPI request."""

import re
from functools import lru_cache
from re import Pattern

from starlette.requests import Request

from .settings import VersioningSettings
from .sources import VersionSignals


@lru_cache(maxsize=32)
def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


def read_url_segment(path: str, url_pattern: str) -> str | None:
    """
    Extract the version segment from a request path.

    Args:
        path: Request path, e.g. ``/api/v2/customers``
        url_pattern: Regex with a named ``version`` group

    Returns:
        The captured segment (``"2"``), or None if the path does not match
    """
    match = _compile(url_pattern).match(path)
    if match is None:
        return None
    return match.group("version")


def extract_signals(
    request: Request,
    *,
    header_name: str = "X-Api-Version",
    query_param: str = "api-version",
    url_pattern: str = r"^/api/v(?P<version>[0-9][^/]*)(?:/|$)",
) -> VersionSignals:
    """Read the URL segment, header and query parameter candidates."""
    return VersionSignals(
        url_segment=read_url_segment(request.url.path, url_pattern),
        header=request.headers.get(header_name),
        query_parameter=request.query_params.get(query_param),
    )


def extract_signals_with_settings(request: Request, settings: VersioningSettings) -> VersionSignals:
    return extract_signals(
        request,
        header_name=settings.header_name,
        query_param=settings.query_param,
        url_pattern=settings.url_pattern,
    )
