"""Helpers for endpoints running behind ``APIVersionMiddleware``."""

import functools
from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

from fastapi import HTTPException, Request

from .resolver import ResolutionResult
from .version import ApiVersion, parse_version


def get_api_version(request: Request) -> ApiVersion | None:
    """
    Get the API version resolved for a request.

    Returns:
        The resolved version, or None if the middleware did not run
    """
    return getattr(request.state, "api_version", None)


def get_resolution(request: Request) -> ResolutionResult | None:
    return getattr(request.state, "api_version_result", None)


def get_latest_version(versions: Iterable[ApiVersion]) -> ApiVersion | None:
    """Return the highest version, or None for an empty collection."""
    return max(versions, default=None)


def format_deprecation_warning(
    version: ApiVersion,
    sunset_date: date | None = None,
    replacement: ApiVersion | str | None = None,
) -> str:
    """
    Build a human-readable deprecation message.

    Args:
        version: The deprecated version
        sunset_date: When the version stops being served
        replacement: Version clients should move to
    """
    message = f"API version {version} is deprecated"
    if sunset_date is not None:
        message += f" and will be removed on {sunset_date.isoformat()}"
    if replacement is not None:
        message += f"; please migrate to {replacement}"
    return message + "."


def version_requires(minimum: ApiVersion | str) -> Callable:
    """
    Reject requests whose resolved version is below ``minimum``.

    The decorated endpoint must accept a ``request: Request`` argument.
    """
    minimum = parse_version(minimum)

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request = kwargs.get("request")
            if request is None:
                request = next((a for a in args if isinstance(a, Request)), None)

            version = get_api_version(request) if request is not None else None
            if version is None or version < minimum:
                raise HTTPException(
                    status_code=400,
                    detail=f"This endpoint requires API version {minimum} or later",
                )
            return await func(*args, **kwargs)

        return wrapper

    return decorator
