"""
Versioned route registry.

Maps ``(route, version)`` to a handler. Routes are registered at startup;
each route's ``VersionPolicy`` is derived from the versions registered for
it.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from re import Pattern
from typing import Any

import structlog
from fastapi import HTTPException

from .policy import VersionPolicy
from .resolver import ResolutionResult, resolve
from .settings import VersioningSettings, get_settings
from .sources import VersionSignals
from .version import ApiVersion, parse_version

logger = structlog.get_logger(__name__)


class RouteMethod(str, Enum):
    """HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass
class VersionedRoute:
    """A route pattern and the handler registered for each of its versions."""

    pattern: str
    method: RouteMethod
    handlers: dict[ApiVersion, Callable[..., Any]] = field(default_factory=dict)
    deprecated: set[ApiVersion] = field(default_factory=set)
    sunset_dates: dict[ApiVersion, date] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Compile pattern after initialization."""
        self._compiled_pattern: Pattern = re.compile(self.pattern)

    def matches(self, path: str, method: str) -> bool:
        return (
            self.method.value == method.upper() and self._compiled_pattern.match(path) is not None
        )

    @property
    def versions(self) -> list[ApiVersion]:
        return sorted(self.handlers)


class VersionedRouteRegistry:
    """
    Registry of versioned routes.

    Policies are built lazily and cached until the next registration.
    """

    def __init__(self, settings: VersioningSettings | None = None) -> None:
        self.settings = settings or get_settings()
        self._routes: dict[tuple[str, RouteMethod], VersionedRoute] = {}
        self._policies: dict[tuple[str, RouteMethod], VersionPolicy] = {}

    def register(
        self,
        pattern: str,
        method: RouteMethod | str,
        version: ApiVersion | str | int,
        handler: Callable[..., Any],
        *,
        deprecated: bool = False,
        sunset_date: date | None = None,
    ) -> None:
        """
        Register the handler serving one version of a route.

        Args:
            pattern: URL pattern (regex)
            method: HTTP method
            version: Version the handler implements
            handler: Handler function
            deprecated: Mark this version of the route as deprecated
            sunset_date: Planned removal date for a deprecated version

        Raises:
            ValueError: If the version is already registered for the route,
                or a sunset date is given for a version that is not deprecated
        """
        method = RouteMethod(method.upper()) if isinstance(method, str) else method
        version = parse_version(version)

        if sunset_date is not None and not deprecated:
            raise ValueError(f"Sunset date given for non-deprecated version {version}")

        key = (pattern, method)
        route = self._routes.get(key)
        if route is None:
            route = self._routes[key] = VersionedRoute(pattern=pattern, method=method)

        if version in route.handlers:
            raise ValueError(
                f"Route conflict: {method.value} {pattern} version {version} already registered"
            )

        route.handlers[version] = handler
        if deprecated:
            route.deprecated.add(version)
        if sunset_date is not None:
            route.sunset_dates[version] = sunset_date

        self._policies.clear()
        logger.info(
            "api_version.route.registered",
            pattern=pattern,
            method=method.value,
            version=str(version),
            deprecated=deprecated,
        )

    def routes(self) -> list[tuple[str, RouteMethod]]:
        return list(self._routes)

    def match(self, path: str, method: str) -> VersionedRoute | None:
        """Find the registered route serving a concrete request path."""
        for route in self._routes.values():
            if route.matches(path, method):
                return route
        return None

    def policy_for(self, pattern: str, method: RouteMethod | str) -> VersionPolicy:
        """
        Get the version policy for a registered route.

        The configured default version is used when the route offers it;
        otherwise the route defaults to its latest version.

        Raises:
            KeyError: If the route is not registered
        """
        method = RouteMethod(method.upper()) if isinstance(method, str) else method
        key = (pattern, method)
        if key in self._policies:
            return self._policies[key]

        route = self._routes[key]
        policy = VersionPolicy.from_settings(
            self.settings,
            supported=route.handlers,
            deprecated=route.deprecated,
            sunset_dates=route.sunset_dates,
        )
        if policy.default_version is None:
            policy = policy.model_copy(update={"default_version": route.versions[-1]})

        self._policies[key] = policy
        return policy

    def handler_for(
        self, pattern: str, method: RouteMethod | str, version: ApiVersion | str
    ) -> Callable[..., Any] | None:
        method = RouteMethod(method.upper()) if isinstance(method, str) else method
        route = self._routes.get((pattern, method))
        if route is None:
            return None
        return route.handlers.get(parse_version(version))

    def dispatch(
        self, path: str, method: str, signals: VersionSignals
    ) -> tuple[ResolutionResult, Callable[..., Any] | None]:
        """
        Resolve a request's version and pick the handler for it.

        Args:
            path: Request path
            method: HTTP method
            signals: Version candidates extracted from the request

        Returns:
            The resolution result and the handler (None if resolution failed)

        Raises:
            HTTPException: If no route matches the path
        """
        route = self.match(path, method)
        if route is None:
            raise HTTPException(
                status_code=404,
                detail=f"No route found for {method} {path}",
            )

        result = resolve(signals, self.policy_for(route.pattern, route.method))
        if not result.ok:
            return result, None
        return result, route.handlers[result.unwrap()]
