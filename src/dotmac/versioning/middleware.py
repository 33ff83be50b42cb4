"""
API versioning middleware.

Resolves each request's API version before it reaches the endpoint and
reports the route's versions in the response headers.
"""

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .extract import extract_signals_with_settings
from .headers import build_version_headers
from .policy import VersionPolicy
from .registry import VersionedRouteRegistry
from .resolver import resolve
from .settings import VersioningSettings, get_settings

logger = structlog.get_logger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


class APIVersionMiddleware(BaseHTTPMiddleware):
    """
    Middleware resolving the API version of incoming requests.

    Features:
    - Per-route policies from a ``VersionedRouteRegistry``
    - Fallback global policy for unregistered paths
    - 400 responses for missing, malformed, conflicting or unsupported versions
    - api-supported-versions / api-deprecated-versions reporting
    - Deprecation and Sunset headers for deprecated versions
    """

    def __init__(
        self,
        app: ASGIApp,
        policy: VersionPolicy | None = None,
        registry: VersionedRouteRegistry | None = None,
        settings: VersioningSettings | None = None,
    ) -> None:
        super().__init__(app)
        if policy is None and registry is None:
            raise ValueError("APIVersionMiddleware needs a policy, a registry or both")
        self.policy = policy
        self.registry = registry
        self.settings = settings or (registry.settings if registry is not None else get_settings())

    def _policy_for(self, request: Request) -> tuple[VersionPolicy | None, VersioningSettings]:
        """Pick the policy for a request and the settings its readers follow."""
        if self.registry is not None:
            route = self.registry.match(request.url.path, request.method)
            if route is not None:
                # Registry routes read signals the way their policy was built
                policy = self.registry.policy_for(route.pattern, route.method)
                return policy, self.registry.settings
        return self.policy, self.settings

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        """
        Resolve the request's version and decorate the response.

        Args:
            request: FastAPI Request
            call_next: Next middleware in chain

        Returns:
            Response
        """
        policy, settings = self._policy_for(request)
        if policy is None:
            return await call_next(request)

        signals = extract_signals_with_settings(request, settings)
        result = resolve(signals, policy)
        request.state.api_version_result = result

        headers = build_version_headers(
            result,
            version_header=settings.header_name,
            report_api_versions=settings.report_api_versions,
        )

        error = result.error
        if error is not None:
            logger.warning(
                "api_version.rejected",
                method=request.method,
                path=request.url.path,
                failure=error.failure.value if error.failure else None,
                error=error.message,
            )
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_dict(),
                headers=headers,
            )

        request.state.api_version = result.version
        logger.debug(
            "api_version.resolved",
            path=request.url.path,
            version=str(result.version),
            source=result.source.kind.value if result.source else "default",
            deprecated=result.deprecated,
        )

        with structlog.contextvars.bound_contextvars(api_version=str(result.version)):
            response = await call_next(request)
        for name, value in headers.items():
            response.headers[name] = value

        return response
