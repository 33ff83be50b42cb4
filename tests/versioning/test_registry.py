"""Tests for the versioned route registry."""

from datetime import date

import pytest
from fastapi import HTTPException

from dotmac.versioning import (
    ApiVersion,
    ResolutionFailure,
    RouteMethod,
    VersionedRouteRegistry,
    VersioningSettings,
    VersionSignals,
)

CUSTOMERS = r"^/api/v[^/]+/customers$"


async def list_customers_v1():
    return {"customers": [], "version": "1.0"}


async def list_customers_v2():
    return {"items": [], "version": "2.0"}


@pytest.fixture
def registry():
    registry = VersionedRouteRegistry(settings=VersioningSettings(default_version="1.0"))
    registry.register(CUSTOMERS, RouteMethod.GET, "1.0", list_customers_v1, deprecated=True)
    registry.register(CUSTOMERS, RouteMethod.GET, "2.0", list_customers_v2)
    return registry


@pytest.mark.unit
class TestRegistration:
    """Test route registration."""

    def test_routes_listed(self, registry):
        assert registry.routes() == [(CUSTOMERS, RouteMethod.GET)]

    def test_handler_lookup(self, registry):
        assert registry.handler_for(CUSTOMERS, "GET", "1.0") is list_customers_v1
        assert registry.handler_for(CUSTOMERS, "get", "v2") is list_customers_v2
        assert registry.handler_for(CUSTOMERS, "GET", "3.0") is None
        assert registry.handler_for(CUSTOMERS, "POST", "1.0") is None

    def test_duplicate_version_rejected(self, registry):
        with pytest.raises(ValueError, match="Route conflict"):
            registry.register(CUSTOMERS, RouteMethod.GET, "1", list_customers_v2)

    def test_sunset_requires_deprecation(self, registry):
        with pytest.raises(ValueError, match="Sunset date"):
            registry.register(
                CUSTOMERS, "POST", "1.0", list_customers_v1, sunset_date=date(2026, 1, 1)
            )

    def test_match(self, registry):
        route = registry.match("/api/v2/customers", "GET")

        assert route is not None
        assert route.versions == [ApiVersion(1, 0), ApiVersion(2, 0)]
        assert registry.match("/api/v2/customers", "DELETE") is None
        assert registry.match("/api/v2/orders", "GET") is None


@pytest.mark.unit
class TestRoutePolicies:
    """Test policies derived from registrations."""

    def test_policy_from_registered_versions(self, registry):
        policy = registry.policy_for(CUSTOMERS, "GET")

        assert policy.supported == [ApiVersion(1, 0), ApiVersion(2, 0)]
        assert policy.deprecated == [ApiVersion(1, 0)]
        assert policy.default_version == ApiVersion(1, 0)

    def test_policy_cached_until_next_registration(self, registry):
        first = registry.policy_for(CUSTOMERS, "GET")
        assert registry.policy_for(CUSTOMERS, "GET") is first

        registry.register(CUSTOMERS, "GET", "3.0", list_customers_v2)

        updated = registry.policy_for(CUSTOMERS, "GET")
        assert updated is not first
        assert ApiVersion(3) in updated.supported_versions

    def test_latest_version_used_when_default_not_offered(self):
        registry = VersionedRouteRegistry(settings=VersioningSettings(default_version="1.0"))
        registry.register(r"^/api/v[^/]+/reports$", "GET", "2.0", list_customers_v2)
        registry.register(r"^/api/v[^/]+/reports$", "GET", "3.0", list_customers_v2)

        policy = registry.policy_for(r"^/api/v[^/]+/reports$", "GET")

        assert policy.default_version == ApiVersion(3, 0)

    def test_unknown_route_raises(self, registry):
        with pytest.raises(KeyError):
            registry.policy_for(r"^/nope$", "GET")


@pytest.mark.unit
class TestDispatch:
    """Test resolving and picking handlers."""

    def test_dispatch_to_requested_version(self, registry):
        result, handler = registry.dispatch(
            "/api/v2/customers", "GET", VersionSignals(url_segment="2")
        )

        assert result.version == ApiVersion(2, 0)
        assert handler is list_customers_v2

    def test_dispatch_deprecated_version(self, registry):
        result, handler = registry.dispatch(
            "/api/v1/customers", "GET", VersionSignals(url_segment="1")
        )

        assert handler is list_customers_v1
        assert result.deprecated is True

    def test_dispatch_failure_has_no_handler(self, registry):
        result, handler = registry.dispatch(
            "/api/v9/customers", "GET", VersionSignals(url_segment="9")
        )

        assert handler is None
        assert result.failure == ResolutionFailure.UNSUPPORTED_VERSION
        assert result.supported_versions == (ApiVersion(1, 0), ApiVersion(2, 0))

    def test_dispatch_unknown_path(self, registry):
        with pytest.raises(HTTPException) as exc_info:
            registry.dispatch("/api/v1/orders", "GET", VersionSignals())

        assert exc_info.value.status_code == 404
