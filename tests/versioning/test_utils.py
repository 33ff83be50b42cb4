"""Tests for signal extraction, response headers and helper utilities."""

from datetime import date

import pytest
from starlette.requests import Request

from dotmac.versioning import (
    ApiVersion,
    VersioningSettings,
    VersionPolicy,
    VersionSignals,
    build_version_headers,
    extract_signals,
    format_deprecation_warning,
    get_api_version,
    get_latest_version,
    resolve,
)
from dotmac.versioning.extract import read_url_segment

pytestmark = pytest.mark.unit


def make_request(path: str, query: str = "", headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": query.encode(),
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    return Request(scope)


class TestExtractSignals:
    """Test pulling candidates out of requests."""

    def test_all_sources(self):
        request = make_request(
            "/api/v2/customers", query="api-version=2.0", headers={"X-Api-Version": "v2"}
        )

        signals = extract_signals(request)

        assert signals == VersionSignals(url_segment="2", header="v2", query_parameter="2.0")

    def test_no_sources(self):
        assert extract_signals(make_request("/api/customers")) == VersionSignals()

    def test_custom_names(self):
        request = make_request("/customers", query="v=3", headers={"Api-Version": "3"})

        signals = extract_signals(request, header_name="Api-Version", query_param="v")

        assert signals.header == "3"
        assert signals.query_parameter == "3"
        assert signals.url_segment is None

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/api/v1/customers", "1"),
            ("/api/v2.1/customers", "2.1"),
            ("/api/v1", "1"),
            ("/api/v1x/customers", "1x"),
            ("/api/vendors", None),
            ("/api/customers", None),
            ("/v1/customers", None),
            ("/api/v١/customers", None),
        ],
    )
    def test_url_segment(self, path, expected):
        assert read_url_segment(path, VersioningSettings().url_pattern) == expected


class TestBuildVersionHeaders:
    """Test advisory response headers."""

    @pytest.fixture
    def policy(self):
        return VersionPolicy(
            supported_versions={"1.0", "2.0"},
            deprecated_versions={"1.0"},
            sunset_dates={"1.0": date(2026, 12, 31)},
        )

    def test_success_headers(self, policy):
        headers = build_version_headers(resolve(VersionSignals(header="2"), policy))

        assert headers == {
            "api-supported-versions": "1.0, 2.0",
            "api-deprecated-versions": "1.0",
            "X-Api-Version": "2.0",
        }

    def test_deprecated_version_headers(self, policy):
        headers = build_version_headers(resolve(VersionSignals(header="1"), policy))

        assert headers["Deprecation"] == "true"
        assert headers["Sunset"] == "2026-12-31"
        assert headers["X-Deprecation-Message"] == (
            "API version 1.0 is deprecated and will be removed on 2026-12-31."
        )

    def test_failure_still_reports_versions(self, policy):
        headers = build_version_headers(resolve(VersionSignals(header="7"), policy))

        assert headers == {
            "api-supported-versions": "1.0, 2.0",
            "api-deprecated-versions": "1.0",
        }

    def test_no_deprecated_header_when_none_deprecated(self):
        policy = VersionPolicy(supported_versions={"1"})

        headers = build_version_headers(
            resolve(VersionSignals(header="1"), policy), version_header=None
        )

        assert headers == {"api-supported-versions": "1"}


class TestHelpers:
    """Test helper functions."""

    def test_get_api_version_without_middleware(self):
        assert get_api_version(make_request("/api/customers")) is None

    def test_get_latest_version(self):
        assert get_latest_version([ApiVersion(1), ApiVersion(2, 1), ApiVersion(2)]) == ApiVersion(2, 1)
        assert get_latest_version([]) is None

    def test_format_deprecation_warning(self):
        assert format_deprecation_warning(ApiVersion(1)) == "API version 1 is deprecated."

        message = format_deprecation_warning(
            ApiVersion(1, 0), sunset_date=date(2026, 12, 31), replacement=ApiVersion(2, 0)
        )
        assert "1.0 is deprecated" in message
        assert "2026-12-31" in message
        assert "migrate to 2.0" in message
