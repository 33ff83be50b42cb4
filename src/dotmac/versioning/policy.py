"""Per-route version policy."""

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import PolicyError
from .settings import VersioningSettings
from .sources import DEFAULT_READERS, VersionSourceKind
from .version import ApiVersion, parse_version


class VersionPolicy(BaseModel):
    """
    Which versions a route offers and how a request's version is read.

    Policies are built once at route registration and never change
    afterwards. Versions may be given as strings (``"1.0"``) or
    ``ApiVersion`` instances.
    """

    model_config = ConfigDict(frozen=True)

    supported_versions: frozenset[ApiVersion]
    default_version: ApiVersion | None = None
    assume_default_when_unspecified: bool = False
    readers: tuple[VersionSourceKind, ...] = DEFAULT_READERS
    deprecated_versions: frozenset[ApiVersion] = Field(default_factory=frozenset)
    sunset_dates: tuple[tuple[ApiVersion, date], ...] = ()

    @field_validator("sunset_dates", mode="before")
    @classmethod
    def sunset_pairs(cls, v: Any) -> Any:
        # Mappings are stored as (version, date) pairs
        if isinstance(v, Mapping):
            return tuple(v.items())
        return v

    @model_validator(mode="after")
    def check_consistency(self) -> "VersionPolicy":
        if not self.supported_versions:
            raise PolicyError("A version policy needs at least one supported version")

        if self.default_version is not None and self.default_version not in self.supported_versions:
            raise PolicyError(
                f"Default version {self.default_version} is not a supported version",
                context={"default_version": str(self.default_version)},
            )

        unknown = self.deprecated_versions - self.supported_versions
        if unknown:
            raise PolicyError(
                "Deprecated versions must also be supported: "
                + ", ".join(str(v) for v in sorted(unknown))
            )

        not_deprecated = {version for version, _ in self.sunset_dates} - self.deprecated_versions
        if not_deprecated:
            raise PolicyError(
                "Sunset dates are only allowed for deprecated versions: "
                + ", ".join(str(v) for v in sorted(not_deprecated))
            )

        if not self.readers:
            raise PolicyError("A version policy needs at least one reader")
        if len(set(self.readers)) != len(self.readers):
            raise PolicyError("Version readers must not repeat")

        return self

    @classmethod
    def from_settings(
        cls,
        settings: VersioningSettings,
        supported: Iterable[Any],
        deprecated: Iterable[Any] = (),
        sunset_dates: Mapping[Any, date] | None = None,
    ) -> "VersionPolicy":
        """
        Build a policy using the configured default version and reader order.

        The configured default is only applied when the route supports it.
        """
        supported_set = frozenset(parse_version(v) for v in supported)

        default = None
        if settings.default_version:
            candidate = parse_version(settings.default_version)
            if candidate in supported_set:
                default = candidate

        return cls(
            supported_versions=supported_set,
            default_version=default,
            assume_default_when_unspecified=settings.assume_default_when_unspecified,
            readers=tuple(settings.readers),
            deprecated_versions=frozenset(parse_version(v) for v in deprecated),
            sunset_dates=sunset_dates or {},
        )

    @property
    def supported(self) -> list[ApiVersion]:
        """Supported versions, lowest first."""
        return sorted(self.supported_versions)

    @property
    def deprecated(self) -> list[ApiVersion]:
        """Deprecated versions, lowest first."""
        return sorted(self.deprecated_versions)

    def is_supported(self, version: ApiVersion) -> bool:
        return version in self.supported_versions

    def is_deprecated(self, version: ApiVersion) -> bool:
        return version in self.deprecated_versions

    def sunset_date(self, version: ApiVersion) -> date | None:
        for candidate, sunset in self.sunset_dates:
            if candidate == version:
                return sunset
        return None
