"""API version value type and parsing."""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .exceptions import MalformedVersionError

_VERSION_RE = re.compile(r"^[vV]?(?P<major>[0-9]+)(?:\.(?P<minor>[0-9]+))?$")


@total_ordering
@dataclass(frozen=True, eq=False)
class ApiVersion:
    """
    An API version identifier made of a major and an optional minor number.

    A missing minor compares equal to ``0``, so ``ApiVersion(1)`` and
    ``ApiVersion(1, 0)`` are the same version. The canonical string keeps
    the form the version was written in.
    """

    major: int
    minor: int | None = None

    def __post_init__(self) -> None:
        if self.major < 0 or (self.minor is not None and self.minor < 0):
            raise MalformedVersionError(f"Version numbers must be non-negative: {self.major}.{self.minor}")

    @classmethod
    def parse(cls, value: str) -> "ApiVersion":
        """
        Parse a version string such as ``"1"``, ``"1.2"`` or ``"v2"``.

        Raises:
            MalformedVersionError: If the string is not a valid version
        """
        match = _VERSION_RE.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise MalformedVersionError(f"Invalid API version: {value!r}", raw=str(value))

        minor = match.group("minor")
        return cls(major=int(match.group("major")), minor=int(minor) if minor is not None else None)

    @property
    def _key(self) -> tuple[int, int]:
        return (self.major, self.minor or 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiVersion):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other: "ApiVersion") -> bool:
        if not isinstance(other, ApiVersion):
            return NotImplemented
        return self._key < other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        if self.minor is None:
            return str(self.major)
        return f"{self.major}.{self.minor}"

    def __repr__(self) -> str:
        return f"ApiVersion({self})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Accept "1.0" as well as instances; serialize to the canonical string
        return core_schema.no_info_plain_validator_function(
            parse_version, serialization=core_schema.to_string_ser_schema()
        )


def parse_version(value: "str | int | ApiVersion") -> ApiVersion:
    """Coerce a string, bare major number or ``ApiVersion`` into an ``ApiVersion``."""
    if isinstance(value, ApiVersion):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return ApiVersion(major=value)
    return ApiVersion.parse(value)
