"""Where version candidates come from."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class VersionSourceKind(str, Enum):
    """Parts of a request a version can be read from."""

    URL_SEGMENT = "url_segment"
    HEADER = "header"
    QUERY_PARAMETER = "query_parameter"


DEFAULT_READERS: tuple[VersionSourceKind, ...] = (
    VersionSourceKind.URL_SEGMENT,
    VersionSourceKind.HEADER,
    VersionSourceKind.QUERY_PARAMETER,
)


@dataclass(frozen=True)
class VersionSource:
    """A raw version candidate and the part of the request it was found in."""

    kind: VersionSourceKind
    raw: str

    def __str__(self) -> str:
        return f"{self.kind.value}={self.raw!r}"


@dataclass(frozen=True)
class VersionSignals:
    """
    Candidate version strings pulled out of one request.

    Populated by an adapter (see ``dotmac.versioning.extract``); any field
    may be ``None`` when the request does not carry that signal.
    """

    url_segment: str | None = None
    header: str | None = None
    query_parameter: str | None = None

    def get(self, kind: VersionSourceKind) -> str | None:
        return getattr(self, kind.value)

    def candidates(self, readers: Iterable[VersionSourceKind]) -> list[VersionSource]:
        """Return non-empty candidates in reader order."""
        found = []
        for kind in readers:
            value = self.get(kind)
            if value is not None and value.strip():
                found.append(VersionSource(kind=kind, raw=value.strip()))
        return found
