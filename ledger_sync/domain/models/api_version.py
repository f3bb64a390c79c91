"""Server API revisions and server version parsing."""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
import re

from ledger_sync.domain.errors import DecodeError, UnsupportedVersionError


@total_ordering
class ApiVersion(Enum):
    """Wire format revisions of the hledger-web JSON API.

    Member values are the integer codes stored in user configuration.
    ``AUTO`` and ``HTML`` are sentinels without a JSON codec.
    """

    AUTO = 0
    HTML = 1
    V1_14 = -1
    V1_15 = -2
    V1_19_1 = -3
    V1_23 = -4
    V1_32 = -6
    V1_40 = -7
    V1_50 = -8

    @property
    def code(self) -> int:
        return self.value

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def is_json(self) -> bool:
        return self not in (ApiVersion.AUTO, ApiVersion.HTML)

    @property
    def supports_posting(self) -> bool:
        """Only the newest revision has a transaction encoder."""
        return self is ApiVersion.V1_50

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ApiVersion):
            return NotImplemented
        return _RANKS[self] < _RANKS[other]

    @classmethod
    def from_code(cls, code: int) -> "ApiVersion":
        """Return the member stored under ``code``; unknown codes mean AUTO."""
        try:
            return cls(code)
        except ValueError:
            return cls.AUTO

    @classmethod
    def parse(cls, raw: str) -> "ApiVersion":
        """Parse a configured version such as ``1.32``, ``v1_19_1`` or ``auto``.

        Args:
            raw: Version text from configuration.

        Returns:
            ApiVersion: Matching member.

        Raises:
            UnsupportedVersionError: If the text names no known revision.
        """
        cleaned = raw.strip().lower()
        if cleaned in ("auto", "(automatic)", ""):
            return cls.AUTO
        if cleaned in ("html", "(html)"):
            return cls.HTML
        dotted = cleaned.lstrip("v").replace("_", ".")
        for version in cls.json_versions():
            if version.description == dotted:
                return version
        raise UnsupportedVersionError(f"Unknown API version: {raw!r}")

    @classmethod
    def json_versions(cls) -> tuple["ApiVersion", ...]:
        """Return every JSON revision, newest first."""
        return tuple(
            sorted(
                (version for version in cls if version.is_json),
                reverse=True,
            )
        )


_DESCRIPTIONS = {
    ApiVersion.AUTO: "(automatic)",
    ApiVersion.HTML: "(HTML)",
    ApiVersion.V1_14: "1.14",
    ApiVersion.V1_15: "1.15",
    ApiVersion.V1_19_1: "1.19.1",
    ApiVersion.V1_23: "1.23",
    ApiVersion.V1_32: "1.32",
    ApiVersion.V1_40: "1.40",
    ApiVersion.V1_50: "1.50",
}

_RANKS = {
    ApiVersion.AUTO: 0,
    ApiVersion.HTML: 1,
    ApiVersion.V1_14: 2,
    ApiVersion.V1_15: 3,
    ApiVersion.V1_19_1: 4,
    ApiVersion.V1_23: 5,
    ApiVersion.V1_32: 6,
    ApiVersion.V1_40: 7,
    ApiVersion.V1_50: 8,
}

# Oldest server release each revision can talk to, newest first.
_MINIMUM_SERVER_RELEASES = (
    ((1, 50), ApiVersion.V1_50),
    ((1, 40), ApiVersion.V1_40),
    ((1, 32), ApiVersion.V1_32),
    ((1, 23), ApiVersion.V1_23),
    ((1, 19), ApiVersion.V1_19_1),
    ((1, 15), ApiVersion.V1_15),
    ((1, 14), ApiVersion.V1_14),
)

_VERSION_PATTERN = re.compile(r'^"?(\d+)\.(\d+)(?:\.(\d+))?"?$')


@dataclass(frozen=True)
class ServerVersion:
    """Release of the hledger-web server answering the version endpoint.

    Attributes:
        major: Major release number.
        minor: Minor release number.
        patch: Patch number when reported.
        pre_1_20_1: True for servers without a version endpoint.
    """

    major: int
    minor: int
    patch: int | None = None
    pre_1_20_1: bool = False

    @classmethod
    def parse(cls, raw: str) -> "ServerVersion":
        """Parse a version endpoint answer such as ``"1.32"`` or ``1.32.1``.

        Raises:
            DecodeError: If the answer is not a dotted version number.
        """
        match = _VERSION_PATTERN.match(raw.strip())
        if match is None:
            raise DecodeError(f"Unrecognized server version: {raw!r}")
        major, minor, patch = match.groups()
        return cls(
            major=int(major),
            minor=int(minor),
            patch=int(patch) if patch is not None else None,
        )

    @classmethod
    def legacy(cls) -> "ServerVersion":
        """Return the marker used when the version endpoint is missing."""
        return cls(major=1, minor=19, pre_1_20_1=True)

    def at_least(self, major: int, minor: int) -> bool:
        return (self.major, self.minor) >= (major, minor)

    def suitable_api_version(self) -> ApiVersion | None:
        """Return the newest revision this server speaks, if any."""
        if self.pre_1_20_1:
            return None
        for (major, minor), version in _MINIMUM_SERVER_RELEASES:
            if self.at_least(major, minor):
                return version
        return None

    def __str__(self) -> str:
        if self.pre_1_20_1:
            return "(before 1.20)"
        if self.patch is None:
            return f"{self.major}.{self.minor}"
        return f"{self.major}.{self.minor}.{self.patch}"


__all__ = ["ApiVersion", "ServerVersion"]
