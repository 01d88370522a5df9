"""Module including value objects used across the domain layer."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from nodejoin.domain.errors import InvalidTokenFieldError

FINGERPRINT_PATTERN = re.compile(r"[0-9a-f]{64}")
SEMVER_PATTERN = re.compile(
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*))*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?",
    re.ASCII,
)
ADDRESS_PATTERN = re.compile(
    r"(\[[0-9A-Fa-f:.]+\]|[^\s:\[\]/@]+):(\d{1,5})", re.ASCII
)
MAX_PORT = 65535


@dataclass(frozen=True)
class SemanticVersion:
    """Value object representing a semantic version (``MAJOR.MINOR.PATCH``)."""

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse ``text`` as a semantic version.

        Raises:
            ValueError: If ``text`` is not a valid semantic version.
        """
        if not (match := SEMVER_PATTERN.fullmatch(text)):
            raise ValueError(f"Not a semantic version: {text!r}")
        major, minor, patch, prerelease, build = match.groups()
        return cls(int(major), int(minor), int(patch), prerelease, build)

    def is_compatible_with(self, other: SemanticVersion) -> bool:
        """Return True when both versions share the same major version."""
        return self.major == other.major

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


@dataclass(frozen=True)
class EnrollmentToken:
    """Value object carrying everything a node needs to join a cluster.

    Attributes:
        api_key: Credential scoped to the enrollment operation.
        fingerprint: Hex SHA-256 of the cluster's trust anchor (64 lowercase
            hex characters).
        version: Semantic version of the issuing node.
        bound_addresses: Candidate ``host:port`` endpoints, tried in order.

    Raises:
        InvalidTokenFieldError: On construction, if any field violates its
            invariant.
    """

    api_key: str
    fingerprint: str
    version: str
    bound_addresses: tuple[str, ...]

    def __post_init__(self) -> None:
        # a list is accepted for convenience but stored as a tuple
        if isinstance(self.bound_addresses, list):
            object.__setattr__(self, "bound_addresses", tuple(self.bound_addresses))
        validate_api_key(self.api_key)
        validate_fingerprint(self.fingerprint)
        validate_version(self.version)
        validate_bound_addresses(self.bound_addresses)

    @property
    def semantic_version(self) -> SemanticVersion:
        """The issuing node's version, parsed."""
        return SemanticVersion.parse(self.version)


def validate_api_key(value: object) -> None:
    """Raise InvalidTokenFieldError unless ``value`` is a non-empty string."""
    if not isinstance(value, str):
        raise InvalidTokenFieldError("api_key", "must be a string")
    if not value:
        raise InvalidTokenFieldError("api_key", "must not be empty")


def validate_fingerprint(value: object) -> None:
    """Raise InvalidTokenFieldError unless ``value`` is 64 lowercase hex characters."""
    if not isinstance(value, str):
        raise InvalidTokenFieldError("fingerprint", "must be a string")
    if not FINGERPRINT_PATTERN.fullmatch(value):
        raise InvalidTokenFieldError(
            "fingerprint", "must be 64 lowercase hexadecimal characters"
        )


def validate_version(value: object) -> None:
    """Raise InvalidTokenFieldError unless ``value`` is a semantic version string."""
    if not isinstance(value, str):
        raise InvalidTokenFieldError("version", "must be a string")
    try:
        SemanticVersion.parse(value)
    except ValueError as e:
        # also covers components too long to convert to int
        raise InvalidTokenFieldError("version", "must be a semantic version") from e


def validate_bound_addresses(value: object) -> None:
    """Raise InvalidTokenFieldError unless ``value`` is a non-empty host:port sequence."""
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise InvalidTokenFieldError("bound_addresses", "must be a list of addresses")
    if not value:
        raise InvalidTokenFieldError("bound_addresses", "must not be empty")
    for address in value:
        if not isinstance(address, str) or not is_valid_address(address):
            raise InvalidTokenFieldError(
                "bound_addresses", "every entry must be of the form host:port"
            )


def is_valid_address(address: str) -> bool:
    """Return True if ``address`` is a ``host:port`` string with a valid port."""
    if not (match := ADDRESS_PATTERN.fullmatch(address)):
        return False
    return int(match.group(2)) <= MAX_PORT
