"""Interfaces for redacting sensitive values.

This module defines the Redactor interface and the RedactorMode enumeration
used by adapters to keep secrets (enrollment tokens, API keys, passwords,
authorization headers) out of logs and terminal output.
"""

import abc
from enum import Enum

# pylint: disable=too-few-public-methods


class RedactorMode(Enum):
    """Enumeration for redactor modes.

    Modes:
    - LENIENT: redact secrets but keep a short prefix of masked values and
      keep usernames/ids visible.
    - STRICT: redact secrets entirely and also usernames/ids.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class Redactor(abc.ABC):
    """Interface for sanitizing sensitive information from strings."""

    _mode: RedactorMode

    @abc.abstractmethod
    def mask(self, secret: str) -> str:
        """Return a display-safe stand-in for a secret value.

        Args:
            secret: The secret itself (e.g. a raw enrollment token).

        Returns:
            A masked representation that never contains the full secret.
        """

    @abc.abstractmethod
    def sanitize(self, text: str) -> str:
        """Return ``text`` with embedded secrets redacted.

        Args:
            text: Free-form text such as an error message or a URL.

        Returns:
            The text with sensitive fragments replaced.
        """

    @property
    def mode(self) -> RedactorMode:
        """Return the redaction mode."""
        return self._mode
