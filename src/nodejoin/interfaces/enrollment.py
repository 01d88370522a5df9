"""Enrollment attempt interface definitions."""

import abc
from dataclasses import dataclass

from nodejoin.domain.value_objects import EnrollmentToken


@dataclass(frozen=True)
class EnrollmentResult:
    """Outcome of contacting the cluster with an enrollment token."""

    success: bool
    message: str
    address: str | None = None


class EnrollmentAttempt(abc.ABC):
    """Abstract base class for joining a cluster with a decoded token."""

    @abc.abstractmethod
    def enroll(self, token: EnrollmentToken) -> EnrollmentResult:
        """Contact the cluster and fetch this node's bootstrap configuration.

        Network, authentication and trust failures are reported through the
        returned result, not raised.

        Args:
            token: The decoded enrollment token.

        Returns:
            EnrollmentResult: Success flag, a display-safe message and the
            address that answered (if any).
        """
