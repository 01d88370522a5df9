"""Wire the enrollment collaborators from configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from nodejoin import config
from nodejoin.adapters.enrollment import HttpsEnrollmentAttempt
from nodejoin.adapters.node_state import LocalNodeConfiguration
from nodejoin.adapters.redactor import Redactor as RegexRedactor
from nodejoin.interfaces.enrollment import EnrollmentAttempt
from nodejoin.interfaces.node_state import ConfigurationStateProvider
from nodejoin.interfaces.redactor import Redactor, RedactorMode


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    node_state: ConfigurationStateProvider
    enrollment_attempt: EnrollmentAttempt
    redactor: Redactor


def build_redactor(mode: RedactorMode | str = RedactorMode.LENIENT) -> Redactor:
    """Return the regex redactor for a mode given as enum or CLI string."""
    return RegexRedactor(RedactorMode(mode))


def build_enrollment_attempt(
    node_state: ConfigurationStateProvider, redactor: Redactor
) -> EnrollmentAttempt:
    """Build the HTTPS enrollment attempt using environment settings."""
    return HttpsEnrollmentAttempt(
        node_state,
        redactor,
        timeout=config.get_enrollment_timeout(),
        local_version=config.get_node_version(),
    )


def bootstrap(
    config_dir: Path | None = None,
    redactor_mode: RedactorMode = RedactorMode.LENIENT,
) -> AppContainer:
    """Bootstrap the enrollment collaborators.

    Args:
        config_dir: Node configuration directory; defaults to `config.get_config_dir()`.
        redactor_mode: Redaction mode for logs and messages.

    Raises:
        config.ConfigurationError: If an environment setting is invalid.
    """
    redactor = build_redactor(redactor_mode)
    node_state = LocalNodeConfiguration(config_dir or config.get_config_dir())
    return AppContainer(
        node_state=node_state,
        enrollment_attempt=build_enrollment_attempt(node_state, redactor),
        redactor=redactor,
    )
