"""Configuration utilities for NODEJOIN.

This module centralizes small helpers and constants related to application
configuration. Settings come from the environment; CLI options override them.
"""

import os
from pathlib import Path

from platformdirs import user_config_dir

from nodejoin.domain.value_objects import SemanticVersion

PATH_CONF_ENV = "NODEJOIN_PATH_CONF"  # pragma: no mutate
ENROLLMENT_TIMEOUT_ENV = "NODEJOIN_ENROLLMENT_TIMEOUT"  # pragma: no mutate
NODE_VERSION_ENV = "NODEJOIN_NODE_VERSION"  # pragma: no mutate

DEFAULT_ENROLLMENT_TIMEOUT = 60.0


class ConfigurationError(Exception):
    """Base class for configuration errors."""


class InvalidSettingError(ConfigurationError):
    """Raised when an environment setting has an unusable value."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"{name} is invalid: {reason}")
        self.name = name
        self.reason = reason


def get_config_dir() -> Path:
    """Get the node configuration directory.

    Returns:
        The value of `NODEJOIN_PATH_CONF` if set, otherwise the per-user
        configuration directory for ``nodejoin``.
    """
    if path := os.environ.get(PATH_CONF_ENV):
        return Path(path)
    return Path(user_config_dir("nodejoin", appauthor=False))


def get_enrollment_timeout() -> float:
    """Get the per-address enrollment timeout in seconds.

    Raises:
        InvalidSettingError: If `NODEJOIN_ENROLLMENT_TIMEOUT` is not a positive number.
    """
    if not (raw := os.environ.get(ENROLLMENT_TIMEOUT_ENV)):
        return DEFAULT_ENROLLMENT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError as e:
        raise InvalidSettingError(ENROLLMENT_TIMEOUT_ENV, "not a number") from e
    if not timeout > 0:
        raise InvalidSettingError(ENROLLMENT_TIMEOUT_ENV, "must be greater than 0")
    return timeout


def get_node_version() -> str | None:
    """Get the local node version used to gate token compatibility.

    Returns:
        The value of `NODEJOIN_NODE_VERSION`, or None when unset (no gating).

    Raises:
        InvalidSettingError: If the value is not a semantic version.
    """
    if not (version := os.environ.get(NODE_VERSION_ENV)):
        return None
    try:
        SemanticVersion.parse(version)
    except ValueError as e:
        raise InvalidSettingError(NODE_VERSION_ENV, "not a semantic version") from e
    return version
