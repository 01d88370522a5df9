"""Fixtures and test helpers for end-to-end CLI tests.

Provides a test-only `log-demo` Click command that replays the log traffic of
an enrollment run, plus fixtures to register that command, obtain a
CliRunner, run tests within an isolated filesystem, and build node
configuration directories for `nodejoin start`.
"""

import logging
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from nodejoin.entrypoints.cli.main import nodejoin

# pylint: disable=redefined-outer-name

DEMO_LOGGER = "nodejoin.demo"
THIRD_PARTY_LOGGER = "urllib3.connectionpool"


@click.command()
def log_demo():
    """Emit one message per level on a project logger and on a third-party logger.

    The final DEBUG message is emitted after the WARNING so tests can tell
    whether the flight recorder was flushed on close.
    """
    logger = logging.getLogger(DEMO_LOGGER)
    logger.debug("Decoded enrollment token with 1 address(es).")
    logger.info("Attempting enrollment via localhost:9200.")
    logger.warning("Enrollment via localhost:9200 failed: connection refused.")
    logger.error("Unable to enroll with any cluster address.")
    logger.critical("Node configuration directory is not writable.")
    third_party = logging.getLogger(THIRD_PARTY_LOGGER)
    third_party.debug("Starting new HTTPS connection (1): localhost:9200")
    third_party.info("Resetting dropped connection: localhost")
    third_party.warning("Retrying after connection broken by a remote reset")
    logger.debug("Enrollment run finished.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its Click-Extra sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command on `nodejoin` for the duration of a test."""
    nodejoin.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(nodejoin, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside runner.isolated_filesystem()."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def node_dir(tmp_path) -> Path:
    """An empty (pristine) node configuration directory."""
    path = tmp_path / "node"
    path.mkdir()
    return path


@pytest.fixture
def configured_node_dir(node_dir) -> Path:
    """A node configuration directory whose security is already set up."""
    (node_dir / "certs").mkdir()
    return node_dir
