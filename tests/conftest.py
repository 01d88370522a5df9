"""Global pytest fixtures and default marks for NODEJOIN."""

from pathlib import Path

import pytest

# pylint: disable=unused-argument

pytest_plugins = [
    "tests.fixtures.tokens",
]

TESTS_ROOT = Path(__file__).parent.resolve()
# top-level folder -> default marker
DEFAULT_MARKERS = ("unit", "integration", "functional", "e2e")


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each item after the top-level test folder it lives in, unless already marked."""
    for item in items:
        path = item.path.resolve()
        if TESTS_ROOT not in path.parents:
            continue
        folder = path.relative_to(TESTS_ROOT).parts[0]
        if folder not in DEFAULT_MARKERS:
            continue
        if not any(marker.name == folder for marker in item.iter_markers()):
            item.add_marker(getattr(pytest.mark, folder))
