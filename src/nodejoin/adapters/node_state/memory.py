"""In-memory node configuration state adapter."""

from collections.abc import Mapping
from typing import Any

from nodejoin.interfaces.node_state import ConfigurationStateProvider


class InMemoryNodeConfiguration(ConfigurationStateProvider):
    """ConfigurationStateProvider that keeps the bootstrap document in memory."""

    def __init__(self, configured: bool = False) -> None:
        self._configured = configured
        self.bootstrap: dict[str, Any] | None = None
        self.queries = 0

    def is_auto_configured(self) -> bool:
        self.queries += 1
        return self._configured

    def apply(self, bootstrap: Mapping[str, Any]) -> None:
        self.bootstrap = dict(bootstrap)
        self._configured = True
