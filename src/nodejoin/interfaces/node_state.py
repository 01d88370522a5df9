"""Node configuration state interface definitions."""

import abc
from collections.abc import Mapping
from typing import Any


class ConfigurationStateProvider(abc.ABC):
    """Abstract access to a node's security configuration state."""

    @abc.abstractmethod
    def is_auto_configured(self) -> bool:
        """Report whether the node already has security configured.

        Returns:
            bool: True if the node is not pristine (token enrollment no longer applies).
        """

    @abc.abstractmethod
    def apply(self, bootstrap: Mapping[str, Any]) -> None:
        """Persist bootstrap configuration fetched from the cluster.

        Implementations must be all-or-nothing: either the whole configuration
        is stored and ``is_auto_configured()`` turns True, or nothing changes.

        Args:
            bootstrap: The configuration document returned by the cluster.
        """
