"""Node configuration state adapters."""

from .local import LocalNodeConfiguration
from .memory import InMemoryNodeConfiguration

__all__ = ["InMemoryNodeConfiguration", "LocalNodeConfiguration"]
