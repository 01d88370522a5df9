"""CLI helpers for NODEJOIN.

Utilities used by the command-line interface: message emitters that write to
stderr with emoji→ASCII fallbacks, the logger-level option parser, and the raw
``--enrollment-token`` scanner.
"""

from .messages import error, info, success, warn

__all__ = ["error", "info", "success", "warn"]
