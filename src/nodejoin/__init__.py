"""NODEJOIN

Token-based enrollment of new nodes into a secured cluster. A node started
with ``--enrollment-token`` decodes the token, checks that it has not been
configured before, and fetches its bootstrap security configuration from one
of the cluster addresses carried by the token.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
