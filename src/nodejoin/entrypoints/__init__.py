"""Entry points (CLI) for NODEJOIN."""
