"""The ``nodejoin`` command-line interface."""
