"""Integration tests.

Purpose
- Exercise real interactions with the node configuration directory and the
  wiring built from environment settings.

Guidelines
- Use tmp_path for every directory a test touches; never the user's config dir.
- Minimize mocking; patch only to simulate failures the OS would not produce on demand.
- Mark as 'integration' and keep them slower but reliable.
"""
