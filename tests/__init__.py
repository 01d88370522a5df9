"""NODEJOIN test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- integration/  : Real interactions with the filesystem or local sockets.
- functional/   : Operator-visible enrollment flows tested at the CLI boundary.
- e2e/          : Full CLI invocations exercising logging and option handling.
- fixtures/     : Shared pytest fixtures (no tests here).

General guidance
- Keep unit fast and deterministic (no real I/O); prefer fakes over mocks at boundaries.
- Functional asserts user-observable results (exit codes, messages, files), not internals.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
"""
