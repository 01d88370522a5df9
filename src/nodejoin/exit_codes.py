"""Exit-code contract for ``nodejoin start``.

Code  Meaning
----  -------
  0   Success: nothing to enroll, or enrollment completed
  1   Failure: ``--enrollment-token`` was given more than once
 64   Usage: ``--enrollment-token`` given without a value
 65   Data error: the token could not be decoded
 69   Enrollment failed: no cluster address accepted the token
 80   No-op: the node is already configured, enrollment skipped

The numeric values are conventions. Some platform launchers collapse non-zero
statuses to 1, so callers should compare classes rather than raw numbers
wherever they do not control the process wrapper.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Terminal classes of an enrollment run."""

    OK = 0
    FAILURE = 1
    USAGE = 64
    DATA_ERROR = 65
    ENROLLMENT_FAILED = 69
    NOOP = 80
