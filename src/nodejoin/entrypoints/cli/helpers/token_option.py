"""Raw scanning of the ``--enrollment-token`` option.

Click would collapse a repeated option and a multi-valued option into the same
shape, so ``start`` receives its arguments unprocessed and this module keeps
the two facts the decision engine needs apart: how many times the option was
given, and which values followed its first occurrence.

Examples:
    ```py
    >>> scan_enrollment_token_option(["--enrollment-token", "A", "B"]).option
    EnrollmentTokenOption(occurrence_count=1, first_occurrence_values=('A', 'B'))
    >>> scan_enrollment_token_option(["--enrollment-token=A", "--enrollment-token", "B"]).option
    EnrollmentTokenOption(occurrence_count=2, first_occurrence_values=('A',))
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from nodejoin.service_layer.enrollment import OPTION_NAME, EnrollmentTokenOption


@dataclass(frozen=True)
class ScanResult:
    """The scanned option plus anything the scanner did not recognise."""

    option: EnrollmentTokenOption
    unrecognized: tuple[str, ...] = ()
    stray: tuple[str, ...] = ()


def _is_option(arg: str) -> bool:
    return arg.startswith("-") and arg != "-"


def scan_enrollment_token_option(args: Sequence[str]) -> ScanResult:
    """Scan raw arguments for ``--enrollment-token``.

    Args:
        args: Arguments as given on the command line, after the subcommand.

    Returns:
        ScanResult: The option occurrence count and first-occurrence values,
        other option-like arguments (``unrecognized``), and positional
        arguments not attached to the first occurrence (``stray``).
    """
    occurrences = 0
    values: list[str] = []
    unrecognized: list[str] = []
    stray: list[str] = []
    collecting = False

    for arg in args:
        name, sep, inline_value = arg.partition("=")
        if name == OPTION_NAME:
            occurrences += 1
            collecting = occurrences == 1
            if collecting and sep:
                values.append(inline_value)
        elif _is_option(arg):
            collecting = False
            unrecognized.append(arg)
        elif collecting:
            values.append(arg)
        else:
            stray.append(arg)

    return ScanResult(
        option=EnrollmentTokenOption(
            occurrence_count=occurrences, first_occurrence_values=tuple(values)
        ),
        unrecognized=tuple(unrecognized),
        stray=tuple(stray),
    )
