"""Startup decision logic for ``--enrollment-token``.

Given how the option appeared on the command line and the node's current
configuration state, :func:`decide` picks exactly one outcome:

==================  =====================================================
Outcome             When
==================  =====================================================
``NotRequested``    the option is absent (ordinary startup)
``RepeatedOption``  the option appears more than once
``UsageError``      the option has no value, or an empty one
``DataError``       the first value does not decode to a valid token
``NoOp``            the token is valid but the node is already configured
``Proceed``         the token is valid and the node is pristine
==================  =====================================================

Rules are evaluated in that order: repetition is rejected before anything is
decoded, and an empty value is rejected before node state is queried. Only the
first value following the option is used; extra values are ignored.

:func:`screen_option` applies the first three rules on their own, for callers
that must settle them before building any collaborator.

:func:`run_enrollment` carries a ``Proceed`` decision through the injected
:class:`~nodejoin.interfaces.enrollment.EnrollmentAttempt` and maps every
outcome to an :class:`~nodejoin.exit_codes.ExitCode`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

from nodejoin.domain import token_codec
from nodejoin.domain.errors import DecodeError
from nodejoin.domain.value_objects import EnrollmentToken
from nodejoin.exit_codes import ExitCode
from nodejoin.interfaces.enrollment import EnrollmentAttempt, EnrollmentResult
from nodejoin.interfaces.node_state import ConfigurationStateProvider
from nodejoin.interfaces.redactor import Redactor

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods

OPTION_NAME = "--enrollment-token"
MULTIPLE_OPTIONS_MSG = f"Multiple {OPTION_NAME} parameters are not allowed"
MISSING_VALUE_MSG = f"Option {OPTION_NAME} requires a value"
INVALID_TOKEN_MSG = "Invalid enrollment token"
ALREADY_CONFIGURED_MSG = (
    "Skipping enrollment because this node is already configured for security. "
    f"Remove {OPTION_NAME} from the startup command to silence this message."
)


@dataclass(frozen=True)
class EnrollmentTokenOption:
    """How ``--enrollment-token`` appeared on the command line.

    Attributes:
        occurrence_count: Number of times the option itself was given.
        first_occurrence_values: Values that followed the first occurrence.
    """

    occurrence_count: int
    first_occurrence_values: tuple[str, ...] = ()


# ============================================================================
#                               Outcomes
# ============================================================================


@dataclass(frozen=True)
class Outcome:
    """Base class for decision outcomes."""

    exit_code: ClassVar[ExitCode]


@dataclass(frozen=True)
class NotRequested(Outcome):
    """The option was not given; start up without enrollment."""

    exit_code: ClassVar[ExitCode] = ExitCode.OK


@dataclass(frozen=True)
class RepeatedOption(Outcome):
    """The option was given more than once."""

    message: str = MULTIPLE_OPTIONS_MSG
    exit_code: ClassVar[ExitCode] = ExitCode.FAILURE


@dataclass(frozen=True)
class UsageError(Outcome):
    """The option was given without a usable value."""

    message: str = MISSING_VALUE_MSG
    exit_code: ClassVar[ExitCode] = ExitCode.USAGE


@dataclass(frozen=True)
class DataError(Outcome):
    """The option value could not be decoded into an enrollment token."""

    error: DecodeError
    message: str = INVALID_TOKEN_MSG
    exit_code: ClassVar[ExitCode] = ExitCode.DATA_ERROR


@dataclass(frozen=True)
class NoOp(Outcome):
    """The token is valid but the node is already configured."""

    message: str = ALREADY_CONFIGURED_MSG
    exit_code: ClassVar[ExitCode] = ExitCode.NOOP


@dataclass(frozen=True)
class Proceed(Outcome):
    """The token is valid and the node is pristine: enroll."""

    token: EnrollmentToken
    exit_code: ClassVar[ExitCode] = ExitCode.OK


@dataclass(frozen=True)
class EnrollmentReport:
    """Final result of an enrollment run."""

    outcome: Outcome
    exit_code: ExitCode
    result: EnrollmentResult | None = None


# ============================================================================
#                               Decisions
# ============================================================================


def screen_option(option: EnrollmentTokenOption) -> Outcome | None:
    """Apply the rules that need nothing but the option itself.

    Returns:
        ``NotRequested``, ``RepeatedOption`` or ``UsageError`` when one of them
        applies, otherwise None: the first value must then be decoded.
    """
    if option.occurrence_count == 0:
        return NotRequested()

    if option.occurrence_count > 1:
        logger.debug("%s given %d times", OPTION_NAME, option.occurrence_count)
        return RepeatedOption()

    values = option.first_occurrence_values
    if len(values) > 1:
        logger.debug("Ignoring %d extra value(s) after %s", len(values) - 1, OPTION_NAME)

    if not (values and values[0]):
        return UsageError()
    return None


def decide(
    option: EnrollmentTokenOption,
    node_state: ConfigurationStateProvider,
    redactor: Redactor | None = None,
) -> Outcome:
    """Decide what to do with the ``--enrollment-token`` option.

    Args:
        option: Occurrence count and first-occurrence values of the option.
        node_state: Reports whether the node is already configured. Queried
            only once the token has been decoded successfully.
        redactor: Used to mask the raw value in log records, if given.

    Returns:
        Outcome: Exactly one of the outcome types listed in the module docs.
    """
    if (outcome := screen_option(option)) is not None:
        return outcome

    raw = option.first_occurrence_values[0]
    try:
        token = token_codec.decode(raw)
    except DecodeError as e:
        logger.warning(
            "Rejected enrollment token %s (%s): %s",
            redactor.mask(raw) if redactor else "<redacted>",
            e.kind.value,
            e,
        )
        return DataError(error=e, message=f"{INVALID_TOKEN_MSG}: {e}")

    logger.debug(
        "Decoded enrollment token from version %s with %d address(es)",
        token.version,
        len(token.bound_addresses),
    )

    if node_state.is_auto_configured():
        return NoOp()

    return Proceed(token=token)


def run_enrollment(
    option: EnrollmentTokenOption,
    node_state: ConfigurationStateProvider,
    attempt: EnrollmentAttempt,
    redactor: Redactor | None = None,
) -> EnrollmentReport:
    """Decide, enroll when the decision is ``Proceed``, and derive the exit code.

    Args:
        option: Occurrence count and first-occurrence values of the option.
        node_state: Node configuration state collaborator.
        attempt: Collaborator that contacts the cluster. Only invoked on ``Proceed``.
        redactor: Used to mask secrets in log records, if given.

    Returns:
        EnrollmentReport: The outcome, its exit code and the enrollment result
        (``None`` unless enrollment was attempted).
    """
    outcome = decide(option, node_state, redactor)
    if not isinstance(outcome, Proceed):
        return EnrollmentReport(outcome=outcome, exit_code=outcome.exit_code)

    result = attempt.enroll(outcome.token)
    if result.success:
        logger.info("Enrollment succeeded: %s", result.message)
        return EnrollmentReport(outcome=outcome, exit_code=ExitCode.OK, result=result)

    logger.error("Enrollment failed: %s", result.message)
    return EnrollmentReport(
        outcome=outcome, exit_code=ExitCode.ENROLLMENT_FAILED, result=result
    )
