"""NODEJOIN ``start`` command: token-based enrollment at node startup.

Behavior
- Arguments are received unprocessed and scanned by
  ``helpers.token_option`` so a repeated ``--enrollment-token`` can be told
  apart from one occurrence followed by several values.
- The decision engine (``service_layer.enrollment``) picks the outcome; this
  command renders it on **stderr** and exits with the outcome's exit code.

Failure modes
- Repeated option → exit 1 with "Multiple --enrollment-token parameters are not allowed".
- Missing/empty value or unknown arguments → USAGE (64).
- Undecodable token → DATA_ERROR (65).
- Node already configured → NOOP (80), reported as information.
- Cluster enrollment failed → ENROLLMENT_FAILED (69).
- Invalid environment settings → ``ClickException`` (exit 1) with guidance.
  Settings are read only once the token has to be decoded, so the outcomes
  above that need no collaborators are unaffected by them.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from nodejoin import config
from nodejoin.bootstrap import bootstrap
from nodejoin.exit_codes import ExitCode
from nodejoin.interfaces.redactor import RedactorMode
from nodejoin.service_layer.enrollment import (
    DataError,
    NoOp,
    NotRequested,
    Outcome,
    RepeatedOption,
    UsageError,
    run_enrollment,
    screen_option,
)

from .helpers import error, info, success, warn
from .helpers.token_option import scan_enrollment_token_option

logger = logging.getLogger(__name__)

START_HELP = """Start the node, joining a secured cluster if an enrollment token is given.

    \b
    ARGS accepts:
      --enrollment-token TOKEN   enroll this node using a token generated by
                                 an existing cluster member (given at most once)
    """


def _report(outcome: Outcome) -> None:
    """Render a non-Proceed outcome for the operator."""
    if isinstance(outcome, NoOp):
        info(outcome.message)
    elif isinstance(outcome, (RepeatedOption, UsageError, DataError)):
        error(outcome.message)
    elif isinstance(outcome, NotRequested):
        logger.info("No enrollment token given; nothing to enroll")


@click.command(
    help=START_HELP,
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option(
    "--path-conf",
    "path_conf",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=config.PATH_CONF_ENV,
    show_envvar=True,
    default=None,
    help="Node configuration directory (defaults to the per-user config directory).",
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def start(ctx: click.Context, path_conf: Path | None, args: tuple[str, ...]) -> None:
    """Start the node, enrolling it when ``--enrollment-token`` is given."""
    scan = scan_enrollment_token_option(args)
    # a repeated option is reported as such whatever else is on the line
    if scan.unrecognized and scan.option.occurrence_count <= 1:
        error(f"No such option: {scan.unrecognized[0]}")
        ctx.exit(ExitCode.USAGE)
    if scan.stray and scan.option.occurrence_count <= 1:
        error(f"Unexpected argument: {scan.stray[0]}")
        ctx.exit(ExitCode.USAGE)
    extra = len(scan.option.first_occurrence_values) - 1
    if extra > 0 and scan.option.occurrence_count == 1:
        warn(f"Ignoring {extra} extra value(s) after --enrollment-token")

    if (outcome := screen_option(scan.option)) is not None:
        _report(outcome)
        ctx.exit(outcome.exit_code)

    redactor_mode = RedactorMode((ctx.obj or {}).get("redactor_mode", "lenient"))
    try:
        app = bootstrap(config_dir=path_conf, redactor_mode=redactor_mode)
    except config.ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    report = run_enrollment(
        scan.option, app.node_state, app.enrollment_attempt, app.redactor
    )

    if report.result is None:
        _report(report.outcome)
    elif report.result.success:
        success(report.result.message)
    else:
        error(report.result.message)

    ctx.exit(report.exit_code)
