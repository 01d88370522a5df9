"""Top-level ``nodejoin`` command.

The group owns the options every subcommand shares (verbosity, flight
recorder, per-logger levels, redaction) and sets up logging before a
subcommand runs. Subcommands are registered at the bottom of the module.

Examples
    $ nodejoin --version
    $ nodejoin -v start --enrollment-token eyJhZHIiOlsibG9jYWxob3N0OjkyMDAiXSwi...
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from nodejoin import __version__
from nodejoin.bootstrap import build_redactor
from nodejoin.exit_codes import ExitCode
from nodejoin.interfaces.redactor import RedactorMode
from nodejoin.logging import LoggingOptions, configure_logging

from .helpers.log_level_parser import parse_log_level
from .start import start

HELP = """Join a node to a secured cluster.

    Start a fresh node once with an enrollment token. The token, generated on
    an existing cluster member, tells the node where the cluster listens and
    which certificate fingerprint to trust; the node then fetches its
    security configuration without anyone typing credentials.
    """

EPILOG = "\b\n" + "\n".join(
    [click.style("Exit codes:", fg="blue", bold=True, underline=True)]
    + [f"  {code.value:>3}  {code.name}" for code in ExitCode]
)

DEFAULT_LOG_PATH = Path(user_log_dir("nodejoin", appauthor=False, ensure_exists=True)) / "latest.log"
DEFAULT_FLIGHT_RECORDER_CAPACITY = 2000


@clickx.extra_group(
    version=__version__,
    help=HELP,
    epilog=EPILOG,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "-v",
    "--verbose",
    "verbose_count",
    count=True,
    default=0,
    help="Show more on the console: WARNING, then INFO (-v), then DEBUG (-vv).",
)
@click.option(
    "-q",
    "--quiet",
    "quiet_count",
    count=True,
    default=0,
    help="Show less on the console: ERROR (-q), then CRITICAL (-qq).",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Print every record with its logger name, timestamp and source line.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_PATH,
    envvar="NODEJOIN_LOG_PATH",
    show_default=True,
    show_envvar=True,
    help="File the flight recorder writes to. It is truncated on each run.",
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=DEFAULT_FLIGHT_RECORDER_CAPACITY,
    envvar="NODEJOIN_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    hidden=True,
    help="Number of records the flight recorder keeps in memory.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    default=True,
    envvar="NODEJOIN_FLIGHT_RECORDER",
    show_envvar=True,
    help=(
        "Buffer recent DEBUG records regardless of -v/-q and dump them to "
        "--log-path as soon as a WARNING or ERROR is logged."
    ),
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush",
    default=False,
    envvar="NODEJOIN_FORCE_FLUSH_FLIGHT_RECORDER",
    show_default=True,
    show_envvar=True,
    help="Also dump the flight recorder on exit when nothing went wrong.",
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    default=("click_extra=WARNING",),
    envvar="NODEJOIN_LOGGER_LEVEL",
    show_default=True,
    show_envvar=True,
    help=(
        "NAME=LEVEL floor for one logger, on the console and in the flight "
        "recorder. Repeat the option, or list pairs in NODEJOIN_LOGGER_LEVEL "
        "separated by commas or spaces."
    ),
)
@click.option(
    "--redactor-mode",
    type=click.Choice([mode.value for mode in RedactorMode], case_sensitive=False),
    default=RedactorMode.LENIENT.value,
    envvar="NODEJOIN_REDACTOR_MODE",
    show_default=True,
    show_envvar=True,
    help=(
        "How secrets are masked in logs and messages: 'lenient' keeps the "
        "first characters of long tokens, 'strict' hides them and user names too."
    ),
)
@clickx.pass_context
def nodejoin(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush: bool,
    logger_levels: dict[str, int],
    redactor_mode: str,
) -> None:
    """Join a node to a secured cluster."""
    mode = redactor_mode.lower()
    options = LoggingOptions(
        verbose=verbose_count,
        quiet=quiet_count,
        debug=debug,
        color=ctx.color is not False,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity,
        force_flush=force_flush,
        logger_levels=logger_levels,
        redactor_mode=mode,
    )
    configure_logging(options, build_redactor(mode))

    # subcommands build their own collaborators with the same redaction mode
    ctx.ensure_object(dict)["redactor_mode"] = mode
    ctx.call_on_close(logging.shutdown)


nodejoin.add_command(start)
