"""Logging setup shared by every ``nodejoin`` command.

The root logger receives everything at DEBUG and two handlers decide what to
keep:

- a Rich console handler on stderr whose threshold follows ``-v``/``-q``
  (or DEBUG with ``--debug``), and
- an optional flight recorder, a :class:`~logging.handlers.MemoryHandler`
  that buffers recent records and writes them to a file once a WARNING is
  seen or, when forced, at exit.

Each handler carries a :class:`RedactingFilter`, so an enrollment token or
API key that ends up inside a log message is masked before it is written to
the terminal or to disk.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from importlib.metadata import version as dist_version
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

from nodejoin import __version__

if TYPE_CHECKING:
    from nodejoin.interfaces.redactor import Redactor

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "nodejoin"
DEFAULT_CONSOLE_LEVEL = logging.WARNING
LEVEL_STEP = 10

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


def verbosity_to_level(verbose: int, quiet: int) -> int:
    """Translate repeated -v/-q flags into a console level.

    Each -v lowers the WARNING default by one level and each -q raises it,
    clamped to the DEBUG..CRITICAL range.
    """
    level = DEFAULT_CONSOLE_LEVEL + LEVEL_STEP * (quiet - verbose)
    return min(max(level, logging.DEBUG), logging.CRITICAL)


class ThirdPartyPrefixFilter(logging.Filter):
    """Tag records from foreign loggers with ``[top-level-name]``.

    Console output uses ``record.prefix`` so messages from libraries such as
    urllib3 stand apart from our own, which get an empty prefix.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        top, _, _ = record.name.partition(".")
        record.prefix = "" if top == PROJECT_PREFIX else f"[{top}]"
        return True


class RedactingFilter(logging.Filter):
    """Rewrite each record's message through a redactor.

    The message is rendered once; if redaction changed it the record keeps
    the sanitized text and drops its arguments. Records are never dropped.
    """

    def __init__(self, redactor: Redactor) -> None:
        super().__init__()
        self.redactor = redactor

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # leave malformed records to the handler's own error reporting
            return True
        sanitized = self.redactor.sanitize(message)
        if sanitized != message:
            record.msg, record.args = sanitized, None
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr handler.

    With ``debug_mode`` the handler logs everything, shows timestamps, logger
    names and source locations. Otherwise it logs at ``level`` with the short
    third-party prefix.

    Args:
        level: Console threshold outside debug mode.
        debug_mode: Switch to developer output.
        color: False mirrors click-extra's ``--no-color``.

    Returns:
        The configured RichHandler.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


class FlightRecorder(MemoryHandler):
    """A MemoryHandler that dumps only on its own triggers.

    The buffer is written to the target when it fills up, when a record at
    ``flushLevel`` arrives, or at close when ``flushOnClose`` is set. Flushes
    requested from outside, such as the one :func:`logging.shutdown` issues
    before closing, are ignored unless ``flushOnClose`` is set.
    """

    def emit(self, record: logging.LogRecord) -> None:
        self.buffer.append(record)
        if self.shouldFlush(record):
            self.dump()

    def flush(self) -> None:
        if self.flushOnClose:
            self.dump()

    def dump(self) -> None:
        """Write the buffered records to the target and clear the buffer."""
        super().flush()


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> FlightRecorder:
    """Build the flight recorder writing to ``path``.

    The target file is truncated when the recorder is created. Records are
    held in memory until ``capacity`` is reached, a record at ``flush_level``
    arrives, or the handler closes with ``flush_on_close`` set.
    """
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return FlightRecorder(
        capacity,
        flushLevel=flush_level,
        target=target,
        flushOnClose=flush_on_close,
    )


@dataclass(frozen=True)
class LoggingOptions:
    """Logging choices collected from the top-level CLI options."""

    verbose: int = 0
    quiet: int = 0
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    flight_recorder: bool = True
    flight_capacity: int = 2000
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)
    redactor_mode: str = "lenient"

    @property
    def console_level(self) -> int:
        return verbosity_to_level(self.verbose, self.quiet)

    @property
    def recording(self) -> bool:
        """True when the flight recorder has somewhere to write."""
        return self.flight_recorder and self.log_path is not None


def configure_logging(options: LoggingOptions, redactor: Redactor) -> list[logging.Handler]:
    """Install handlers on the root logger and log the startup banner.

    Args:
        options: The resolved logging options.
        redactor: Applied to every record before any handler writes it.

    Returns:
        The handlers now attached to the root logger.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(options.console_level, options.debug, options.color)
    ]
    if options.recording:
        handlers.append(
            config_flight_recorder(
                options.log_path,
                capacity=options.flight_capacity,
                flush_on_close=options.force_flush,
            )
        )
    for handler in handlers:
        handler.addFilter(RedactingFilter(redactor))

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, level in options.logger_levels.items():
        logging.getLogger(name).setLevel(level)

    log_startup(logging.getLogger(PROJECT_PREFIX), options, handlers)
    return handlers


def _runtime_facts(handlers: list[logging.Handler]) -> list[tuple[str, object]]:
    return [
        ("Python", sys.version.split()[0]),
        ("Platform", f"{platform.system()} {platform.release()}"),
        ("PID", os.getpid()),
        ("CWD", Path.cwd()),
        ("Click", dist_version("click")),
        ("Click-Extra", dist_version("click-extra")),
        ("Rich", dist_version("rich")),
        ("Handlers", [type(h).__name__ for h in handlers]),
    ]


def log_startup(
    logger: logging.Logger, options: LoggingOptions, handlers: list[logging.Handler]
) -> None:
    """Emit a one-line INFO summary followed by DEBUG diagnostics.

    The diagnostics cover the interpreter, platform, process, library
    versions, active handlers, flight recorder settings, redaction mode and
    per-logger level overrides.
    """
    logger.info(
        "NODEJOIN %s - console=%s, flight-recorder=%s",
        __version__,
        logging.getLevelName(options.console_level),
        "ON" if options.recording else "OFF",
    )
    for label, value in _runtime_facts(handlers):
        logger.debug("%s: %s", label, value)
    if options.recording:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            options.log_path,
            options.flight_capacity,
            options.force_flush,
        )
    logger.debug("Redactor mode: %s", options.redactor_mode)
    overrides = {name: logging.getLevelName(lvl) for name, lvl in options.logger_levels.items()}
    logger.debug("Per-logger overrides: %s", overrides or "<none>")
