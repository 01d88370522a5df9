"""Helpers for parsing logger-level CLI options.

Parses options of the form NAME=LEVEL (repeatable, or a comma/space-separated
string from the environment) into a mapping of logger names to numeric levels.
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"click_extra": logging.WARNING}
ITEM_SEPARATOR = re.compile(r"[,\s]+")


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten the raw option value into non-empty NAME=LEVEL items.

    Accepts a single string (env var form) or a sequence of strings
    (repeatable option form); each may hold several comma/space-separated items.
    """
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in ITEM_SEPARATOR.split(chunk) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback that parses NAME=LEVEL pairs into a name->level dict.

    Starts from DEFAULT_LIB_LEVELS; later items override earlier ones.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_str = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        level = logging.getLevelNamesMapping().get(level_str.strip().upper())
        if level is None:
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = level
    return levels
