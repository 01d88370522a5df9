"""Terminal message helpers for the NODEJOIN CLI.

Small helpers for rendering user-visible lines with sensible emoji→ASCII
fallbacks. Messages write to stderr so stdout stays free for anything a
launcher script may want to capture.
"""

import click

GLYPHS = {
    # kind: (emoji, ascii fallback, color)
    "caution": ("⚠️", "[!]", "yellow"),
    "success": ("✅", "[OK]", "green"),
    "error": ("❌", "[X]", "red"),
    "info": ("ℹ️", "[i]", "blue"),
}


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr.

    Decides whether to emit emojis or fall back to ASCII so terminals without
    UTF-8 don't raise `UnicodeEncodeError`. The stream is looked up on every
    call.
    """
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(kind: str) -> str:
    """Marker for a message kind, degraded to ASCII when stderr cannot encode it.

    Args:
        kind: One of ``caution``, ``success``, ``error`` or ``info``.

    Returns:
        str: The emoji, or its bracketed ASCII fallback (e.g. ``[OK]``).
    """
    emoji, fallback, _ = GLYPHS[kind]
    return emoji if _supports_character(emoji) else fallback


def _emit(kind: str, msg: str) -> None:
    color = GLYPHS[kind][2]
    click.secho(f"{glyph(kind)}  {msg}", fg=color, bold=True, err=True)


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to **stderr** with a caution glyph.

    Example:
        ``⚠️  Ignoring extra values after --enrollment-token.``
    """
    _emit("caution", msg)


def success(msg: str) -> None:
    """Emit a green, bold success line to **stderr**.

    Example:
        ``✅  Enrolled via 10.0.0.1:9200``
    """
    _emit("success", msg)


def error(msg: str) -> None:
    """Emit a red, bold error line to **stderr**.

    Example:
        ``❌  Multiple --enrollment-token parameters are not allowed``
    """
    _emit("error", msg)


def info(msg: str) -> None:
    """Emit a blue, bold informational line to **stderr**.

    Used for outcomes that are not failures, such as skipping enrollment on a
    node that is already configured.
    """
    _emit("info", msg)
