"""Rich Console factory and theme for printzone output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PZ_THEME = Theme(
    {
        "pz.ok": "bold green",
        "pz.error": "bold red",
        "pz.warning": "bold yellow",
        "pz.op": "bold cyan",
        "pz.key": "dim",
        "pz.url": "bold blue",
        "pz.num": "magenta",
        "pz.source.selection": "bold green",
        "pz.source.design_view": "green",
        "pz.source.view": "cyan",
        "pz.source.design_asset": "blue",
        "pz.source.inline_payload": "yellow",
        "pz.source.color_variant": "magenta",
        "pz.source.default": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PZ_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_source(source_kind: str | None) -> str:
    """Return the Rich style name for an image source kind."""
    if not source_kind:
        return "pz.source.default"
    return f"pz.source.{source_kind}"
