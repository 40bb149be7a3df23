"""Subcommand modules for printzone.

Provides register_commands() which uses deferred imports to keep
``printzone --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from printzone.commands.batch import batch
    from printzone.commands.check import check
    from printzone.commands.plan import plan
    from printzone.commands.resolve import resolve

    cli.add_command(resolve)
    cli.add_command(plan)
    cli.add_command(batch)
    cli.add_command(check)
