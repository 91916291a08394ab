"""Subcommand modules for dispatchkit.

Provides register_commands() which uses deferred imports to keep
``dispatchkit --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the four scenario commands and the catalog listing."""
    from dispatchkit.commands.approve import approve
    from dispatchkit.commands.chat import chat
    from dispatchkit.commands.observe import observe
    from dispatchkit.commands.price import price
    from dispatchkit.commands.strategies import strategies

    cli.add_command(observe)
    cli.add_command(price)
    cli.add_command(chat)
    cli.add_command(approve)
    cli.add_command(strategies)
