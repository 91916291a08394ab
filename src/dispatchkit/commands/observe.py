"""Command: broadcast an advancing clock to registered watchers."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from dispatchkit.commands._base import DkCommand

if TYPE_CHECKING:
    from dispatchkit.commands._context import AppContext


@click.command(
    cls=DkCommand,
    examples="""\
  printf '2\\nAmy Bob\\n3\\n' | dispatchkit observe
  dispatchkit observe watchers.txt
  dispatchkit --json observe watchers.txt""",
)
@click.argument("input_file", type=click.File("r"), default="-")
@click.pass_obj
def observe(app: AppContext, input_file: TextIO) -> None:
    """Notify every watcher of each clock advance, in registration order."""
    from dispatchkit.services.broadcast import BroadcastService

    app.run_scenario(BroadcastService(app.settings, app.plugins), input_file)
