"""Command: relay chat messages through a central router."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from dispatchkit.commands._base import DkCommand

if TYPE_CHECKING:
    from dispatchkit.commands._context import AppContext


@click.command(
    cls=DkCommand,
    examples="""\
  printf '3\\nA B C\\nA hi\\n' | dispatchkit chat
  dispatchkit chat transcript.txt""",
)
@click.argument("input_file", type=click.File("r"), default="-")
@click.pass_obj
def chat(app: AppContext, input_file: TextIO) -> None:
    """Deliver each message to every user except its sender."""
    from dispatchkit.services.chat import ChatService

    app.run_scenario(ChatService(app.settings, app.plugins), input_file)
