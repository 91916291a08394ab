"""Command: escalate requests along the approval chain."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from dispatchkit.commands._base import DkCommand

if TYPE_CHECKING:
    from dispatchkit.commands._context import AppContext


@click.command(
    cls=DkCommand,
    examples="""\
  printf '2\\nalice 2\\nbob 15\\n' | dispatchkit approve
  dispatchkit approve requests.txt
  dispatchkit -c strict.toml approve requests.txt""",
)
@click.argument("input_file", type=click.File("r"), default="-")
@click.pass_obj
def approve(app: AppContext, input_file: TextIO) -> None:
    """Route each request to the first link able to approve it."""
    from dispatchkit.services.approval import ApprovalService

    app.run_scenario(ApprovalService(app.settings, app.plugins), input_file)
