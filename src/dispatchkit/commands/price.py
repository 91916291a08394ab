"""Command: price cases through runtime-selected strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from dispatchkit.commands._base import DkCommand

if TYPE_CHECKING:
    from dispatchkit.commands._context import AppContext


@click.command(
    cls=DkCommand,
    examples="""\
  printf '2\\n120 1\\n120 2\\n' | dispatchkit price
  dispatchkit price cases.txt
  dispatchkit --keep-going price cases.txt""",
)
@click.argument("input_file", type=click.File("r"), default="-")
@click.pass_obj
def price(app: AppContext, input_file: TextIO) -> None:
    """Apply the requested pricing strategy to each case."""
    from dispatchkit.services.pricing import PricingService

    app.run_scenario(PricingService(app.settings, app.plugins), input_file)
