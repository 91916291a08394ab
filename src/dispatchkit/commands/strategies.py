"""Command: list the pricing strategy catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dispatchkit.commands._base import DkCommand

if TYPE_CHECKING:
    from dispatchkit.commands._context import AppContext


@click.command(
    cls=DkCommand,
    examples="""\
  dispatchkit strategies
  dispatchkit -v strategies
  dispatchkit --json strategies""",
)
@click.pass_obj
def strategies(app: AppContext) -> None:
    """Show every strategy identifier the price command accepts."""
    from dispatchkit.services.pricing import PricingService

    app.emit(PricingService(app.settings, app.plugins).catalog())
