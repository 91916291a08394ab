"""Pluggy hook specifications for dispatch events and catalog extensions.

Four post-dispatch events fire synchronously after each discipline step.
One setup-time hook lets plugins contribute named pricing strategies
before the strategy catalog is closed.
"""

from __future__ import annotations

from collections.abc import Callable

import pluggy

hookspec = pluggy.HookspecMarker("dispatchkit")
hookimpl = pluggy.HookimplMarker("dispatchkit")


class DispatchHookSpec:
    """Hook specifications for the dispatchkit plugin system."""

    @hookspec
    def post_advance(self, hour: int, notified: list[str]) -> None:
        """Called after the clock advanced and broadcast *hour*."""

    @hookspec
    def post_send(self, sender: str, body: str, receivers: list[str]) -> None:
        """Called after the router relayed a message."""

    @hookspec
    def post_price(self, price: int, strategy_id: str, result: int) -> None:
        """Called after a price was transformed by a resolved strategy."""

    @hookspec
    def post_handle(self, subject: str, magnitude: int, outcome: str, label: str) -> None:
        """Called after the escalation chain resolved a request."""

    @hookspec
    def register_strategies(self) -> dict[str, Callable[[int], int]] | None:
        """Return strategy name -> ``int -> int`` callables to add to the catalog."""
