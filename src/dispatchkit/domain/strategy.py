"""Runtime-selectable pricing strategies from a closed catalog.

Two built-ins:

- ``flat-percentage`` (alias ``1``): ``round_half_up(price * rate)``.
- ``tiered-threshold`` (alias ``2``): subtract the discount of the highest
  threshold not above the price; prices under every threshold pass through.

The catalog is fixed when the resolver is built.  Unknown identifiers
always raise, they never fall back to a default transform.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType

from dispatchkit.domain.errors import UnknownStrategyError

FLAT_PERCENTAGE = "flat-percentage"
TIERED_THRESHOLD = "tiered-threshold"

DEFAULT_FLAT_RATE = Decimal("0.9")
DEFAULT_TIERS: Mapping[int, int] = MappingProxyType({100: 5, 150: 15, 200: 25, 300: 40})

BUILTIN_ALIASES: Mapping[str, str] = MappingProxyType(
    {"1": FLAT_PERCENTAGE, "2": TIERED_THRESHOLD}
)


def flat_percentage(price: int, rate: Decimal = DEFAULT_FLAT_RATE) -> int:
    """Scale *price* by *rate*, rounding halves away from zero."""
    scaled = Decimal(price) * Decimal(rate)
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def tiered_threshold(price: int, tiers: Mapping[int, int] = DEFAULT_TIERS) -> int:
    """Subtract the discount of the highest threshold ``<= price``."""
    for threshold in sorted(tiers, reverse=True):
        if threshold <= price:
            return price - tiers[threshold]
    return price


@dataclass(frozen=True)
class Strategy:
    """A named, pure ``int -> int`` price transform."""

    name: str
    fn: Callable[[int], int]
    description: str = ""

    def apply(self, price: int) -> int:
        return self.fn(price)


def builtin_strategies(
    *,
    flat_rate: Decimal = DEFAULT_FLAT_RATE,
    tiers: Mapping[int, int] = DEFAULT_TIERS,
) -> dict[str, Strategy]:
    """Build the built-in catalog entries with the given parameters."""
    frozen_tiers = MappingProxyType(dict(tiers))
    rate = Decimal(flat_rate)
    return {
        FLAT_PERCENTAGE: Strategy(
            FLAT_PERCENTAGE,
            lambda price: flat_percentage(price, rate),
            f"price x {rate}, rounded half up",
        ),
        TIERED_THRESHOLD: Strategy(
            TIERED_THRESHOLD,
            lambda price: tiered_threshold(price, frozen_tiers),
            "minus discount of highest threshold <= price: "
            + ", ".join(f"{t}->{d}" for t, d in sorted(frozen_tiers.items())),
        ),
    }


class StrategyResolver:
    """Maps strategy identifiers (names or aliases) to catalog entries."""

    def __init__(
        self,
        catalog: Mapping[str, Strategy] | None = None,
        *,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        entries = dict(catalog) if catalog is not None else builtin_strategies()
        alias_map = dict(BUILTIN_ALIASES if aliases is None else aliases)
        for alias, target in alias_map.items():
            if target not in entries:
                msg = f"Alias {alias!r} points at unknown strategy {target!r}"
                raise ValueError(msg)
            if alias in entries:
                msg = f"Alias {alias!r} collides with a strategy name"
                raise ValueError(msg)
        self._catalog: Mapping[str, Strategy] = MappingProxyType(entries)
        self._aliases: Mapping[str, str] = MappingProxyType(alias_map)

    def resolve(self, strategy_id: str) -> Strategy:
        """Return the strategy for *strategy_id*.

        Raises:
            UnknownStrategyError: identifier is neither a name nor an alias.
        """
        key = str(strategy_id)
        name = self._aliases.get(key, key)
        strategy = self._catalog.get(name)
        if strategy is None:
            raise UnknownStrategyError(key)
        return strategy

    def identifiers(self) -> list[tuple[str, list[str]]]:
        """Catalog names with their aliases, in catalog order."""
        return [
            (name, sorted(a for a, target in self._aliases.items() if target == name))
            for name in self._catalog
        ]

    def __contains__(self, strategy_id: object) -> bool:
        key = str(strategy_id)
        return self._aliases.get(key, key) in self._catalog
