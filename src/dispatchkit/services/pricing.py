"""PricingService — the strategy-selection scenario.

Input: ``N`` then ``N`` lines of ``"<price> <strategyId>"``.  Each case
prints the transformed price.  An unknown strategy prints
``Unknown strategy type`` and, by default, stops the batch.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from dispatchkit.domain.errors import MalformedInputError, UnknownStrategyError
from dispatchkit.domain.strategy import (
    BUILTIN_ALIASES,
    Strategy,
    StrategyResolver,
    builtin_strategies,
)
from dispatchkit.services.base import INVALID_INPUT, BaseService
from dispatchkit.services.io import parse_non_negative, read_count
from dispatchkit.services.result import ServiceResult

if TYPE_CHECKING:
    from dispatchkit.services.io import LineSink, LineSource

logger = logging.getLogger(__name__)


class PricingService(BaseService):
    """Runs the strategy-select discipline from a line source."""

    op = "price"

    def build_resolver(self, warnings: list[str] | None = None) -> StrategyResolver:
        """Close the catalog: built-ins plus any plugin contributions.

        Plugin entries that would shadow a built-in name or alias are
        skipped with a warning.
        """
        pricing = self._settings.pricing
        catalog = builtin_strategies(flat_rate=pricing.flat_rate, tiers=pricing.tiers)
        if self._plugins is not None:
            for name, fn in self._plugins.collect_strategies().items():
                if name in catalog or name in BUILTIN_ALIASES:
                    msg = f"Plugin strategy {name!r} shadows a built-in and was ignored"
                    logger.warning(msg)
                    if warnings is not None:
                        warnings.append(msg)
                    continue
                catalog[name] = Strategy(name, fn, "plugin")
        return StrategyResolver(catalog)

    def catalog(self) -> ServiceResult:
        """Describe every strategy the resolver accepts."""
        warnings: list[str] = []
        resolver = self.build_resolver(warnings)
        entries: list[dict[str, Any]] = []
        for name, aliases in resolver.identifiers():
            entries.append(
                {
                    "name": name,
                    "aliases": aliases,
                    "description": resolver.resolve(name).description,
                }
            )
        return ServiceResult(
            ok=True,
            op="strategies",
            data={"strategies": entries, "count": len(entries)},
            warnings=warnings,
        )

    def run(self, source: LineSource, sink: LineSink | None = None) -> ServiceResult:
        out = self._recorder(sink)
        warnings: list[str] = []
        resolver = self.build_resolver(warnings)
        results: list[int] = []
        skipped: list[int] = []

        try:
            cases = read_count(source, "case count")
        except MalformedInputError as exc:
            out.write_line(INVALID_INPUT)
            return self._fail(out, exc, warnings)

        for index in range(cases):
            try:
                price, strategy_id = self._parse_case(source.next_line())
            except MalformedInputError as exc:
                out.write_line(INVALID_INPUT)
                if self.halt_on_error:
                    return self._fail(out, exc, warnings, results=results)
                skipped.append(index)
                warnings.append(f"case {index + 1}: {exc.detail}")
                continue

            try:
                strategy = resolver.resolve(strategy_id)
            except UnknownStrategyError as exc:
                out.write_line(str(exc))
                if self.halt_on_error:
                    logger.debug("Unknown strategy %s, halting", strategy_id)
                    warnings.append(f"case {index + 1}: unknown strategy {strategy_id!r}")
                    return self._ok(
                        out, warnings, results=results, skipped=skipped, halted=True
                    )
                skipped.append(index)
                warnings.append(f"case {index + 1}: unknown strategy {strategy_id!r}")
                continue

            value = strategy.apply(price)
            results.append(value)
            out.write_line(str(value))
            self._dispatch_event(
                "post_price",
                {"price": price, "strategy_id": strategy_id, "result": value},
                warnings,
            )

        return self._ok(out, warnings, results=results, skipped=skipped, halted=False)

    @staticmethod
    def _parse_case(line: str | None) -> tuple[int, str]:
        if line is None:
            raise MalformedInputError("expected '<price> <strategyId>', got end of input")
        parts = line.split()
        if len(parts) != 2:
            raise MalformedInputError(f"expected '<price> <strategyId>', got {line!r}")
        return parse_non_negative(parts[0], "price"), parts[1]
