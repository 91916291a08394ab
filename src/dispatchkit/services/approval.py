"""ApprovalService — the leave-approval escalation scenario.

Input: ``n`` then ``n`` lines of ``"<name> <days>"``.  Each request prints
``"<name> Approved by <label>."`` or ``"<name> Denied by <label>."``.
A line with the wrong token count, or a day count that is not a
non-negative integer, prints ``Invalid input`` and halts.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from dispatchkit.domain.chain import ChainLink, EscalationChain, Request
from dispatchkit.domain.errors import ChainConfigurationError, MalformedInputError
from dispatchkit.services.base import INVALID_INPUT, BaseService
from dispatchkit.services.io import parse_non_negative, read_count

if TYPE_CHECKING:
    from dispatchkit.config.settings import DispatchSettings
    from dispatchkit.plugins.manager import PluginManager
    from dispatchkit.services.io import LineSink, LineSource
    from dispatchkit.services.result import ServiceResult


class ApprovalService(BaseService):
    """Runs the escalation-chain discipline from a line source.

    The chain comes from ``[chain] links`` unless *links* is given
    explicitly, which tests use to exercise arbitrary chains.
    """

    op = "approve"

    def __init__(
        self,
        settings: DispatchSettings,
        plugins: PluginManager | None = None,
        *,
        links: Iterable[ChainLink | tuple[int, str]] | None = None,
    ) -> None:
        super().__init__(settings, plugins)
        if links is None:
            links = [(link.capacity, link.label) for link in settings.chain.links]
        self._links = list(links)

    def run(self, source: LineSource, sink: LineSink | None = None) -> ServiceResult:
        out = self._recorder(sink)
        warnings: list[str] = []
        try:
            chain = EscalationChain(self._links)
        except ChainConfigurationError as exc:
            return self._fail(out, exc, warnings)

        decisions: list[dict[str, object]] = []
        skipped = 0

        try:
            total = read_count(source, "request count")
        except MalformedInputError as exc:
            out.write_line(INVALID_INPUT)
            return self._fail(out, exc, warnings)

        for index in range(total):
            try:
                request = self._parse_request(source.next_line())
            except MalformedInputError as exc:
                out.write_line(INVALID_INPUT)
                if self.halt_on_error:
                    return self._fail(out, exc, warnings, decisions=decisions)
                skipped += 1
                warnings.append(f"request {index + 1}: {exc.detail}")
                continue

            decision = chain.handle(request)
            out.write_line(decision.describe(request.subject))
            decisions.append(
                {
                    "subject": request.subject,
                    "magnitude": request.magnitude,
                    "outcome": decision.outcome.value,
                    "label": decision.label,
                    "position": decision.position,
                }
            )
            self._dispatch_event(
                "post_handle",
                {
                    "subject": request.subject,
                    "magnitude": request.magnitude,
                    "outcome": decision.outcome.value,
                    "label": decision.label,
                },
                warnings,
            )

        return self._ok(out, warnings, decisions=decisions, skipped=skipped)

    @staticmethod
    def _parse_request(line: str | None) -> Request:
        if line is None:
            raise MalformedInputError("expected '<name> <days>', got end of input")
        parts = line.split()
        if len(parts) != 2:
            raise MalformedInputError(f"expected '<name> <days>', got {line!r}")
        name, days = parts
        return Request(name, parse_non_negative(days, "days"))
