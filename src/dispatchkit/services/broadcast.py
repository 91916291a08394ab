"""BroadcastService — the clock/watchers scenario.

Input: ``N``, ``N`` names, ``U``.  Each of the ``U`` advances prints
``"<name> <hour>"`` for every watcher in registration order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dispatchkit.domain.errors import DispatchError, MalformedInputError
from dispatchkit.domain.observer import BroadcastNotifier, ClockWatcher
from dispatchkit.services.base import INVALID_INPUT, BaseService
from dispatchkit.services.io import read_count, read_token

if TYPE_CHECKING:
    from dispatchkit.services.io import LineSink, LineSource
    from dispatchkit.services.result import ServiceResult


class BroadcastService(BaseService):
    """Runs the broadcast-notify discipline from a line source."""

    op = "observe"

    def build_notifier(self) -> BroadcastNotifier:
        return BroadcastNotifier(
            start_hour=self._settings.clock.start_hour,
            duplicates=self._settings.registry.duplicates,
        )

    def run(self, source: LineSource, sink: LineSink | None = None) -> ServiceResult:
        out = self._recorder(sink)
        warnings: list[str] = []
        notifier = self.build_notifier()
        advances = 0
        try:
            count = read_count(source, "participant count")
            for _ in range(count):
                name = read_token(source, "participant name")
                notifier.register(ClockWatcher(name, emit=out.write_line))
            updates = read_count(source, "update count")
        except MalformedInputError as exc:
            out.write_line(INVALID_INPUT)
            return self._fail(out, exc, warnings)
        except DispatchError as exc:
            return self._fail(out, exc, warnings)

        for _ in range(updates):
            notified = notifier.advance()
            advances += 1
            self._dispatch_event(
                "post_advance",
                {"hour": notifier.hour, "notified": notified},
                warnings,
            )

        return self._ok(
            out,
            warnings,
            participants=notifier.participants.names(),
            advances=advances,
            hour=notifier.hour,
        )
