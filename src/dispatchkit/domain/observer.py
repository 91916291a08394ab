"""Broadcast notification: an hour-of-day clock and the watchers it notifies."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from dispatchkit.domain.registry import DuplicatePolicy, ParticipantRegistry

HOURS_PER_DAY = 24

logger = logging.getLogger(__name__)


class StateReceiver(Protocol):
    """Observer-participant capability."""

    @property
    def name(self) -> str: ...

    def receive_state(self, hour: int) -> None: ...


@dataclass
class ClockWatcher:
    """Records every hour it is notified of and optionally echoes it.

    The echoed line is ``"<name> <hour>"``.
    """

    name: str
    emit: Callable[[str], None] | None = None
    seen: list[int] = field(default_factory=list)

    def receive_state(self, hour: int) -> None:
        self.seen.append(hour)
        if self.emit is not None:
            self.emit(f"{self.name} {hour}")


class BroadcastNotifier:
    """Subject holding an hour in ``[0, 23]`` and broadcasting each change.

    The hour can only move forward through :meth:`advance`; there is no
    setter.  Dispatch visits watchers in registration order.
    """

    def __init__(
        self,
        *,
        start_hour: int = 0,
        duplicates: DuplicatePolicy = DuplicatePolicy.REJECT,
    ) -> None:
        if not 0 <= start_hour < HOURS_PER_DAY:
            msg = f"start_hour must be in [0, {HOURS_PER_DAY - 1}], got {start_hour}"
            raise ValueError(msg)
        self._hour = start_hour
        self._registry: ParticipantRegistry[StateReceiver] = ParticipantRegistry(
            duplicates=duplicates
        )
        self._lock = threading.RLock()

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def participants(self) -> ParticipantRegistry[StateReceiver]:
        return self._registry

    def register(self, participant: StateReceiver) -> None:
        self._registry.add(participant)

    def unregister(self, participant: StateReceiver | str) -> None:
        name = participant if isinstance(participant, str) else participant.name
        self._registry.remove(name)

    def advance(self) -> list[str]:
        """Move the clock one hour forward and notify every watcher.

        Returns the names notified, in dispatch order.
        """
        with self._lock:
            self._hour = (self._hour + 1) % HOURS_PER_DAY
            hour = self._hour
            notified: list[str] = []

            def _notify(participant: StateReceiver) -> None:
                participant.receive_state(hour)
                notified.append(participant.name)

            self._registry.for_each(_notify)
        logger.debug("Broadcast hour %d to %d participant(s)", hour, len(notified))
        return notified
