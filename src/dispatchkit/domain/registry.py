"""Ordered, name-keyed participant registry shared by every discipline.

Iteration order is registration order.  Broadcast output ordering depends
on it, so replacement (when enabled) keeps the original slot.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from enum import StrEnum
from typing import Generic, Protocol, TypeVar

from dispatchkit.domain.errors import DuplicateParticipantError

logger = logging.getLogger(__name__)


class Named(Protocol):
    """Anything with a stable participant name."""

    @property
    def name(self) -> str: ...


P = TypeVar("P", bound=Named)


class DuplicatePolicy(StrEnum):
    """What ``add`` does when the name is already taken."""

    REJECT = "reject"
    REPLACE = "replace"


class ParticipantRegistry(Generic[P]):
    """Insertion-ordered mapping of participant name to participant.

    Mutations are serialized by a per-instance lock.  Iteration works on a
    snapshot, so a participant may unregister itself during dispatch.
    """

    def __init__(self, *, duplicates: DuplicatePolicy = DuplicatePolicy.REJECT) -> None:
        self._entries: dict[str, P] = {}
        self._duplicates = DuplicatePolicy(duplicates)
        self._lock = threading.RLock()

    @property
    def duplicates(self) -> DuplicatePolicy:
        return self._duplicates

    def add(self, participant: P) -> None:
        """Register *participant* at the end of the iteration order.

        Raises:
            DuplicateParticipantError: name taken and policy is ``REJECT``.
        """
        name = participant.name
        with self._lock:
            if name in self._entries:
                if self._duplicates is DuplicatePolicy.REJECT:
                    raise DuplicateParticipantError(name)
                logger.debug("Replacing participant %s in place", name)
            # dict assignment to an existing key keeps its position
            self._entries[name] = participant
        logger.debug("Registered participant %s", name)

    def remove(self, name: str) -> None:
        """Unregister *name*; silently ignores unknown names."""
        with self._lock:
            removed = self._entries.pop(name, None)
        if removed is not None:
            logger.debug("Removed participant %s", name)

    def lookup(self, name: str) -> P | None:
        with self._lock:
            return self._entries.get(name)

    def for_each(self, fn: Callable[[P], object]) -> None:
        """Apply *fn* to every participant in registration order."""
        for participant in self.snapshot():
            fn(participant)

    def snapshot(self) -> list[P]:
        """Participants in registration order, copied under the lock."""
        with self._lock:
            return list(self._entries.values())

    def names(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[P]:
        return iter(self.snapshot())
