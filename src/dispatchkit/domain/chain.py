"""Escalation chain: the first link with enough capacity approves a request.

The chain is an immutable ordered tuple of links.  A link's successor is
simply the next tuple element and the last element is terminal, so no link
holds a reference to another.

Traversal is a single forward pass with two terminal states:

    approved at link i  -- smallest i with capacity >= magnitude
    denied at terminal  -- no link admits the magnitude
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum

from dispatchkit.domain.errors import ChainConfigurationError

DEFAULT_LINKS: tuple[tuple[int, str], ...] = (
    (3, "Supervisor"),
    (7, "Manager"),
    (10, "Director"),
)


class Outcome(StrEnum):
    APPROVED = "approved"
    DENIED = "denied"


@dataclass(frozen=True)
class Request:
    """A named request of a given magnitude (e.g. an employee and a day count)."""

    subject: str
    magnitude: int


@dataclass(frozen=True)
class ChainLink:
    """Handler node approving any request up to ``capacity``."""

    capacity: int
    label: str

    def can_approve(self, magnitude: int) -> bool:
        return magnitude <= self.capacity


@dataclass(frozen=True)
class Decision:
    """Resolution of a request: which link decided and how."""

    outcome: Outcome
    label: str
    position: int

    @property
    def approved(self) -> bool:
        return self.outcome is Outcome.APPROVED

    def describe(self, subject: str) -> str:
        verb = "Approved" if self.approved else "Denied"
        return f"{subject} {verb} by {self.label}."


class EscalationChain:
    """Ordered, non-empty sequence of :class:`ChainLink` handlers."""

    def __init__(self, links: Iterable[ChainLink | tuple[int, str]]) -> None:
        built: list[ChainLink] = []
        for link in links:
            if not isinstance(link, ChainLink):
                capacity, label = link
                link = ChainLink(int(capacity), str(label))
            built.append(link)
        if not built:
            msg = "An escalation chain needs at least one link"
            raise ChainConfigurationError(msg)
        self._links: tuple[ChainLink, ...] = tuple(built)

    @classmethod
    def default(cls) -> EscalationChain:
        return cls(DEFAULT_LINKS)

    @property
    def links(self) -> tuple[ChainLink, ...]:
        return self._links

    @property
    def terminal(self) -> ChainLink:
        return self._links[-1]

    def handle(self, request: Request) -> Decision:
        """Resolve *request*; total for every non-empty chain."""
        for position, link in enumerate(self._links):
            if link.can_approve(request.magnitude):
                return Decision(Outcome.APPROVED, link.label, position)
        return Decision(Outcome.DENIED, self.terminal.label, len(self._links) - 1)

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[ChainLink]:
        return iter(self._links)
