"""Mediated messaging: a chat room relaying each message to everyone else."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from dispatchkit.domain.registry import DuplicatePolicy, ParticipantRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    sender: str
    body: str


class MessageReceiver(Protocol):
    """Mediator-participant capability."""

    @property
    def name(self) -> str: ...

    def receive_message(self, sender: str, body: str) -> None: ...


@dataclass
class ChatUser:
    """Chat participant keeping a log of everything delivered to it."""

    name: str
    emit: Callable[[str], None] | None = None
    inbox: list[Message] = field(default_factory=list)

    def receive_message(self, sender: str, body: str) -> None:
        self.inbox.append(Message(sender, body))
        if self.emit is not None:
            self.emit(f"{self.name} received: {body}")


class MediatedRouter:
    """Central router; participants never reference each other directly."""

    def __init__(
        self,
        *,
        emit: Callable[[str], None] | None = None,
        duplicates: DuplicatePolicy = DuplicatePolicy.REJECT,
    ) -> None:
        self._emit = emit
        self._registry: ParticipantRegistry[MessageReceiver] = ParticipantRegistry(
            duplicates=duplicates
        )

    @property
    def users(self) -> ParticipantRegistry[MessageReceiver]:
        return self._registry

    def add_user(self, name: str) -> ChatUser:
        """Create a :class:`ChatUser` bound to this router's sink and register it."""
        user = ChatUser(name, emit=self._emit)
        self._registry.add(user)
        return user

    def register(self, participant: MessageReceiver) -> None:
        self._registry.add(participant)

    def remove_user(self, name: str) -> None:
        self._registry.remove(name)

    def send(self, sender: str, body: str) -> list[str]:
        """Deliver *body* to every registered participant except *sender*.

        Returns receiver names in delivery order.
        """
        receivers: list[str] = []
        for participant in self._registry.snapshot():
            if participant.name == sender:
                continue
            participant.receive_message(sender, body)
            receivers.append(participant.name)
        return receivers

    def send_from(self, sender: str, body: str) -> list[str]:
        """User-initiated send; unknown senders are dropped without error."""
        if self._registry.lookup(sender) is None:
            logger.debug("Dropping message from unregistered sender %s", sender)
            return []
        return self.send(sender, body)
