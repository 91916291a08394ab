"""ChatService — the mediated chat-room scenario.

Input: ``N``, ``N`` names, then ``"<sender> <message>"`` pairs until end of
input.  The message is the rest of the sender's line, or the next line when
the sender ends its line; a sender with nothing after it ends the stream.
Each message prints ``"<receiver> received: <message>"`` for every
other user in registration order.  Messages from unknown senders are
dropped silently.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dispatchkit.domain.errors import DispatchError, MalformedInputError
from dispatchkit.domain.mediator import MediatedRouter
from dispatchkit.services.base import INVALID_INPUT, BaseService
from dispatchkit.services.io import read_count, read_token

if TYPE_CHECKING:
    from dispatchkit.services.io import LineSink, LineSource
    from dispatchkit.services.result import ServiceResult

logger = logging.getLogger(__name__)


class ChatService(BaseService):
    """Runs the mediated-route discipline from a line source."""

    op = "chat"

    def run(self, source: LineSource, sink: LineSink | None = None) -> ServiceResult:
        out = self._recorder(sink)
        warnings: list[str] = []
        router = MediatedRouter(
            emit=out.write_line,
            duplicates=self._settings.registry.duplicates,
        )
        delivered = 0
        dropped = 0

        try:
            count = read_count(source, "user count")
            for _ in range(count):
                router.add_user(read_token(source, "user name"))
        except MalformedInputError as exc:
            out.write_line(INVALID_INPUT)
            return self._fail(out, exc, warnings)
        except DispatchError as exc:
            return self._fail(out, exc, warnings)

        while (sender := source.next_token()) is not None:
            body = source.next_line()
            if body is None:
                logger.debug("Input ended after sender %s with no message", sender)
                break
            known = sender in router.users
            receivers = router.send_from(sender, body)
            if not known:
                dropped += 1
                continue
            delivered += 1
            self._dispatch_event(
                "post_send",
                {"sender": sender, "body": body, "receivers": receivers},
                warnings,
            )

        return self._ok(
            out,
            warnings,
            users=router.users.names(),
            delivered=delivered,
            dropped=dropped,
        )
