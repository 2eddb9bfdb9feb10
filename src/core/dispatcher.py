"""Core message dispatch.

This module is integration-agnostic. It only relies on ports for the chat
session and title resolution, enabling other chat backends without changes
here.
"""

from __future__ import annotations

import logging
import time

from core.deadline import Clock, Deadline
from core.errors import ROUTINE_FAILURES, TitleError
from core.links import extract_links
from core.models import InboundMessage, ReplyLine
from core.ports import ChatSessionPort, TitleResolverPort

LOGGER = logging.getLogger(__name__)


class MessageDispatcher:
    """Extracts links from a message, resolves titles, and replies."""

    def __init__(
        self,
        resolver: TitleResolverPort,
        session: ChatSessionPort,
        message_timeout: float,
        clock: Clock = time.monotonic,
    ) -> None:
        self._resolver = resolver
        self._session = session
        self._message_timeout = message_timeout
        self._clock = clock

    async def handle(self, message: InboundMessage) -> list[ReplyLine]:
        """Process one inbound message and return the lines that were sent.

        All links in the message share one deadline, so a slow first link
        eats into the budget of the ones after it. Replies are sent as soon
        as each title resolves.
        """

        deadline = Deadline.after(self._message_timeout, clock=self._clock)
        sent: list[ReplyLine] = []

        for url in extract_links(message.text):
            try:
                title = await self._resolver.resolve(url, deadline)
            except ROUTINE_FAILURES as e:
                LOGGER.debug("Skipping %s: %s", url, e)
                continue
            except TitleError as e:
                LOGGER.warning("Title lookup failed for %s: %s", url, e)
                continue

            reply = ReplyLine.for_title(message.channel, title, url.host)
            self._session.send(reply.channel, reply.text)
            sent.append(reply)

        return sent
