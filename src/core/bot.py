"""Session event handling for the title bot (core domain).

Lifecycle notifications are only logged; joining the configured channel on
connect and dispatching channel messages are the only actions taken.
"""

from __future__ import annotations

import logging

from core.config import BotConfig
from core.dispatcher import MessageDispatcher
from core.models import InboundMessage
from core.ports import ChatSessionPort

LOGGER = logging.getLogger(__name__)


class TitleBot:
    """Implements ``SessionEvents`` on top of a ``MessageDispatcher``."""

    def __init__(self, config: BotConfig, session: ChatSessionPort, dispatcher: MessageDispatcher) -> None:
        self._config = config
        self._session = session
        self._dispatcher = dispatcher

    def on_connected(self) -> None:
        LOGGER.info("Connected to %s", self._config.target.server)
        self._session.join(self._config.channel)

    def on_disconnected(self) -> None:
        LOGGER.info("Disconnected from %s", self._config.target.server)

    def on_joined(self, channel: str) -> None:
        LOGGER.info("Joined %s", channel)

    def on_parted(self, channel: str) -> None:
        LOGGER.info("Parted %s", channel)

    def on_kicked(self, channel: str, by: str, reason: str) -> None:
        LOGGER.info("Kicked from %s by %s: %s", channel, by, reason)

    async def on_message(self, message: InboundMessage) -> None:
        await self._dispatcher.handle(message)
