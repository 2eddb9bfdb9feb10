"""IRC session adapter.

Owns the connection (TLS, registration, nick collisions, CTCP VERSION) and
implements the core ``ChatSessionPort``. Channel messages are queued and
handed to the core one at a time by a single worker task, so message
handling never overlaps with itself.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import ssl
from typing import Any, Optional

from irc.client_aio import AioReactor
from irc.connection import AioFactory

from adapters.irc_mapper import build_inbound_message, is_own_event, kick_details, same_nick, source_nick
from adapters.line_formatting import format_line
from core.config import BotConfig
from core.models import InboundMessage
from core.ports import SessionEvents

LOGGER = logging.getLogger(__name__)


def build_ssl_context(insecure_skip_verify: bool) -> ssl.SSLContext:
    """Default client context, optionally without chain and host name checks."""

    context = ssl.create_default_context()
    if insecure_skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class IRCSession:
    """ChatSessionPort implementation on top of ``irc.client_aio``."""

    def __init__(self, config: BotConfig) -> None:
        self._config = config
        self._events: Optional[SessionEvents] = None
        self._connection: Any = None
        self.inbox: asyncio.Queue[InboundMessage] = asyncio.Queue()
        self._stopped = asyncio.Event()

    def bind(self, events: SessionEvents) -> None:
        """Register the core event handler; must be called before ``run``."""

        self._events = events

    # ------------------------------------------------------------------
    # ChatSessionPort
    # ------------------------------------------------------------------
    def join(self, channel: str) -> None:
        self._connection.join(channel)

    def send(self, channel: str, text: str) -> None:
        self._connection.privmsg(channel, format_line(text))

    def is_connected(self) -> bool:
        return self._connection is not None and self._connection.is_connected()

    def disconnect(self, reason: str) -> None:
        if self.is_connected():
            self._connection.disconnect(reason)

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def connect_factory(self) -> AioFactory:
        target = self._config.target
        if not target.secure:
            return AioFactory()
        return AioFactory(
            ssl=build_ssl_context(self._config.insecure_skip_verify),
            server_hostname=target.host,
        )

    async def run(self) -> None:
        """Connect, then process channel messages until disconnected.

        Raises ``irc.client.ServerConnectionError`` when the initial
        connection cannot be established.
        """

        if self._events is None:
            raise RuntimeError("IRCSession.bind() must be called before run()")

        loop = asyncio.get_running_loop()

        reactor = AioReactor(loop=loop)
        self.register_handlers(reactor)
        self._connection = reactor.server()

        target = self._config.target
        identity = self._config.identity
        await self._connection.connect(
            target.host,
            target.port,
            self._config.nickname,
            password=target.password,
            username=identity.username,
            ircname=identity.realname,
            connect_factory=self.connect_factory(),
        )

        worker = asyncio.create_task(self.drain())
        try:
            await self._stopped.wait()
        finally:
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker

    def shutdown(self) -> None:
        """Quit gracefully if connected; otherwise stop the run immediately."""

        LOGGER.info("Received signal to shut down")
        if self.is_connected():
            # The server closes the link and the disconnect event ends run().
            self._connection.quit(self._config.identity.quit_message)
        else:
            self._stopped.set()

    async def drain(self) -> None:
        """Hand queued messages to the core one at a time, forever."""

        while True:
            message = await self.inbox.get()
            try:
                await self._events.on_message(message)
            except Exception:
                LOGGER.exception("Error while processing message")
            finally:
                self.inbox.task_done()

    # ------------------------------------------------------------------
    # irc event handlers
    # ------------------------------------------------------------------
    def register_handlers(self, reactor: Any) -> None:
        reactor.add_global_handler("welcome", self.on_welcome)
        reactor.add_global_handler("disconnect", self.on_disconnect)
        reactor.add_global_handler("join", self.on_join)
        reactor.add_global_handler("part", self.on_part)
        reactor.add_global_handler("kick", self.on_kick)
        reactor.add_global_handler("pubmsg", self.on_pubmsg)
        reactor.add_global_handler("ctcp", self.on_ctcp)
        reactor.add_global_handler("nicknameinuse", self.on_nicknameinuse)

    def on_welcome(self, connection, event) -> None:
        self._events.on_connected()

    def on_disconnect(self, connection, event) -> None:
        self._events.on_disconnected()
        self._stopped.set()

    def on_join(self, connection, event) -> None:
        if is_own_event(connection, event):
            self._events.on_joined(event.target)

    def on_part(self, connection, event) -> None:
        if is_own_event(connection, event):
            self._events.on_parted(event.target)

    def on_kick(self, connection, event) -> None:
        kick = kick_details(event)
        if same_nick(kick.nick, connection.get_nickname()):
            self._events.on_kicked(kick.channel, kick.by, kick.reason)

    def on_pubmsg(self, connection, event) -> None:
        self.inbox.put_nowait(build_inbound_message(event))

    def on_ctcp(self, connection, event) -> None:
        if event.arguments and event.arguments[0].upper() == "VERSION":
            connection.ctcp_reply(source_nick(event.source), f"VERSION {self._config.identity.version}")

    def on_nicknameinuse(self, connection, event) -> None:
        # arguments[0] is the rejected nick; keep appending "_" until one sticks.
        rejected = event.arguments[0] if event.arguments else connection.get_nickname()
        connection.nick(f"{rejected}_")
