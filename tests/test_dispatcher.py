from __future__ import annotations

import asyncio
import logging
import time
from typing import Union

import httpx

from client import build_http_client
from core.bot import TitleBot
from core.channels import parse_connection_target
from core.config import BotConfig, IdentityConfig, TitleConfig
from core.deadline import Deadline
from core.dispatcher import MessageDispatcher
from core.errors import BadStatus, NetworkFailure, NoTitle, UnsupportedContentType
from core.models import InboundMessage, ReplyLine
from core.resolver import TitleResolver


class FakeSession:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.joined: list[str] = []

    def join(self, channel: str) -> None:
        self.joined.append(channel)

    def send(self, channel: str, text: str) -> None:
        self.sent.append((channel, text))

    def is_connected(self) -> bool:
        return True

    def disconnect(self, reason: str) -> None:
        pass


class FakeResolver:
    def __init__(self, outcomes: dict[str, Union[str, Exception]], session: "FakeSession | None" = None) -> None:
        self._outcomes = outcomes
        self._session = session
        self.calls: list[tuple[str, Deadline]] = []
        self.sent_before_call: list[int] = []

    async def resolve(self, url: httpx.URL, deadline: Deadline) -> str:
        self.calls.append((str(url), deadline))
        if self._session is not None:
            self.sent_before_call.append(len(self._session.sent))
        outcome = self._outcomes[str(url)]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _message(text: str) -> InboundMessage:
    return InboundMessage(channel="#chan", sender_nick="alice", text=text)


def _dispatch(resolver, session: FakeSession, text: str, **kwargs) -> list[ReplyLine]:
    dispatcher = MessageDispatcher(resolver=resolver, session=session, message_timeout=15, **kwargs)
    return asyncio.run(dispatcher.handle(_message(text)))


def test_single_link_produces_one_reply() -> None:
    session = FakeSession()
    resolver = FakeResolver({"https://example.com/page": "Example Page"})

    replies = _dispatch(resolver, session, "look at https://example.com/page")

    assert replies == [ReplyLine(channel="#chan", text="Example Page | example.com")]
    assert session.sent == [("#chan", "Example Page | example.com")]


def test_no_links_does_nothing() -> None:
    session = FakeSession()
    resolver = FakeResolver({})

    assert _dispatch(resolver, session, "no links here") == []
    assert resolver.calls == []
    assert session.sent == []


def test_links_resolved_in_order_and_sent_immediately() -> None:
    session = FakeSession()
    resolver = FakeResolver(
        {"https://a.example/1": "One", "https://b.example/2": "Two"},
        session=session,
    )

    _dispatch(resolver, session, "https://a.example/1 then https://b.example/2")

    assert [url for url, _ in resolver.calls] == ["https://a.example/1", "https://b.example/2"]
    assert session.sent == [("#chan", "One | a.example"), ("#chan", "Two | b.example")]
    # The first reply went out before the second link was looked up.
    assert resolver.sent_before_call == [0, 1]


def test_all_links_share_one_deadline() -> None:
    session = FakeSession()
    resolver = FakeResolver({"https://a.example/1": "One", "https://b.example/2": "Two"})

    _dispatch(resolver, session, "https://a.example/1 https://b.example/2", clock=lambda: 100.0)

    (_, first), (_, second) = resolver.calls
    assert first is second
    assert first.expires_at == 115.0


def test_hostname_excludes_port_and_credentials() -> None:
    session = FakeSession()
    resolver = FakeResolver({"https://user@example.com:8443/x": "Ported"})

    _dispatch(resolver, session, "https://user@example.com:8443/x")

    assert session.sent == [("#chan", "Ported | example.com")]


def test_malformed_link_does_not_stop_later_links(caplog) -> None:
    session = FakeSession()
    resolver = FakeResolver({"https://ok.example/z": "T"})

    with caplog.at_level(logging.DEBUG):
        _dispatch(resolver, session, "http://xn--zz.com/a then https://ok.example/z")

    assert session.sent == [("#chan", "T | ok.example")]
    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]


def test_hostname_is_normalised_by_url_parsing() -> None:
    session = FakeSession()
    resolver = FakeResolver({"https://example.com/x": "Upper"})

    _dispatch(resolver, session, "HTTPS://Example.COM/x")

    assert session.sent == [("#chan", "Upper | example.com")]


def test_routine_failures_are_silent(caplog) -> None:
    session = FakeSession()
    resolver = FakeResolver(
        {
            "https://a.example/img": UnsupportedContentType("image/png"),
            "https://b.example/empty": NoTitle(),
            "https://c.example/ok": "Fine",
        }
    )

    with caplog.at_level(logging.DEBUG, logger="core.dispatcher"):
        _dispatch(resolver, session, "https://a.example/img https://b.example/empty https://c.example/ok")

    assert session.sent == [("#chan", "Fine | c.example")]
    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]


def test_anomalies_are_logged_and_processing_continues(caplog) -> None:
    session = FakeSession()
    resolver = FakeResolver(
        {
            "https://a.example/missing": BadStatus(404),
            "https://b.example/down": NetworkFailure("connection refused"),
            "https://c.example/ok": "Fine",
        }
    )

    with caplog.at_level(logging.WARNING, logger="core.dispatcher"):
        _dispatch(resolver, session, "https://a.example/missing https://b.example/down https://c.example/ok")

    assert session.sent == [("#chan", "Fine | c.example")]
    warnings = [record.getMessage() for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "non-OK status code: 404" in warnings[0]
    assert "connection refused" in warnings[1]


def test_repeated_link_is_resolved_twice() -> None:
    session = FakeSession()
    resolver = FakeResolver({"https://a.example/x": "X"})

    _dispatch(resolver, session, "https://a.example/x https://a.example/x")

    assert len(resolver.calls) == 2
    assert len(session.sent) == 2


def test_shared_budget_stops_later_links() -> None:
    """A slow first link eats the budget left for the links after it."""

    requests: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        requests.append(f"{request.method} {request.url.host}")
        headers = {"Content-Type": "text/html"}
        if request.method == "HEAD":
            return httpx.Response(200, headers=headers)
        await asyncio.sleep(0.3)
        return httpx.Response(200, headers=headers, content=b"<title>Slow</title>")

    session = FakeSession()

    async def run() -> float:
        async with build_http_client(TitleConfig(), transport=httpx.MockTransport(handler)) as client:
            dispatcher = MessageDispatcher(TitleResolver(client), session, message_timeout=0.5)
            started = time.monotonic()
            await dispatcher.handle(_message("https://a.example/1 https://b.example/2 https://c.example/3"))
            return time.monotonic() - started

    elapsed = asyncio.run(run())

    assert session.sent == [("#chan", "Slow | a.example")]
    assert requests[:2] == ["HEAD a.example", "GET a.example"]
    assert elapsed < 2.0


def _bot_config() -> BotConfig:
    return BotConfig(
        target=parse_connection_target("irc://irc.example.net/chan"),
        identity=IdentityConfig(),
        titles=TitleConfig(),
    )


def test_bot_joins_channel_on_connect() -> None:
    session = FakeSession()
    dispatcher = MessageDispatcher(FakeResolver({}), session, message_timeout=15)
    bot = TitleBot(_bot_config(), session, dispatcher)

    bot.on_connected()

    assert session.joined == ["#chan"]


def test_bot_forwards_messages_to_dispatcher() -> None:
    session = FakeSession()
    dispatcher = MessageDispatcher(FakeResolver({"https://example.com/page": "Example Page"}), session, 15)
    bot = TitleBot(_bot_config(), session, dispatcher)

    asyncio.run(bot.on_message(_message("look at https://example.com/page")))

    assert session.sent == [("#chan", "Example Page | example.com")]


def test_bot_lifecycle_events_are_logged(caplog) -> None:
    session = FakeSession()
    bot = TitleBot(_bot_config(), session, MessageDispatcher(FakeResolver({}), session, 15))

    with caplog.at_level(logging.INFO, logger="core.bot"):
        bot.on_joined("#chan")
        bot.on_parted("#chan")
        bot.on_kicked("#chan", "op!op@host", "bye")
        bot.on_disconnected()

    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "Joined #chan",
        "Parted #chan",
        "Kicked from #chan by op!op@host: bye",
        "Disconnected from irc.example.net:6667",
    ]
    assert session.sent == []
