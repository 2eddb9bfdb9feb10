"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.models import ConnectionTarget


@dataclass(frozen=True)
class IdentityConfig:
    """How the bot presents itself on the chat network."""

    nickname: str = "TitleBot"
    username: str = "titlebot"
    realname: str = "TitleBot"
    version: str = "Mozilla/5.0 TitleBot/1.99999993"
    quit_message: str = ""


@dataclass(frozen=True)
class TitleConfig:
    """Title resolution settings for the dispatcher and HTTP client."""

    message_timeout: float = 15.0
    user_agent: str = "TitleBot/1.0 (+https://cgt.name/pkg/titlebot)"
    max_redirects: int = 10


@dataclass(frozen=True)
class BotConfig:
    """Everything resolved at startup; immutable for the process lifetime."""

    target: ConnectionTarget
    identity: IdentityConfig
    titles: TitleConfig
    insecure_skip_verify: bool = False

    @property
    def channel(self) -> str:
        return self.target.channel

    @property
    def nickname(self) -> str:
        return self.target.nickname or self.identity.nickname
