"""
Twitch chat client facade.

Bundles the connection manager, keep-alive responder and line reader behind
the operations an application needs: connect, send messages, join/leave
channels, query members, answer pings and read incoming lines.
"""

from __future__ import annotations

import logging
import threading

from .config.model import ClientSettings, Credentials
from .constants import DEFAULT_CLIENT_NUMBER
from .irc import commands
from .irc.connection import ConnectionManager, ConnectionState
from .irc.keepalive import KeepAliveResponder
from .irc.reader import LineReader
from .logs.logger import logger


class TwitchChatClient:
    """Chat bot connection that hides socket handling from the caller.

    Args:
        nickname: The Twitch username of the bot.
        token: OAuth token, with or without the ``oauth:`` prefix.
        auto_pong: Answer server PINGs automatically; ``None`` keeps the
            value from ``settings``.
        client_number: Protocol variant (1-3) declared with TWITCHCLIENT.
        settings: Transport settings; defaults from ``constants``.

    Raises:
        pydantic.ValidationError: invalid nickname, token or client number.
    """

    def __init__(
        self,
        nickname: str,
        token: str,
        auto_pong: bool | None = None,
        client_number: int = DEFAULT_CLIENT_NUMBER,
        settings: ClientSettings | None = None,
    ) -> None:
        self.credentials = Credentials(
            nickname=nickname, token=token, client_number=client_number
        )
        settings = settings or ClientSettings()
        if auto_pong is not None and auto_pong != settings.auto_pong:
            settings = settings.model_copy(update={"auto_pong": auto_pong})
        self.settings = settings
        self.connection = ConnectionManager(self.credentials, settings)
        self.responder = KeepAliveResponder(
            self.connection.send, enabled=settings.auto_pong, user=self.display_name
        )
        self._reader: LineReader | None = None
        self._reader_lock = threading.Lock()

    @classmethod
    def from_credentials(
        cls, credentials: Credentials, settings: ClientSettings | None = None
    ) -> TwitchChatClient:
        return cls(
            credentials.nickname,
            credentials.token,
            client_number=credentials.client_number,
            settings=settings,
        )

    @property
    def display_name(self) -> str:
        return self.credentials.nickname

    @property
    def auto_pong(self) -> bool:
        return self.responder.enabled

    @auto_pong.setter
    def auto_pong(self, enabled: bool) -> None:
        self.responder.enabled = enabled

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    def connect(
        self, timeout: float | None = None, cancel: threading.Event | None = None
    ) -> None:
        """Connect and authenticate; see ``ConnectionManager.connect``."""
        self.connection.connect(timeout=timeout, cancel=cancel)

    def get_reader(self) -> LineReader:
        """Return the client's line reader, creating it on first use."""
        with self._reader_lock:
            if self._reader is None:
                self._reader = LineReader(self.connection, self.responder)
            return self._reader

    def send_message(self, message: str, channel: str) -> None:
        line = commands.privmsg(message, channel)
        self.connection.send(line)
        logger.log_event(
            "chat",
            "privmsg",
            level=logging.DEBUG,
            user=self.display_name,
            channel=commands.normalize_channel(channel),
        )

    def join(self, channel: str) -> None:
        self.connection.send(commands.join(channel))
        logger.log_event(
            "chat", "join", user=self.display_name, channel=commands.normalize_channel(channel)
        )

    def part(self, channel: str) -> None:
        self.connection.send(commands.part(channel))
        logger.log_event(
            "chat", "part", user=self.display_name, channel=commands.normalize_channel(channel)
        )

    leave = part

    def who(self, channel: str) -> None:
        """Ask the server for the member list of ``channel``."""
        self.connection.send(commands.who(channel))
        logger.log_event(
            "chat",
            "who",
            level=logging.DEBUG,
            user=self.display_name,
            channel=commands.normalize_channel(channel),
        )

    query_members = who

    def pong(self, line: str) -> None:
        """Answer a raw PING line by hand (when ``auto_pong`` is off).

        Raises:
            ValueError: ``line`` is not a PING.
        """
        self.connection.send(commands.pong(line))

    def is_connected(self) -> bool:
        return self.connection.is_connected()

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> TwitchChatClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __str__(self) -> str:
        return self.display_name

    def __repr__(self) -> str:
        return (
            f"TwitchChatClient(nickname={self.display_name!r}, "
            f"state={self.state.name})"
        )
