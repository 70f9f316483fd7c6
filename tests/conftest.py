import os

import pytest

# Set test-friendly defaults for constants that affect test performance
os.environ.setdefault("IRC_CONNECT_POLL_INTERVAL", "0.05")

from tests.fixtures.loopback import TEST_TIMEOUT, LoopbackServer  # noqa: E402
from twitch_chat import ClientSettings, TwitchChatClient  # noqa: E402


@pytest.fixture
def server():
    srv = LoopbackServer()
    yield srv
    srv.close()


@pytest.fixture
def settings(server):
    return ClientSettings(
        host="127.0.0.1",
        port=server.port,
        connect_timeout=TEST_TIMEOUT,
        poll_interval=0.05,
        write_timeout=1.0,
    )


@pytest.fixture
def client(settings):
    bot = TwitchChatClient("TestBot", "abc123", settings=settings)
    yield bot
    bot.close()


@pytest.fixture
def connected(client, server):
    """Connected client plus the server-side socket with the handshake consumed."""
    client.connect()
    peer = server.accept()
    server.read_lines(peer, 4)
    return client, peer
