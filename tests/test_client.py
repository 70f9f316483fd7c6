"""
Tests for the TwitchChatClient facade
"""

import pytest
from pydantic import ValidationError

from twitch_chat import ConnectionState, NotConnectedError, TwitchChatClient
from tests.fixtures.loopback import wait_for_data


class TestTwitchChatClient:
    """Test client operations end to end over loopback"""

    def test_init(self, client):
        assert client.display_name == "TestBot"
        assert str(client) == "TestBot"
        assert client.auto_pong is True
        assert client.credentials.client_number == 3
        assert client.state is ConnectionState.DISCONNECTED
        assert client.is_connected() is False

    def test_invalid_client_number_rejected(self):
        with pytest.raises(ValidationError):
            TwitchChatClient("bot", "tok", client_number=4)

    def test_is_connected_lifecycle(self, client, server):
        assert client.is_connected() is False
        client.connect()
        server.accept()
        assert client.is_connected() is True
        client.close()
        assert client.is_connected() is False

    def test_commands_on_the_wire(self, connected, server):
        client, peer = connected

        client.join("SomeChannel")
        client.send_message("Hello World", "SomeChannel")
        client.who("SomeChannel")
        client.part("SomeChannel")
        client.pong("PING :tmi.example.tv")

        assert server.read_lines(peer, 5) == [
            "JOIN #somechannel",
            "PRIVMSG #somechannel :Hello World",
            "WHO #somechannel",
            "PART #somechannel",
            "PONG :tmi.example.tv",
        ]

    def test_aliases(self, connected, server):
        client, peer = connected
        client.leave("Room")
        client.query_members("Room")
        assert server.read_lines(peer, 2) == ["PART #room", "WHO #room"]

    @pytest.mark.parametrize(
        "operation,args",
        [
            ("join", ("room",)),
            ("part", ("room",)),
            ("who", ("room",)),
            ("send_message", ("hi", "room")),
            ("pong", ("PING :tmi.example.tv",)),
        ],
    )
    def test_commands_require_connection(self, client, operation, args):
        with pytest.raises(NotConnectedError):
            getattr(client, operation)(*args)

    def test_no_write_after_close(self, connected, server):
        client, peer = connected
        client.close()
        with pytest.raises(NotConnectedError):
            client.join("room")
        peer.settimeout(0.2)
        assert peer.recv(1024) == b""

    def test_auto_pong_disabled(self, settings, server):
        bot = TwitchChatClient("bot", "tok", auto_pong=False, settings=settings)
        try:
            bot.connect()
            peer = server.accept()
            server.read_lines(peer, 4)
            peer.sendall(b"PING :tmi.example.tv\r\n")
            assert wait_for_data(bot)

            reader = bot.get_reader()
            assert reader.has_next() is True
            line = reader.next()
            assert line == "PING :tmi.example.tv"

            bot.pong(line)
            assert server.read_lines(peer, 1) == ["PONG :tmi.example.tv"]
        finally:
            bot.close()

    def test_pong_rejects_non_ping_line(self, connected):
        client, peer = connected
        with pytest.raises(ValueError):
            client.pong("PRIVMSG #x :hi")
        peer.settimeout(0.2)
        with pytest.raises(TimeoutError):
            peer.recv(1024)

    def test_auto_pong_follows_settings_unless_given(self, settings):
        quiet = settings.model_copy(update={"auto_pong": False})
        inherited = TwitchChatClient("bot", "tok", settings=quiet)
        overridden = TwitchChatClient("bot", "tok", auto_pong=True, settings=quiet)
        assert inherited.auto_pong is False
        assert overridden.auto_pong is True
        assert quiet.auto_pong is False

    def test_auto_pong_toggle(self, client):
        client.auto_pong = False
        assert client.responder.enabled is False

    def test_context_manager_closes(self, settings, server):
        with TwitchChatClient("bot", "tok", settings=settings) as bot:
            bot.connect()
            server.accept()
            assert bot.is_connected() is True
        assert bot.is_connected() is False
        assert bot.state is ConnectionState.CLOSED

    def test_reconnect_keeps_reader(self, connected, server):
        client, _ = connected
        reader = client.get_reader()
        client.close()
        client.connect()
        peer = server.accept()
        server.read_lines(peer, 4)
        peer.sendall(b"again\r\n")
        assert wait_for_data(client)
        assert client.get_reader() is reader
        assert reader.has_next() is True
        assert reader.next() == "again"
