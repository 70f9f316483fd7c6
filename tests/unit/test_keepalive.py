"""
Tests for the automatic PING responder
"""

from unittest.mock import Mock

from twitch_chat.irc.keepalive import KeepAliveResponder


def test_ping_answered_with_pong():
    send = Mock()
    responder = KeepAliveResponder(send)

    forwarded = responder.process(["PING :tmi.example.tv"])

    send.assert_called_once_with("PONG :tmi.example.tv\r\n")
    assert forwarded == ["PING :tmi.example.tv"]
    assert responder.pongs_sent == 1


def test_non_ping_lines_pass_through_without_reply():
    send = Mock()
    responder = KeepAliveResponder(send)
    lines = [":a!a@a PRIVMSG #room :PING me", ":tmi 001 bot :Welcome"]

    assert responder.process(lines) == lines
    send.assert_not_called()


def test_every_ping_in_batch_answered_in_order():
    send = Mock()
    responder = KeepAliveResponder(send)

    responder.process(["PING :one", "hello", "PING :two"])

    assert [c.args[0] for c in send.call_args_list] == ["PONG :one\r\n", "PONG :two\r\n"]


def test_disabled_responder_sends_nothing():
    send = Mock()
    responder = KeepAliveResponder(send, enabled=False)

    assert responder.process(["PING :tmi.example.tv"]) == ["PING :tmi.example.tv"]
    send.assert_not_called()
