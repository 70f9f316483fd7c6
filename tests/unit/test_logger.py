"""Tests for the event logger and colorlog configuration."""

import io
import logging

import colorlog

from twitch_chat.logging_config import LoggerConfigurator, TokenRedactFilter
from twitch_chat.logs import EVENT_TEMPLATES
from twitch_chat.logs.logger import ChatLogger


def test_templates_loaded():
    assert ("irc", "connect_start") in EVENT_TEMPLATES
    assert ("keepalive", "ping_received") in EVENT_TEMPLATES


def test_log_event_formats_template(caplog, monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    chat_logger = ChatLogger("twitch_chat.test_events")
    with caplog.at_level(logging.INFO, logger="twitch_chat.test_events"):
        chat_logger.log_event("irc", "connect_start", user="bot", server="h", port=1)
    assert "Connecting to h:1" in caplog.text
    assert "[bot" in caplog.text


def test_log_event_unknown_action_derives_text(caplog, monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    chat_logger = ChatLogger("twitch_chat.test_derived")
    with caplog.at_level(logging.INFO, logger="twitch_chat.test_derived"):
        chat_logger.log_event("custom", "some_action")
    assert "custom: some action" in caplog.text


def test_debug_mode_appends_context(caplog, monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    chat_logger = ChatLogger("twitch_chat.test_debug")
    with caplog.at_level(logging.DEBUG, logger="twitch_chat.test_debug"):
        chat_logger.log_event("framing", "received", level=logging.DEBUG, size=12)
    assert "framing_received" in caplog.text
    assert "size=12" in caplog.text


def test_configurator_installs_colored_handler(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    stream = io.StringIO()
    configured = LoggerConfigurator({"stream": stream}).configure()
    try:
        handlers = [h for h in configured.handlers if isinstance(h, logging.StreamHandler)]
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, colorlog.ColoredFormatter)
        assert configured.level == logging.INFO
        configured.info("hello")
        assert "hello" in stream.getvalue()
    finally:
        for h in list(configured.handlers):
            if not isinstance(h, logging.NullHandler):
                configured.removeHandler(h)
        configured.propagate = True
        configured.setLevel(logging.NOTSET)


def test_token_redact_filter():
    record = logging.LogRecord("t", logging.INFO, "", 0, "PASS oauth:%s", ("secret",), None)
    assert TokenRedactFilter().filter(record) is True
    assert record.getMessage() == "PASS oauth:***"
