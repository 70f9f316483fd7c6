"""Outbound line formatting.

Every builder returns one complete, CRLF-terminated protocol line ready for
``ConnectionManager.send``.
"""

from __future__ import annotations

from ..config.model import Credentials
from ..constants import LINE_TERMINATOR

PING_VERB = "PING"
PONG_VERB = "PONG"
CLIENT_VARIANT_VERB = "TWITCHCLIENT"


def normalize_channel(channel: str) -> str:
    return channel.lstrip("#").lower()


def format_line(text: str) -> str:
    """Terminate ``text`` as a single protocol line.

    Raises:
        ValueError: if ``text`` already contains a line break.
    """
    if "\r" in text or "\n" in text:
        raise ValueError("protocol lines must not contain CR or LF")
    return f"{text}{LINE_TERMINATOR}"


def handshake_lines(credentials: Credentials) -> list[str]:
    return [
        format_line(f"PASS {credentials.password}"),
        format_line(f"NICK {credentials.nickname}"),
        format_line(f"USER {credentials.nickname}"),
        format_line(f"{CLIENT_VARIANT_VERB} {credentials.client_number}"),
    ]


def privmsg(message: str, channel: str) -> str:
    return format_line(f"PRIVMSG #{normalize_channel(channel)} :{message}")


def join(channel: str) -> str:
    return format_line(f"JOIN #{normalize_channel(channel)}")


def part(channel: str) -> str:
    return format_line(f"PART #{normalize_channel(channel)}")


def who(channel: str) -> str:
    return format_line(f"WHO #{normalize_channel(channel)}")


def is_ping(line: str) -> bool:
    return line == PING_VERB or line.startswith(f"{PING_VERB} ")


def pong(ping_line: str) -> str:
    """Build the reply to a keep-alive PING: same payload, verb swapped.

    Raises:
        ValueError: ``ping_line`` is not a PING.
    """
    raw = ping_line.rstrip("\r\n")
    if not is_ping(raw):
        raise ValueError("only PING lines can be answered with PONG")
    return format_line(PONG_VERB + raw[len(PING_VERB) :])
