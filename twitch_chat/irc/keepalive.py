"""Automatic answers to server keep-alive PINGs."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from ..logs.logger import logger
from .commands import is_ping, pong


class KeepAliveResponder:
    """Side-effecting filter that answers ``PING`` lines with ``PONG``.

    Runs between decode and delivery: the reply is written before the PING
    line is queued for the application, and the PING itself is passed
    through untouched.
    """

    def __init__(
        self, send: Callable[[str], None], enabled: bool = True, user: str | None = None
    ) -> None:
        self._send = send
        self.enabled = enabled
        self.user = user
        self.pongs_sent = 0

    def process(self, lines: Iterable[str]) -> list[str]:
        forwarded = list(lines)
        if not self.enabled:
            return forwarded
        for line in forwarded:
            if is_ping(line):
                self._send(pong(line))
                self.pongs_sent += 1
                logger.log_event(
                    "keepalive", "ping_received", level=logging.DEBUG, user=self.user
                )
        return forwarded
