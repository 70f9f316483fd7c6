"""Pull-based access to inbound chat lines."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..errors.internal import (
    ChatConnectionError,
    LineOverflowError,
    NotConnectedError,
    ReaderExhaustedError,
)
from ..logs.logger import logger

if TYPE_CHECKING:  # pragma: no cover
    from .connection import ConnectionManager
    from .keepalive import KeepAliveResponder


class PollStatus(Enum):
    LINE = "line"
    WOULD_BLOCK = "would_block"
    CLOSED = "closed"


@dataclass(frozen=True)
class PollResult:
    status: PollStatus
    line: str | None = None


class LineReader:
    """Lazy, forward-only sequence of decoded lines.

    Lines are served in wire order from a pending queue. When the queue is
    empty, ``has_next`` and ``poll`` run one decode cycle (read, decode,
    keep-alive reply) to refill it. The queue lock only guards the deque;
    decode cycles are serialised by a separate lock. A check followed by a
    ``next`` is not atomic, so the reader is meant for a single consumer.

    Iterating the reader yields lines until no more are currently available;
    iterating again later resumes where it stopped.
    """

    def __init__(
        self, manager: ConnectionManager, responder: KeepAliveResponder
    ) -> None:
        self._manager = manager
        self._responder = responder
        self._queue: deque[str] = deque()
        self._queue_lock = threading.Lock()
        self._fill_lock = threading.Lock()
        self.overflows = 0
        logger.log_event("reader", "created", level=logging.DEBUG, user=manager.user)

    def __iter__(self) -> LineReader:
        return self

    def __next__(self) -> str:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def pending(self) -> int:
        with self._queue_lock:
            return len(self._queue)

    def has_next(self) -> bool:
        """True if a line is ready, reading from the socket once if needed.

        Returns False (never raises) once the connection is closed or was
        never opened.
        """
        if self.pending():
            return True
        self._fill()
        return self.pending() > 0

    def next(self) -> str:
        """Remove and return the oldest pending line.

        Raises:
            ReaderExhaustedError: the queue is empty.
        """
        with self._queue_lock:
            if not self._queue:
                raise ReaderExhaustedError()
            return self._queue.popleft()

    def poll(
        self, timeout: float = 0.0, cancel: threading.Event | None = None
    ) -> PollResult:
        """Pull one line, distinguishing "nothing yet" from "stream closed".

        With a positive ``timeout`` the call waits for inbound data until the
        deadline passes or ``cancel`` is set.
        """
        deadline = time.monotonic() + max(0.0, timeout)
        while True:
            line = self._pop()
            if line is not None:
                return PollResult(PollStatus.LINE, line)
            if not self._fill():
                line = self._pop()
                if line is not None:
                    return PollResult(PollStatus.LINE, line)
                return PollResult(PollStatus.CLOSED)
            if self.pending():
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0 or (cancel is not None and cancel.is_set()):
                return PollResult(PollStatus.WOULD_BLOCK)
            if not self._manager.wait_readable(remaining, cancel):
                if cancel is not None and cancel.is_set():
                    return PollResult(PollStatus.WOULD_BLOCK)
                if deadline - time.monotonic() <= 0:
                    return PollResult(PollStatus.WOULD_BLOCK)

    def _pop(self) -> str | None:
        with self._queue_lock:
            return self._queue.popleft() if self._queue else None

    def _fill(self) -> bool:
        """One decode cycle. Returns False when the connection is unusable."""
        with self._fill_lock:
            try:
                lines = self._manager.read_lines()
            except LineOverflowError as e:
                self.overflows += 1
                logger.log_event(
                    "reader",
                    "overflow",
                    level=logging.WARNING,
                    user=self._manager.user,
                    error=str(e),
                )
                lines = list(e.data.get("lines", []))
            except (NotConnectedError, ChatConnectionError) as e:
                logger.log_event(
                    "reader",
                    "fill_failed",
                    level=logging.DEBUG,
                    user=self._manager.user,
                    error=str(e),
                )
                return False
            if not lines:
                return True
            try:
                self._responder.process(lines)
            except (NotConnectedError, ChatConnectionError) as e:
                logger.log_event(
                    "keepalive",
                    "pong_failed",
                    level=logging.ERROR,
                    user=self._manager.user,
                    error=str(e),
                )
                return False
            finally:
                with self._queue_lock:
                    self._queue.extend(lines)
            return True
