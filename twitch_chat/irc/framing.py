"""Byte-to-line framing for the inbound stream."""

from __future__ import annotations

import logging

from ..errors.internal import LineOverflowError
from ..logs.logger import logger

ENCODING = "utf-8"


class LineBuffer:
    """Bounded receive buffer turning raw socket bytes into text lines.

    Bytes are split on ``\\n``; a trailing ``\\r`` is removed and empty lines
    are dropped. Each complete line is decoded as UTF-8 with replacement
    characters for malformed sequences. The unterminated tail of a chunk is
    kept as bytes and prepended to the next chunk, so a line spanning two
    reads (or a multi-byte character split across them) comes out whole.

    The carried tail may never reach ``capacity``: when it does the fragment
    is discarded, everything up to the next newline is skipped, and
    ``LineOverflowError`` is raised once for the feed that overflowed. Lines
    completed earlier in that same chunk travel in the error's
    ``data["lines"]`` so the caller can still deliver them.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._pending = bytearray()
        self._discarding = False

    @property
    def carried(self) -> int:
        """Number of bytes of an unterminated line held for the next read."""
        return len(self._pending)

    @property
    def free_capacity(self) -> int:
        return self.capacity - len(self._pending)

    def reset(self) -> None:
        self._pending.clear()
        self._discarding = False

    def feed(self, data: bytes) -> list[str]:
        """Append ``data`` and return every line it completed, in order."""
        if not data:
            return []
        chunk = bytes(data)
        if self._discarding:
            newline = chunk.find(b"\n")
            if newline < 0:
                return []
            chunk = chunk[newline + 1 :]
            self._discarding = False

        self._pending += chunk
        *complete, tail = bytes(self._pending).split(b"\n")
        lines = [self._decode(raw) for raw in complete]
        lines = [line for line in lines if line]
        self._pending = bytearray(tail)

        if len(self._pending) >= self.capacity:
            discarded = len(self._pending)
            self._pending.clear()
            self._discarding = True
            logger.log_event(
                "framing",
                "line_overflow",
                level=logging.WARNING,
                capacity=self.capacity,
                discarded=discarded,
            )
            raise LineOverflowError(
                f"Line exceeded the {self.capacity} byte receive buffer",
                data={"discarded": discarded, "lines": lines},
            )

        logger.log_event(
            "framing",
            "lines_decoded",
            level=logging.DEBUG,
            count=len(lines),
            carried=len(self._pending),
        )
        return lines

    @staticmethod
    def _decode(raw: bytes) -> str:
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode(ENCODING, errors="replace")
