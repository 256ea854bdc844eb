"""
interceptor/standard_output.py

StandardOutput - pass-through byte stream that observes lines on the way out.
─────────────────────────────────────────────────────────────────────────────
StandardOutput is the raw layer underneath the replacement ``sys.stdout``.
Every chunk the host process writes is forwarded, unchanged and in order, to
the original destination before anything else happens. Only then are the
bytes run through the line reassembly state machine:

    byte is CR or LF, buffer non-empty  → decode buffer, clear it, publish
    byte is CR or LF, buffer empty      → nothing (the LF of a CRLF pair)
    any other byte                      → append to buffer

Publishing ignores the cancellation result. By the time a line is complete
its bytes have already reached the terminal, so there is nothing to veto.

Each write() is forwarded and observed under one lock, so concurrent
writers never interleave inside a chunk. A whole line handed over in a
single write() call is published intact. The lock is re-entrant so a
subscriber may itself write to the channel.

Encoding note:
    Terminator detection works on raw bytes, so the configured encoding must
    encode CR and LF as the single bytes 0x0D and 0x0A and must never emit
    those bytes inside a multi-byte sequence. UTF-8 and the single-byte
    code pages qualify; UTF-16 and UTF-32 do not and are rejected by
    WrapperConfig.validate().
"""

import io
import logging
import threading
from typing import BinaryIO

from lines import LineBus

logger = logging.getLogger(__name__)

_TERMINATORS = frozenset(b"\r\n")


class StandardOutput(io.RawIOBase):
    """
    Raw writable stream that forwards to *destination* and publishes lines.

    Args:
        destination : Binary stream that receives every byte, usually the
                      ``buffer`` of the original ``sys.stdout``.
        encoding    : Encoding used to decode completed lines.
    """

    def __init__(self, destination: BinaryIO, encoding: str = "utf-8") -> None:
        super().__init__()
        self._destination = destination
        self._encoding = encoding
        self._buffer = bytearray()
        self._bus = LineBus()
        self._lock = threading.RLock()

    @property
    def bus(self) -> LineBus:
        """The LineBus that receives every completed output line."""
        return self._bus

    @property
    def destination(self) -> BinaryIO:
        return self._destination

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        chunk = bytes(data)
        # The server thread and the script worker both write here.
        with self._lock:
            self._destination.write(chunk)
            self._destination.flush()
            for value in chunk:
                self._observe(value)
        return len(chunk)

    def _observe(self, value: int) -> None:
        if value in _TERMINATORS:
            if self._buffer:
                line = self._buffer.decode(self._encoding, errors="replace")
                self._buffer.clear()
                self._bus.publish(line)
        else:
            self._buffer.append(value)
