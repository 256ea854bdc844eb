"""
interceptor/standard_input.py

StandardInput - line-at-a-time byte stream with interception and injection.
───────────────────────────────────────────────────────────────────────────
StandardInput is the raw layer underneath the replacement ``sys.stdin``.
Lines reach it from two producers:

  • The forwarder thread, which reads the *original* standard input line by
    line and enqueues each line.
  • writeln(), which lets the rest of the wrapper inject commands as if the
    operator had typed them.

Both feed one unbounded FIFO ``queue.Queue``. The consumer side (whatever
thread the wrapped server reads stdin from) pulls bytes through read_byte():

  1. While the line currently being served has unread bytes, hand them out.
  2. Otherwise take the next queued line (blocking with no timeout), publish
     it on the bus, and either drop it (cancelled) and take the next one, or
     start serving ``line + os.linesep`` encoded with the channel encoding.
     Characters the encoding cannot represent are replaced, never raised.

Bulk reads return at most ONE byte per call. Buffered and text readers above
this stream would otherwise try to fill their whole buffer and block waiting
for lines that were never meant for the current read, and they would run
ahead of the per-line publish step.

The forwarder is a daemon thread with no shutdown hook. It stops when the
original input ends or fails; after that only injected lines are served.
"""

import io
import logging
import os
import queue
import threading
from typing import Optional, TextIO

from lines import LineBus

logger = logging.getLogger(__name__)


class StandardInput(io.RawIOBase):
    """
    Raw readable stream fed by a queue of whole lines.

    Args:
        source         : Text stream to forward lines from (normally the
                         original ``sys.stdin``). None disables forwarding.
        encoding       : Encoding applied to each line before it is served.
        line_separator : Appended to every served line. Defaults to
                         ``os.linesep``.
    """

    def __init__(
        self,
        source: Optional[TextIO] = None,
        encoding: str = "utf-8",
        line_separator: str = os.linesep,
    ) -> None:
        super().__init__()
        self._source = source
        self._encoding = encoding
        self._line_separator = line_separator
        self._pending: "queue.Queue[str]" = queue.Queue()
        self._serving = b""
        self._cursor = 0
        self._bus = LineBus()
        self._forwarder: Optional[threading.Thread] = None

    @property
    def bus(self) -> LineBus:
        """The LineBus consulted for every line before it is served."""
        return self._bus

    # ── Producers ─────────────────────────────────────────────────────────────

    def writeln(self, line: str) -> None:
        """Queue *line* for the consumer without going through the real source."""
        self._pending.put(line)

    def start_forwarding(self) -> Optional[threading.Thread]:
        """
        Start the forwarder thread (once).

        Returns:
            The forwarder thread, or None when there is no source to read.
        """
        if self._forwarder is not None:
            return self._forwarder
        if self._source is None:
            logger.warning("No original standard input; serving injected lines only")
            return None
        self._forwarder = threading.Thread(
            target=self._forward,
            name="stdin-forwarder",
            daemon=True,
        )
        self._forwarder.start()
        return self._forwarder

    def _forward(self) -> None:
        try:
            for line in self._source:
                self._pending.put(line.rstrip("\r\n"))
        except Exception as exc:
            logger.error(
                "Standard input forwarder failed: %s. Only injected lines "
                "will be served from now on.", exc, exc_info=True,
            )
            return
        logger.info("Original standard input reached end of stream; forwarder exiting")

    # ── Consumer ──────────────────────────────────────────────────────────────

    def read_byte(self) -> int:
        """
        Return the next byte, blocking until an uncancelled line is available.
        """
        if self._cursor < len(self._serving):
            value = self._serving[self._cursor]
            self._cursor += 1
            return value

        while True:
            line = self._pending.get()
            if not self._bus.publish(line):
                break
            logger.debug("Dropped intercepted input line: %r", line)

        self._serving = (line + self._line_separator).encode(self._encoding, errors="replace")
        self._cursor = 1
        return self._serving[0]

    def read_into(self, buffer, offset: int = 0, length: Optional[int] = None) -> int:
        """
        Read at most one byte into ``buffer[offset]``.

        Args:
            buffer : Writable bytes-like object.
            offset : Index in *buffer* to write to.
            length : Space available from *offset*; defaults to the rest of
                     the buffer.

        Returns:
            0 when *length* is 0 (without blocking), 1 otherwise.

        Raises:
            TypeError  : *buffer* is None or not a writable buffer.
            ValueError : *offset* / *length* fall outside *buffer*.
        """
        if buffer is None:
            raise TypeError("buffer must not be None")
        with memoryview(buffer) as raw, raw.cast("B") as view:
            if view.readonly:
                raise TypeError("buffer must be writable")
            size = view.nbytes
            if length is None:
                length = size - offset
            if offset < 0 or length < 0 or length > size - offset:
                raise ValueError(
                    f"offset={offset} length={length} out of range for buffer of {size} bytes"
                )
            if length == 0:
                return 0
            view[offset] = self.read_byte()
        return 1

    # ── io.RawIOBase protocol ─────────────────────────────────────────────────

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        return self.read_into(b)

    def read(self, size: int = -1) -> bytes:
        if size == 0:
            return b""
        return bytes((self.read_byte(),))
