"""
lines/event.py

LineEvent - the value handed to every subscriber of a LineBus publication.
"""


class LineEvent:
    """
    A single line of text and a cancellation flag.

    The line is read-only. The flag starts out False and can only move to
    True; there is no way to un-cancel an event. A LineBus creates exactly one
    event per publication and drops it once every subscriber has seen it, so
    cancelling never affects any other line.
    """

    __slots__ = ("_line", "_cancelled")

    def __init__(self, line: str) -> None:
        self._line = line
        self._cancelled = False

    @property
    def line(self) -> str:
        return self._line

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Mark the event as cancelled."""
        self._cancelled = True

    def __repr__(self) -> str:
        return f"LineEvent(line={self._line!r}, cancelled={self._cancelled})"
