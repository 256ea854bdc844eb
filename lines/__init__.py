"""
lines - line events and the publish/subscribe bus that carries them.

Public API:
    LineEvent      : A published line plus its cancellation flag.
    LineBus        : Ordered, synchronous subscriber list for one channel.
    LineSubscriber : Abstract base for objects that react to lines.
"""

from .bus import LineBus, LineSubscriber
from .event import LineEvent

__all__ = [
    "LineBus",
    "LineEvent",
    "LineSubscriber",
]
