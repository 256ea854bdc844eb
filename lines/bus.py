"""
lines/bus.py

LineBus - publish/subscribe for lines read from or written to a channel.
────────────────────────────────────────────────────────────────────────
Each interception channel owns one LineBus. A publication is strictly
synchronous: the bus walks its subscriber list in registration order on the
caller's thread, then reports whether any subscriber cancelled the event.

The bus does no locking. It is only ever driven by the single thread that is
currently servicing its channel.

Caller contract:
    Subscribers must not subscribe or unsubscribe anything on the same bus
    while a publication is in flight. The result of doing so is undefined.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from .event import LineEvent

logger = logging.getLogger(__name__)


class LineSubscriber(ABC):
    """Anything that wants to see lines published on a LineBus."""

    @abstractmethod
    def process_line(self, event: LineEvent) -> None:
        """
        Called once per publication (per registration).

        Args:
            event : The event for the line. Call ``event.cancel()`` to veto
                    the channel's downstream delivery of the line.
        """
        ...


class LineBus:
    """
    Ordered list of LineSubscriber objects.

    The same subscriber may be registered more than once; every registration
    is an independent entry and is notified once per publication. Entries are
    compared by identity, never by equality.
    """

    def __init__(self) -> None:
        self._subscribers: List[LineSubscriber] = []

    def subscribe(self, subscriber: LineSubscriber) -> None:
        """Append *subscriber* to the end of the notification order."""
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: LineSubscriber) -> bool:
        """
        Remove the first registration of *subscriber*.

        Later registrations of the same object stay in place.

        Returns:
            True if a registration was removed, False if none was found.
        """
        for index, registered in enumerate(self._subscribers):
            if registered is subscriber:
                del self._subscribers[index]
                return True
        return False

    def publish(self, line: str) -> bool:
        """
        Notify every subscriber of *line*, in registration order.

        Returns:
            True if the event ended up cancelled, False otherwise.
        """
        event = LineEvent(line)
        for subscriber in self._subscribers:
            subscriber.process_line(event)
        if event.cancelled:
            logger.debug("Line cancelled by subscriber: %r", line)
        return event.cancelled

    def __len__(self) -> int:
        return len(self._subscribers)
