"""
console/triggers.py

The two privileged subscribers a Console registers on its channels.

Each trigger holds an explicit back-reference to its Console and reads the
pattern from ``console.config`` on every line. Lines are stripped and must
match the whole pattern (``re.fullmatch``).
"""

import logging
from typing import TYPE_CHECKING

from invoker import Player, Server
from lines import LineEvent, LineSubscriber

if TYPE_CHECKING:
    from .console import Console

logger = logging.getLogger(__name__)


class InputTrigger(LineSubscriber):
    """
    Operator commands on standard input.

    A match is dispatched for the Server invoker and cancelled, so the raw
    trigger text never reaches the wrapped server.
    """

    def __init__(self, console: "Console") -> None:
        self._console = console

    def process_line(self, event: LineEvent) -> None:
        match = self._console.config.input_regex.fullmatch(event.line.strip())
        if match is None:
            return
        event.cancel()
        command_text = match.group(1) or ""
        logger.debug("Input trigger matched: %r", command_text)
        self._console.dispatch(Server(self._console), command_text)


class OutputTrigger(LineSubscriber):
    """
    Player commands surfaced in standard output.

    Never cancels: output bytes have already been forwarded.
    """

    def __init__(self, console: "Console") -> None:
        self._console = console

    def process_line(self, event: LineEvent) -> None:
        match = self._console.config.output_regex.fullmatch(event.line.strip())
        if match is None:
            return
        name, command_text = match.group(1) or "", match.group(2) or ""
        logger.debug("Output trigger matched: %s → %r", name, command_text)
        self._console.dispatch(Player(name, self._console), command_text)
