"""
invoker/player.py

Player - the invoker for commands spotted in the server's own output.
─────────────────────────────────────────────────────────────────────
A Player is built from the name captured by the output trigger (for a
Minecraft server, the author of a chat line). Scripts use it to:

  • execute commands as the player, via the configurable execute template
    (e.g. "execute as %s run %s" → "execute as Steve run time set day");
  • talk to the player, via a ``tellraw`` announcement whose JSON payload is
    produced by json.dumps so quotes, backslashes and control characters in
    the message cannot break it.

Announcements are injected through Console.execute directly. Going through
Player.execute would wrap them in the execute template again.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Dict

from .base import AbstractInvoker

if TYPE_CHECKING:
    from console import Console

logger = logging.getLogger(__name__)

MESSAGE_COLOUR = "white"
ERROR_COLOUR = "red"


class Player(AbstractInvoker):
    """
    A named player.

    Args:
        name    : Player name, injected into commands run on their behalf.
        console : Console used to inject commands.
    """

    def __init__(self, name: str, console: "Console") -> None:
        super().__init__(console)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def execute(self, command: str) -> str:
        """Run *command* as this player. Returns the wrapped command."""
        template = self._console.config.execute_command
        return self._console.execute(template % (self._name, command))

    def print(self, message: str, colour: str = MESSAGE_COLOUR) -> str:
        """
        Show *message* in the player's chat in *colour*.

        Returns:
            The full ``tellraw`` command that was injected.
        """
        return self.tellraw({"text": message, "color": colour})

    def print_error(self, message: str) -> str:
        return self.print(message, ERROR_COLOUR)

    def tellraw(self, payload: Dict[str, Any]) -> str:
        """Inject ``tellraw <name> <payload as JSON>`` through the server path."""
        encoded = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        return self._console.execute(f"tellraw {self._name} {encoded}")

    def __repr__(self) -> str:
        return f"Player(name={self._name!r})"
