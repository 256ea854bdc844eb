"""
invoker/base.py

Invoker - whoever is held responsible for a script run.
───────────────────────────────────────────────────────
Scripts receive an Invoker and talk back through it: execute a command "as"
the invoker, or send it a message. The two concrete invokers differ in what
those calls mean:

    Server  : the operator at the console. Commands go straight into the
              wrapped server's stdin; messages go to the real terminal.
    Player  : a named actor seen in server output. Commands are wrapped so
              the server runs them as that player; messages become
              announcement commands addressed to the player.

Invokers live for a single dispatch and are never persisted.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from console import Console


class Invoker(ABC):
    """Capability set every invoker exposes to scripts."""

    @abstractmethod
    def is_server(self) -> bool:
        """True if this invoker is the server operator."""
        ...

    @abstractmethod
    def execute(self, command: str) -> str:
        """
        Execute *command* on behalf of this invoker.

        Returns:
            The command text actually injected into the server's input.
        """
        ...

    @abstractmethod
    def print(self, message: str) -> str:
        """Send *message* to this invoker. Returns the text actually sent."""
        ...

    @abstractmethod
    def print_error(self, message: str) -> str:
        """Send an error *message* to this invoker. Returns the text actually sent."""
        ...


class AbstractInvoker(Invoker):
    """
    Shared base for invokers that reach the pipeline through a Console.

    Most invokers are not the server, and most execute commands by handing
    them to the console unchanged; subclasses override what differs.

    Args:
        console : Console used to inject commands.
    """

    def __init__(self, console: "Console") -> None:
        self._console = console

    @property
    def console(self) -> "Console":
        return self._console

    def is_server(self) -> bool:
        return False

    def execute(self, command: str) -> str:
        return self._console.execute(command)
