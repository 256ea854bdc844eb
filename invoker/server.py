"""
invoker/server.py

Server - the invoker for commands typed by the operator on standard input.
"""

import logging
from typing import TYPE_CHECKING, TextIO

from colorama import Fore, Style

from .base import AbstractInvoker

if TYPE_CHECKING:
    from console import Console

logger = logging.getLogger(__name__)

_ERROR = f"{Fore.RED}{Style.BRIGHT}"
_RESET = Style.RESET_ALL


class Server(AbstractInvoker):
    """
    The server operator.

    Messages are written to the console's real output and error streams, not
    to the instrumented ``sys.stdout``, so they never loop back through the
    output trigger.
    """

    def __init__(self, console: "Console") -> None:
        super().__init__(console)

    def is_server(self) -> bool:
        return True

    def print(self, message: str) -> str:
        return self._write(message, self._console.output_stream, colour=None)

    def print_error(self, message: str) -> str:
        return self._write(message, self._console.error_stream, colour=_ERROR)

    @staticmethod
    def _write(message: str, stream: TextIO, colour) -> str:
        text = message
        if colour and _isatty(stream):
            text = f"{colour}{message}{_RESET}"
        stream.write(text + "\n")
        stream.flush()
        return message

    def __repr__(self) -> str:
        return "Server()"


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False
