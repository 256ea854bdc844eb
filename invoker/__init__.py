"""
invoker - who a script runs on behalf of.

Public API:
    Invoker         : Abstract capability set (is_server / execute / print / print_error).
    AbstractInvoker : Console-backed base class.
    Server          : The operator at the console.
    Player          : A named player seen in server output.
"""

from .base import AbstractInvoker, Invoker
from .player import Player
from .server import Server

__all__ = [
    "AbstractInvoker",
    "Invoker",
    "Player",
    "Server",
]
