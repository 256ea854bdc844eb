"""
interceptor - ServerWrapper's standard stream interception layer.

Public API:
    StandardInput               : Line-queue backed replacement for stdin.
    StandardOutput              : Pass-through replacement for stdout.
    StandardStreams             : Process-scoped installer for both channels.
    StreamsAlreadyInstalledError: Raised on a second install.
"""

from .standard_input import StandardInput
from .standard_output import StandardOutput
from .streams import StandardStreams, StreamsAlreadyInstalledError

__all__ = [
    "StandardInput",
    "StandardOutput",
    "StandardStreams",
    "StreamsAlreadyInstalledError",
]
