"""
console - trigger matching, script dispatch and configuration.

Public API:
    Console            : Dispatch layer over the two interception channels.
    InputTrigger       : Subscriber for operator commands on stdin.
    OutputTrigger      : Subscriber for player commands in stdout.
    WrapperConfig      : Settings dataclass.
    ConfigurationError : Raised for invalid settings.
    load_config        : Defaults < file < environment < overrides.
"""

from .config import ConfigurationError, WrapperConfig, load_config, write_config
from .console import Console
from .triggers import InputTrigger, OutputTrigger

__all__ = [
    "ConfigurationError",
    "Console",
    "InputTrigger",
    "OutputTrigger",
    "WrapperConfig",
    "load_config",
    "write_config",
]
