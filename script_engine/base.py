"""
script_engine/base.py

Defines the core abstractions for ServerWrapper's script execution layer.

Architecture Note:
    ScriptRunner is a Strategy interface. The Console only knows that it can
    ask a runner to "run script X with these arguments on behalf of this
    invoker", and that any failure comes back as a ScriptError. Which
    language the scripts are written in, and where they live, is entirely
    the concrete runner's business (see PythonScriptRunner).
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from invoker import Invoker


class ScriptError(Exception):
    """
    Any failure to locate, load or execute a script.

    Attributes:
        script_name : Name of the script that failed, when known.
    """

    def __init__(self, message: str, script_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.script_name = script_name


class ScriptRunner(ABC):
    """
    Abstract base class (the Strategy Interface) for script runners.
    """

    @abstractmethod
    def run(
        self,
        script_name: str,
        args: Sequence[str],
        invoker: "Invoker",
        command_text: str,
    ) -> None:
        """
        Run a script on behalf of *invoker*.

        Args:
            script_name  : First token of the command text.
            args         : Remaining whitespace-separated tokens.
            invoker      : Who triggered the script. Scripts call back into
                           it (execute / print / print_error) and reach the
                           owning console through ``invoker.console``.
            command_text : The full command text the tokens came from.

        Raises:
            ScriptError : On any failure, including errors raised by the
                          script itself.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable identifier for this runner."""
        ...
