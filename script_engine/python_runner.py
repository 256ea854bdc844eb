"""
script_engine/python_runner.py

Concrete Strategy: PythonScriptRunner
─────────────────────────────────────
Runs ``<script_directory>/<script_name><extension>`` as Python source. The
script executes in a fresh namespace with these globals bound:

    args     : list of argument tokens (the script name is NOT included)
    command  : the full command text, e.g. "ellipsoid 0 64 0 5 5 5 stone"
    invoker  : the Invoker that triggered the script
    console  : the owning Console (execute(), sleep(), config, ...)

Script names are plain file stems. Anything that would resolve outside the
script directory is rejected before the file system is touched.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence, Union

from .base import ScriptError, ScriptRunner

if TYPE_CHECKING:
    from invoker import Invoker

logger = logging.getLogger(__name__)


class PythonScriptRunner(ScriptRunner):
    """
    Executes Python scripts from a directory.

    Args:
        script_directory : Directory holding the scripts.
        extension        : File extension including the dot. Default ".py".
    """

    def __init__(self, script_directory: Union[str, Path], extension: str = ".py") -> None:
        self._script_directory = Path(script_directory)
        self._extension = extension

    @property
    def name(self) -> str:
        return "python"

    @property
    def script_directory(self) -> Path:
        return self._script_directory

    def resolve(self, script_name: str) -> Path:
        """
        Map a script name to its file.

        Raises:
            ScriptError : The name is not a plain file stem, or no such
                          script exists.
        """
        if not script_name or script_name in (".", "..") or "/" in script_name or "\\" in script_name:
            raise ScriptError(f"Invalid script name '{script_name}'", script_name)

        directory = self._script_directory.resolve()
        path = (directory / f"{script_name}{self._extension}").resolve()
        if path.parent != directory:
            raise ScriptError(f"Invalid script name '{script_name}'", script_name)
        if not path.is_file():
            raise ScriptError(f"No script named '{script_name}'", script_name)
        return path

    def run(
        self,
        script_name: str,
        args: Sequence[str],
        invoker: "Invoker",
        command_text: str,
    ) -> None:
        path = self.resolve(script_name)

        try:
            with open(path, encoding="utf-8") as handle:
                source = handle.read()
            code = compile(source, str(path), "exec")
        except (OSError, SyntaxError, ValueError) as exc:
            raise ScriptError(f"Could not load script '{script_name}': {exc}", script_name) from exc

        namespace = {
            "__name__": "__script__",
            "__file__": str(path),
            "args": list(args),
            "command": command_text,
            "invoker": invoker,
            "console": invoker.console,
        }

        logger.info("Running script '%s' for %r with args=%s", script_name, invoker, list(args))
        # Not runpy.run_path: it swaps sys.argv[0] and a sys.modules entry for
        # the whole process while the server keeps running on another thread.
        try:
            exec(code, namespace)
        except Exception as exc:
            raise ScriptError(f"{type(exc).__name__}: {exc}", script_name) from exc
