"""
interceptor/streams.py

StandardStreams - process-wide ownership of sys.stdin and sys.stdout.
────────────────────────────────────────────────────────────────────
Replacing the interpreter's standard streams is global state, so it is
modelled as one process-scoped resource:

  • install() may succeed once per process. A second call raises
    StreamsAlreadyInstalledError, even after close().
    A failed install leaves the streams untouched and does not count.
  • The installed channels are reachable only through the returned object
    (``streams.standard_input`` / ``streams.standard_output``). Code that
    merely reads ``sys.stdin`` or prints to ``sys.stdout`` sees instrumented
    behaviour without knowing about it.
  • close() (or leaving the ``with`` block) puts the original streams back.
    The stdin forwarder is a daemon thread and is left running.

Usage:
    with StandardStreams.install(encoding="utf-8") as streams:
        console = Console(config, streams.standard_input, streams.standard_output)
        runpy.run_module("my_server", run_name="__main__")
"""

import io
import logging
import sys
import threading
from typing import Optional, TextIO

from .standard_input import StandardInput
from .standard_output import StandardOutput

logger = logging.getLogger(__name__)


class StreamsAlreadyInstalledError(RuntimeError):
    """Raised when StandardStreams.install() is called more than once."""


class StandardStreams:
    """
    Handle on the installed interception channels.

    Build instances through install(); the constructor only records state.
    """

    _installed = False
    _install_lock = threading.Lock()

    def __init__(
        self,
        standard_input: StandardInput,
        standard_output: StandardOutput,
        stdin_wrapper: TextIO,
        stdout_wrapper: TextIO,
        original_stdin: Optional[TextIO],
        original_stdout: TextIO,
    ) -> None:
        self._standard_input = standard_input
        self._standard_output = standard_output
        self._stdin_wrapper = stdin_wrapper
        self._stdout_wrapper = stdout_wrapper
        self._original_stdin = original_stdin
        self._original_stdout = original_stdout
        self._closed = False

    @classmethod
    def install(cls, encoding: str = "utf-8") -> "StandardStreams":
        """
        Replace ``sys.stdin`` / ``sys.stdout`` and start the stdin forwarder.

        Args:
            encoding : Encoding used on both channels.

        Raises:
            StreamsAlreadyInstalledError : install() already ran in this process.
            TypeError                    : sys.stdout has no binary ``buffer``.
                                           Nothing is replaced and install()
                                           may be retried.
        """
        with cls._install_lock:
            if cls._installed:
                raise StreamsAlreadyInstalledError(
                    "Standard streams are already installed for this process"
                )
            return cls._install(encoding)

    @classmethod
    def _install(cls, encoding: str) -> "StandardStreams":
        original_stdin, original_stdout = sys.stdin, sys.stdout
        destination = getattr(original_stdout, "buffer", None)
        if destination is None:
            raise TypeError(
                f"sys.stdout ({type(original_stdout).__name__}) has no binary buffer to forward to"
            )
        original_stdout.flush()

        standard_output = StandardOutput(destination, encoding=encoding)
        standard_input = StandardInput(original_stdin, encoding=encoding)

        stdout_wrapper = io.TextIOWrapper(
            standard_output,
            encoding=encoding,
            errors="replace",
            line_buffering=True,
            write_through=True,
        )
        stdin_wrapper = io.TextIOWrapper(
            io.BufferedReader(standard_input),
            encoding=encoding,
            errors="replace",
        )

        sys.stdout = stdout_wrapper
        sys.stdin = stdin_wrapper
        cls._installed = True
        standard_input.start_forwarding()

        logger.info("Standard streams installed (encoding=%s)", encoding)
        return cls(
            standard_input,
            standard_output,
            stdin_wrapper,
            stdout_wrapper,
            original_stdin,
            original_stdout,
        )

    @property
    def standard_input(self) -> StandardInput:
        return self._standard_input

    @property
    def standard_output(self) -> StandardOutput:
        return self._standard_output

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Restore the original standard streams. Safe to call twice."""
        if self._closed:
            return
        self._stdout_wrapper.flush()
        if sys.stdout is self._stdout_wrapper:
            sys.stdout = self._original_stdout
        if sys.stdin is self._stdin_wrapper:
            sys.stdin = self._original_stdin
        self._closed = True
        logger.info("Standard streams restored")

    def __enter__(self) -> "StandardStreams":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
