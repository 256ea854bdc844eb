"""
console/console.py

Console - turns trigger matches into script runs.
─────────────────────────────────────────────────
The Console sits on top of the two interception channels:

    StandardInput  ──bus──▶ InputTrigger  ─┐
                                           ├─▶ dispatch() ─▶ ScriptRunner.run()
    StandardOutput ──bus──▶ OutputTrigger ─┘

Dispatch policy:
  • The command text is split on whitespace. The first token names the
    script, the rest are its arguments.
  • Scripts run one at a time, in dispatch order, on a dedicated worker
    thread. A script that sleeps or blocks holds up later scripts but never
    the thread reading stdin or writing stdout.
  • Every failure (ScriptError or anything else) is reported once through
    ``invoker.print_error`` and goes no further. A broken script must not
    take down the wrapped server or the interception pipeline.

The Console is also what scripts get as ``console``: execute() injects a
command into the wrapped server's stdin and sleep() pauses the script.
"""

import logging
import sys
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional, TextIO

from interceptor import StandardInput, StandardOutput
from invoker import Invoker
from script_engine import PythonScriptRunner, ScriptRunner

from .config import WrapperConfig
from .triggers import InputTrigger, OutputTrigger

logger = logging.getLogger(__name__)


class Console:
    """
    Trigger/dispatch layer over a pair of interception channels.

    Args:
        config          : Validated WrapperConfig.
        standard_input  : Input channel; receives injected commands.
        standard_output : Output channel.
        script_runner   : Runner for matched commands. Defaults to a
                          PythonScriptRunner over ``config.script_directory``.
        output_stream   : Real output for Server.print. Defaults to
                          ``sys.__stdout__``.
        error_stream    : Real output for Server.print_error. Defaults to
                          ``sys.__stderr__``.
        executor        : Where scripts run. Defaults to a private
                          single-worker ThreadPoolExecutor, shut down by
                          close(). An injected executor is left running.
    """

    def __init__(
        self,
        config: WrapperConfig,
        standard_input: StandardInput,
        standard_output: StandardOutput,
        script_runner: Optional[ScriptRunner] = None,
        output_stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._config = config
        self._standard_input = standard_input
        self._standard_output = standard_output
        self._script_runner = script_runner or PythonScriptRunner(
            config.script_directory, config.script_extension
        )
        self._output_stream = output_stream or sys.__stdout__
        self._error_stream = error_stream or sys.__stderr__

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="script"
        )
        self._closed = False

        self._input_trigger = InputTrigger(self)
        self._output_trigger = OutputTrigger(self)
        standard_input.bus.subscribe(self._input_trigger)
        standard_output.bus.subscribe(self._output_trigger)

        logger.debug(
            "Console initialised | runner=%s | input=%r | output=%r",
            self._script_runner.name,
            config.input_regex.pattern,
            config.output_regex.pattern,
        )

    # ── Accessors ─────────────────────────────────────────────────────────────

    @property
    def config(self) -> WrapperConfig:
        return self._config

    @property
    def standard_input(self) -> StandardInput:
        return self._standard_input

    @property
    def standard_output(self) -> StandardOutput:
        return self._standard_output

    @property
    def script_runner(self) -> ScriptRunner:
        return self._script_runner

    @property
    def output_stream(self) -> TextIO:
        return self._output_stream

    @property
    def error_stream(self) -> TextIO:
        return self._error_stream

    # ── Dispatch ──────────────────────────────────────────────────────────────

    def dispatch(self, invoker: Invoker, command_text: str) -> Optional[Future]:
        """
        Queue *command_text* to run as a script on behalf of *invoker*.

        Returns:
            The Future of the script run, or None if the console is closed.
        """
        if self._closed:
            logger.warning("Console closed; dropping command %r from %r", command_text, invoker)
            return None
        return self._executor.submit(self._run_script, invoker, command_text)

    def _run_script(self, invoker: Invoker, command_text: str) -> None:
        tokens = command_text.split()
        if not tokens:
            self._report(invoker, "No script specified")
            return

        script_name, args = tokens[0], tokens[1:]
        try:
            self._script_runner.run(script_name, args, invoker, command_text)
        except Exception as exc:
            logger.warning("Script '%s' failed for %r: %s", script_name, invoker, exc)
            self._report(invoker, str(exc) or type(exc).__name__)

    @staticmethod
    def _report(invoker: Invoker, message: str) -> None:
        try:
            invoker.print_error(message)
        except Exception:
            logger.exception("Could not report %r to %r", message, invoker)

    # ── Script conveniences ───────────────────────────────────────────────────

    def execute(self, command: str) -> str:
        """Submit *command* to the wrapped server's stdin. Returns *command*."""
        self._standard_input.writeln(command)
        logger.debug("Injected command: %r", command)
        return command

    def sleep(self, millis: float) -> float:
        """Pause the calling script for *millis* milliseconds. Returns *millis*."""
        time.sleep(millis / 1000.0)
        return millis

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Detach the triggers and wait for queued scripts to finish."""
        if self._closed:
            return
        self._closed = True
        self._standard_input.bus.unsubscribe(self._input_trigger)
        self._standard_output.bus.unsubscribe(self._output_trigger)
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "Console":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
