"""
tests/test_console.py

Unit tests for the Console trigger/dispatch layer.

A RecordingRunner stands in for the script runtime. Scripts run on the
console's worker thread, so tests either wait on the returned Future or
close() the console before asserting.

Run with:
    python -m pytest tests/test_console.py -v
"""

import io
import os
import sys
import time
import unittest
from unittest.mock import MagicMock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from console import Console, WrapperConfig
from interceptor import StandardInput, StandardOutput
from invoker import Player, Server
from script_engine import ScriptError, ScriptRunner


class RecordingRunner(ScriptRunner):
    """Records every run; raises for scripts listed in *failing*."""

    def __init__(self, failing=(), errors=None):
        self.calls = []
        self.failing = set(failing)
        self.errors = errors or {}

    @property
    def name(self):
        return "recording"

    def run(self, script_name, args, invoker, command_text):
        self.calls.append((script_name, list(args), invoker, command_text))
        if script_name in self.errors:
            raise self.errors[script_name]
        if script_name in self.failing:
            raise ScriptError(f"{script_name} failed", script_name)


def _drain(standard_input):
    """Lines injected into *standard_input* that nothing has read yet."""
    lines = []
    while not standard_input._pending.empty():
        lines.append(standard_input._pending.get_nowait())
    return lines


class ConsoleTestCase(unittest.TestCase):

    def setUp(self):
        self.config = WrapperConfig().validate()
        self.standard_input = StandardInput(line_separator="\n")
        self.destination = io.BytesIO()
        self.standard_output = StandardOutput(self.destination)
        self.runner = RecordingRunner(failing={"boom"})
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.console = Console(
            self.config,
            self.standard_input,
            self.standard_output,
            self.runner,
            output_stream=self.out,
            error_stream=self.err,
        )
        self.addCleanup(self.console.close)
        self.reader = io.TextIOWrapper(io.BufferedReader(self.standard_input), encoding="utf-8")


# ─────────────────────────────────────────────────────────────────────────────
# Test: input trigger
# ─────────────────────────────────────────────────────────────────────────────

class TestInputTrigger(ConsoleTestCase):

    def test_trigger_line_is_consumed_and_dispatched(self):
        self.standard_input.writeln("!say hi")
        self.standard_input.writeln("list")

        self.assertEqual(self.reader.readline(), "list\n")
        self.console.close()

        self.assertEqual(len(self.runner.calls), 1)
        script_name, args, invoker, command_text = self.runner.calls[0]
        self.assertEqual((script_name, args, command_text), ("say", ["hi"], "say hi"))
        self.assertIsInstance(invoker, Server)
        self.assertIs(invoker.console, self.console)

    def test_surrounding_whitespace_ignored(self):
        self.standard_input.writeln("   !weather clear  ")
        self.standard_input.writeln("done")
        self.assertEqual(self.reader.readline(), "done\n")
        self.console.close()
        self.assertEqual(self.runner.calls[0][0], "weather")

    def test_non_matching_lines_pass_through(self):
        self.standard_input.writeln("say !not a trigger")
        self.assertEqual(self.reader.readline(), "say !not a trigger\n")
        self.console.close()
        self.assertEqual(self.runner.calls, [])

    def test_empty_command_reports_error(self):
        self.standard_input.writeln("!")
        self.standard_input.writeln("next")
        self.assertEqual(self.reader.readline(), "next\n")
        self.console.close()
        self.assertEqual(self.runner.calls, [])
        self.assertEqual(self.err.getvalue(), "No script specified\n")


# ─────────────────────────────────────────────────────────────────────────────
# Test: output trigger
# ─────────────────────────────────────────────────────────────────────────────

class TestOutputTrigger(ConsoleTestCase):

    CHAT = b"[12:00:00] [Server thread/INFO]: <Steve> !time set day\n"

    def test_chat_command_dispatched_for_player(self):
        self.standard_output.write(self.CHAT)
        self.console.close()

        script_name, args, invoker, command_text = self.runner.calls[0]
        self.assertEqual((script_name, args, command_text), ("time", ["set", "day"], "time set day"))
        self.assertIsInstance(invoker, Player)
        self.assertEqual(invoker.name, "Steve")

    def test_output_is_forwarded_even_when_matched(self):
        self.standard_output.write(self.CHAT)
        self.assertEqual(self.destination.getvalue(), self.CHAT)

    def test_other_output_ignored(self):
        self.standard_output.write(b"[12:00:00] [Server thread/INFO]: <Steve> hello\n")
        self.console.close()
        self.assertEqual(self.runner.calls, [])


# ─────────────────────────────────────────────────────────────────────────────
# Test: dispatch and error handling
# ─────────────────────────────────────────────────────────────────────────────

class TestDispatch(ConsoleTestCase):

    def test_failure_reported_once_and_pipeline_continues(self):
        self.standard_input.writeln("!boom now")
        self.standard_input.writeln("!say after")
        self.standard_input.writeln("list")

        self.assertEqual(self.reader.readline(), "list\n")
        self.console.close()

        self.assertEqual(self.err.getvalue(), "boom failed\n")
        self.assertEqual([call[0] for call in self.runner.calls], ["boom", "say"])

    def test_failure_reported_to_invoker(self):
        invoker = MagicMock()
        self.console.dispatch(invoker, "boom").result(timeout=5)
        invoker.print_error.assert_called_once_with("boom failed")

    def test_unexpected_exception_caught(self):
        self.runner.errors["weird"] = RuntimeError()
        invoker = MagicMock()
        self.console.dispatch(invoker, "weird").result(timeout=5)
        invoker.print_error.assert_called_once_with("RuntimeError")

    def test_failing_print_error_does_not_escape(self):
        invoker = MagicMock()
        invoker.print_error.side_effect = OSError("stream closed")
        with self.assertLogs("console.console", level="ERROR"):
            self.console.dispatch(invoker, "boom").result(timeout=5)

    def test_scripts_run_in_dispatch_order(self):
        invoker = MagicMock()
        for name in ("one", "two", "three"):
            self.console.dispatch(invoker, name)
        self.console.close()
        self.assertEqual([call[0] for call in self.runner.calls], ["one", "two", "three"])

    def test_dispatch_after_close_is_dropped(self):
        self.console.close()
        with self.assertLogs("console.console", level="WARNING"):
            self.assertIsNone(self.console.dispatch(MagicMock(), "late"))

    def test_close_detaches_triggers(self):
        self.console.close()
        self.assertEqual(len(self.standard_input.bus), 0)
        self.assertEqual(len(self.standard_output.bus), 0)
        self.standard_input.writeln("!say hi")
        self.assertEqual(self.reader.readline(), "!say hi\n")


# ─────────────────────────────────────────────────────────────────────────────
# Test: script conveniences
# ─────────────────────────────────────────────────────────────────────────────

class TestConveniences(ConsoleTestCase):

    def test_execute_injects_into_stdin(self):
        self.assertEqual(self.console.execute("save-all"), "save-all")
        self.assertEqual(self.reader.readline(), "save-all\n")

    def test_player_execute_reaches_pipeline_wrapped(self):
        Player("Steve", self.console).execute("time set day")
        self.assertEqual(_drain(self.standard_input), ["execute as Steve run time set day"])

    def test_sleep(self):
        started = time.monotonic()
        self.assertEqual(self.console.sleep(20), 20)
        self.assertGreaterEqual(time.monotonic() - started, 0.015)

    def test_default_runner_uses_config(self):
        console = Console(self.config, StandardInput(), StandardOutput(io.BytesIO()))
        self.addCleanup(console.close)
        self.assertEqual(console.script_runner.name, "python")
        self.assertEqual(console.script_runner.script_directory, self.config.script_directory)


if __name__ == "__main__":
    unittest.main()
