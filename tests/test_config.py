"""
tests/test_config.py

Unit tests for WrapperConfig, load_config and write_config.

Run with:
    python -m pytest tests/test_config.py -v
"""

import os
import re
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from console import ConfigurationError, WrapperConfig, load_config, write_config


class TestValidate(unittest.TestCase):

    def test_defaults_are_valid(self):
        config = WrapperConfig().validate()
        self.assertEqual(config.input_regex.fullmatch("!say hi").group(1), "say hi")
        match = config.output_regex.fullmatch("[12:00:00] [Server thread/INFO]: <Steve> !time set day")
        self.assertEqual(match.groups(), ("Steve", "time set day"))

    def test_strings_are_converted(self):
        config = WrapperConfig(input_regex="#(.*)", script_directory="elsewhere")
        self.assertEqual(config.input_regex.pattern, "#(.*)")
        self.assertEqual(config.script_directory, Path("elsewhere"))

    def test_input_regex_needs_one_group(self):
        for pattern in ("!.*", "!(\\w+) (.*)"):
            with self.subTest(pattern=pattern):
                with self.assertRaises(ConfigurationError):
                    WrapperConfig(input_regex=pattern).validate()

    def test_output_regex_needs_two_groups(self):
        for pattern in ("<(\\w+)> .*", "<(\\w+)> (\\w+) (.*)"):
            with self.subTest(pattern=pattern):
                with self.assertRaises(ConfigurationError):
                    WrapperConfig(output_regex=pattern).validate()

    def test_invalid_regex(self):
        with self.assertRaises(ConfigurationError):
            WrapperConfig(input_regex="!(unclosed")

    def test_execute_template_needs_two_slots(self):
        for template in ("", "execute as %s", "%s %s %s", "%d %d"):
            with self.subTest(template=template):
                with self.assertRaises(ConfigurationError):
                    WrapperConfig(execute_command=template).validate()

    def test_unknown_encoding(self):
        with self.assertRaises(ConfigurationError):
            WrapperConfig(character_encoding="no-such-codec").validate()

    def test_non_text_codec_rejected(self):
        for codec in ("rot13", "hex", "base64"):
            with self.subTest(codec=codec):
                with self.assertRaises(ConfigurationError) as ctx:
                    WrapperConfig(character_encoding=codec).validate()
                self.assertIn("not a text encoding", str(ctx.exception))

    def test_multibyte_terminator_encoding_rejected(self):
        with self.assertRaises(ConfigurationError):
            WrapperConfig(character_encoding="utf-16").validate()

    def test_single_byte_encoding_accepted(self):
        WrapperConfig(character_encoding="latin-1").validate()


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "wrapper.env"

    def test_missing_file_is_created_with_defaults(self):
        config = load_config(self.path, environ={})
        self.assertTrue(self.path.is_file())
        self.assertEqual(config, WrapperConfig())

        reloaded = load_config(self.path, environ={})
        self.assertEqual(reloaded.input_regex.pattern, config.input_regex.pattern)
        self.assertEqual(reloaded.output_regex.pattern, config.output_regex.pattern)
        self.assertEqual(reloaded.execute_command, config.execute_command)

    def test_create_disabled(self):
        load_config(self.path, environ={}, create=False)
        self.assertFalse(self.path.exists())

    def test_file_values_used(self):
        self.path.write_text(
            "INPUT_REGEX='#(.*)'\nSCRIPT_EXTENSION=.script\nCHARACTER_ENCODING=latin-1\n",
            encoding="utf-8",
        )
        config = load_config(self.path, environ={})
        self.assertEqual(config.input_regex.pattern, "#(.*)")
        self.assertEqual(config.script_extension, ".script")
        self.assertEqual(config.character_encoding, "latin-1")

    def test_round_trip_with_quotes_and_backslashes(self):
        original = WrapperConfig(input_regex=r"it's \d (.*)", execute_command="run '%s' \\ %s")
        write_config(self.path, original)
        config = load_config(self.path, environ={})
        self.assertEqual(config.input_regex.pattern, r"it's \d (.*)")
        self.assertEqual(config.execute_command, "run '%s' \\ %s")

    def test_environment_beats_file(self):
        self.path.write_text("INPUT_REGEX='#(.*)'\n", encoding="utf-8")
        config = load_config(self.path, environ={"SERVERWRAPPER_INPUT_REGEX": "@(.*)"})
        self.assertEqual(config.input_regex.pattern, "@(.*)")

    def test_overrides_beat_environment(self):
        config = load_config(
            self.path,
            overrides={"input_regex": "%(.*)", "script_directory": None},
            environ={"SERVERWRAPPER_INPUT_REGEX": "@(.*)"},
        )
        self.assertEqual(config.input_regex.pattern, "%(.*)")
        self.assertEqual(config.script_directory, Path("scripts"))

    def test_unknown_override_rejected(self):
        with self.assertRaises(ConfigurationError):
            load_config(self.path, overrides={"no_such_setting": "x"}, environ={})

    def test_unknown_file_key_warned(self):
        self.path.write_text("SERVER_FILE_REGEX='minecraft_server.*'\n", encoding="utf-8")
        with self.assertLogs("console.config", level="WARNING"):
            load_config(self.path, environ={})

    def test_invalid_file_value_fails_fast(self):
        self.path.write_text("OUTPUT_REGEX='<(\\w+)> .*'\n", encoding="utf-8")
        with self.assertRaises(ConfigurationError):
            load_config(self.path, environ={})

    def test_compiled_patterns(self):
        config = load_config(self.path, environ={})
        self.assertIsInstance(config.input_regex, re.Pattern)


if __name__ == "__main__":
    unittest.main()
