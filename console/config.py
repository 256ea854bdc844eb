"""
console/config.py

WrapperConfig - the wrapper's settings, loaded once at startup.
───────────────────────────────────────────────────────────────
Configuration priority (highest to lowest):
  1. Explicit overrides (CLI flags, passed to load_config)
  2. Environment variables (SERVERWRAPPER_<KEY>)
  3. Config file (wrapper.env, KEY='value' lines, read with python-dotenv)
  4. Built-in defaults

If the config file does not exist it is created with the defaults so the
operator has something to edit.

Every setting is listed once in CONFIG_FIELDS together with how to parse it
from text and how to write it back, so loading and saving never look
attributes up by name at runtime.

Invalid settings raise ConfigurationError from validate(). The wrapper is
meant to refuse to start rather than run with a trigger that binds the wrong
capture groups.
"""

import codecs
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_PREFIX = "SERVERWRAPPER"
DEFAULT_CONFIG_PATH = Path("wrapper.env")

# "!say hi" typed at the console → command text "say hi"
DEFAULT_INPUT_REGEX = r"!(.*)"
# "[12:00:00] [Server thread/INFO]: <Steve> !say hi" → ("Steve", "say hi")
DEFAULT_OUTPUT_REGEX = r"\[[^\]]*\] \[[^\]]*\]: <([^>]+)> !(.*)"
DEFAULT_EXECUTE_COMMAND = "execute as %s run %s"


class ConfigurationError(ValueError):
    """A setting is missing or malformed. Raised at startup, never swallowed."""


def _compile(text: str) -> re.Pattern[str]:
    try:
        return re.compile(text)
    except re.error as exc:
        raise ConfigurationError(f"Invalid regular expression {text!r}: {exc}") from exc


@dataclass
class WrapperConfig:
    """ServerWrapper configuration."""

    # Triggers
    input_regex: re.Pattern[str] = field(default_factory=lambda: re.compile(DEFAULT_INPUT_REGEX))
    output_regex: re.Pattern[str] = field(default_factory=lambda: re.compile(DEFAULT_OUTPUT_REGEX))

    # Scripts
    script_directory: Path = field(default_factory=lambda: Path("scripts"))
    script_extension: str = ".py"

    # Channels
    character_encoding: str = "utf-8"

    # Player commands
    execute_command: str = DEFAULT_EXECUTE_COMMAND

    def __post_init__(self):
        if isinstance(self.input_regex, str):
            self.input_regex = _compile(self.input_regex)
        if isinstance(self.output_regex, str):
            self.output_regex = _compile(self.output_regex)
        if isinstance(self.script_directory, str):
            self.script_directory = Path(self.script_directory)

    def validate(self) -> "WrapperConfig":
        """
        Check the settings that would otherwise fail at the first trigger.

        Returns:
            self, so calls can be chained.

        Raises:
            ConfigurationError : On the first invalid setting found.
        """
        if self.input_regex.groups != 1:
            raise ConfigurationError(
                f"INPUT_REGEX must have exactly 1 capture group (command), "
                f"found {self.input_regex.groups}: {self.input_regex.pattern!r}"
            )
        if self.output_regex.groups != 2:
            raise ConfigurationError(
                f"OUTPUT_REGEX must have exactly 2 capture groups (name, command), "
                f"found {self.output_regex.groups}: {self.output_regex.pattern!r}"
            )

        if not self.execute_command:
            raise ConfigurationError("EXECUTE_COMMAND must not be empty")
        try:
            self.execute_command % ("player", "command")
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"EXECUTE_COMMAND must take exactly two %s values (name, command): "
                f"{self.execute_command!r} ({exc})"
            ) from exc

        try:
            codecs.lookup(self.character_encoding)
        except LookupError as exc:
            raise ConfigurationError(
                f"Unknown CHARACTER_ENCODING {self.character_encoding!r}"
            ) from exc
        # Codecs such as rot13 or base64 are found by lookup() but are not
        # text encodings.
        try:
            terminators = "\r\n".encode(self.character_encoding)
        except LookupError as exc:
            raise ConfigurationError(
                f"CHARACTER_ENCODING {self.character_encoding!r} is not a text encoding"
            ) from exc
        # Line terminators are detected byte by byte.
        if terminators != b"\r\n":
            raise ConfigurationError(
                f"CHARACTER_ENCODING {self.character_encoding!r} does not encode "
                f"CR/LF as single bytes"
            )

        return self


@dataclass(frozen=True)
class ConfigField:
    """One row of the declarative settings table."""

    key: str
    attribute: str
    parse: Callable[[str], Any]
    render: Callable[[Any], str] = str


CONFIG_FIELDS: Tuple[ConfigField, ...] = (
    ConfigField("INPUT_REGEX", "input_regex", _compile, lambda p: p.pattern),
    ConfigField("OUTPUT_REGEX", "output_regex", _compile, lambda p: p.pattern),
    ConfigField("SCRIPT_DIRECTORY", "script_directory", Path),
    ConfigField("SCRIPT_EXTENSION", "script_extension", str),
    ConfigField("CHARACTER_ENCODING", "character_encoding", str),
    ConfigField("EXECUTE_COMMAND", "execute_command", str),
)

_FIELDS_BY_KEY: Dict[str, ConfigField] = {f.key: f for f in CONFIG_FIELDS}
_FIELDS_BY_ATTRIBUTE: Dict[str, ConfigField] = {f.attribute: f for f in CONFIG_FIELDS}


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def write_config(path: Union[str, Path], config: WrapperConfig) -> Path:
    """Write *config* to *path* as KEY='value' lines readable by python-dotenv."""
    path = Path(path)
    lines = ["# ServerWrapper configuration"]
    for config_field in CONFIG_FIELDS:
        value = config_field.render(getattr(config, config_field.attribute))
        lines.append(f"{config_field.key}={_quote(value)}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    environ: Optional[Mapping[str, str]] = None,
    create: bool = True,
) -> WrapperConfig:
    """
    Load and validate configuration.

    Args:
        path      : Config file. Defaults to ./wrapper.env.
        overrides : Attribute name → text (e.g. {"input_regex": "#(.*)"}).
                    None values are ignored.
        environ   : Environment to read SERVERWRAPPER_* from. Defaults to
                    os.environ.
        create    : Write a default config file when *path* is missing.

    Raises:
        ConfigurationError : An override names an unknown setting, or a
                             value does not parse or validate.
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    environ = os.environ if environ is None else environ
    raw: Dict[str, str] = {}

    if path.is_file():
        for key, value in dotenv_values(path, interpolate=False).items():
            if key not in _FIELDS_BY_KEY:
                logger.warning("Ignoring unknown setting %s in %s", key, path)
            elif value is not None:
                raw[key] = value
        logger.debug("Loaded %d setting(s) from %s", len(raw), path)
    elif create:
        try:
            write_config(path, WrapperConfig())
            logger.info("Created default configuration file %s", path)
        except OSError as exc:
            logger.warning("Could not create configuration file %s: %s", path, exc)

    for config_field in CONFIG_FIELDS:
        env_value = environ.get(f"{ENV_PREFIX}_{config_field.key}")
        if env_value is not None:
            raw[config_field.key] = env_value

    for attribute, value in (overrides or {}).items():
        if value is None:
            continue
        if attribute not in _FIELDS_BY_ATTRIBUTE:
            raise ConfigurationError(f"Unknown setting {attribute!r}")
        raw[_FIELDS_BY_ATTRIBUTE[attribute].key] = value

    kwargs = {
        _FIELDS_BY_KEY[key].attribute: _FIELDS_BY_KEY[key].parse(value)
        for key, value in raw.items()
    }
    return WrapperConfig(**kwargs).validate()
