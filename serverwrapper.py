#!/usr/bin/env python3
"""
serverwrapper.py - ServerWrapper entry point.
─────────────────────────────────────────────
Run this script INSTEAD of starting the server module directly:

    python serverwrapper.py [options] MODULE [SERVER_ARGS...]

ServerWrapper will:
  1. Load configuration (wrapper.env, SERVERWRAPPER_* variables, CLI flags).
  2. Replace sys.stdin / sys.stdout with intercepting channels.
  3. Watch both channels for trigger lines and run the matching scripts.
  4. Run MODULE in this process as __main__, with SERVER_ARGS as its argv.
  5. Exit with the module's exit code.

CLI Options
───────────
  --config PATH          Config file. Created with defaults if missing.
                         Defaults to "wrapper.env".
  --script-dir PATH      Directory containing scripts.
  --input-regex REGEX    Operator trigger (1 capture group: command).
  --output-regex REGEX   Player trigger (2 capture groups: name, command).
  --encoding NAME        Character encoding of both channels.
  --log-level LEVEL      Python logging level (DEBUG, INFO, WARNING, ERROR).
                         Defaults to WARNING.
  --version              Print ServerWrapper version and exit.
  -h / --help            Show this help message and exit.

Exit Codes
──────────
  0     The server module returned normally.
  1     ServerWrapper setup error (invalid configuration, unknown module).
  130   Interrupted with Ctrl+C.
  Any other value is the SystemExit code raised by the server module.
"""

import argparse
import logging
import os
import runpy
import sys

from colorama import Fore, Style, just_fix_windows_console
from dotenv import load_dotenv

from console import ConfigurationError, Console, WrapperConfig, load_config
from interceptor import StandardStreams
from script_engine import PythonScriptRunner

__version__ = "0.1.0"

_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

_INFO = f"{Fore.CYAN}{Style.BRIGHT}"
_ERROR = f"{Fore.RED}{Style.BRIGHT}"
_RESET = Style.RESET_ALL

_TAG = f"{_INFO}[ServerWrapper]{_RESET}"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serverwrapper",
        description=(
            "ServerWrapper - watches a server's console for trigger lines "
            "and runs scripts in response."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "module",
        metavar="MODULE",
        help="Python module of the server to run as __main__.",
    )
    parser.add_argument(
        "server_args",
        nargs=argparse.REMAINDER,
        metavar="SERVER_ARGS",
        help="Arguments passed through to the server module.",
    )
    parser.add_argument(
        "--config",
        default=os.getenv("SERVERWRAPPER_CONFIG", "wrapper.env"),
        metavar="PATH",
        help="Config file (KEY='value' lines). Default: wrapper.env",
    )
    parser.add_argument(
        "--script-dir",
        default=None,
        metavar="PATH",
        help="Directory containing scripts. Default: scripts",
    )
    parser.add_argument(
        "--input-regex",
        default=None,
        metavar="REGEX",
        help="Trigger for operator commands on stdin (1 capture group).",
    )
    parser.add_argument(
        "--output-regex",
        default=None,
        metavar="REGEX",
        help="Trigger for player commands in stdout (2 capture groups).",
    )
    parser.add_argument(
        "--encoding",
        default=None,
        metavar="NAME",
        help="Character encoding of stdin/stdout. Default: utf-8",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the Python logging level. Default: WARNING.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ServerWrapper {__version__}",
    )
    return parser


def configure_logging(level_str: str) -> None:
    """Set up logging to stderr, which is never intercepted."""
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level_str.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_config(args: argparse.Namespace) -> WrapperConfig:
    """Load the config file and apply CLI overrides on top."""
    return load_config(
        args.config,
        overrides={
            "script_directory": args.script_dir,
            "input_regex": args.input_regex,
            "output_regex": args.output_regex,
            "character_encoding": args.encoding,
        },
    )


def run_server(module: str, server_args: list) -> int:
    """Run *module* as __main__ and translate SystemExit into an exit code."""
    sys.argv = [module] + list(server_args)
    try:
        runpy.run_module(module, run_name="__main__", alter_sys=True)
    except SystemExit as exc:
        if exc.code is None:
            return 0
        if isinstance(exc.code, int):
            return exc.code
        print(exc.code, file=sys.stderr)
        return 1
    return 0


def main() -> int:
    """
    ServerWrapper entry point.

    Returns the exit code to pass to the OS.
    """
    load_dotenv(os.path.join(_PROJECT_ROOT, ".env"))

    parser = build_arg_parser()
    args = parser.parse_args()

    configure_logging(args.log_level)
    just_fix_windows_console()
    logger = logging.getLogger(__name__)

    logger.info("ServerWrapper %s starting", __version__)

    # ── Configuration errors stop us before any stream is touched ────────────
    try:
        config = build_config(args)
    except ConfigurationError as exc:
        print(f"{_TAG} {_ERROR}Configuration error: {exc}{_RESET}", file=sys.stderr)
        return 1

    logger.info(
        "Config: module=%s scripts=%s encoding=%s",
        args.module, config.script_directory, config.character_encoding,
    )
    _print_banner(args.module, config)

    runner = PythonScriptRunner(config.script_directory, config.script_extension)

    # ── Take over the standard streams and start the server ───────────────────
    try:
        with StandardStreams.install(config.character_encoding) as streams, \
                Console(config, streams.standard_input, streams.standard_output, runner):
            exit_code = run_server(args.module, args.server_args)
    except KeyboardInterrupt:
        exit_code = 130  # 128 + SIGINT
    except ImportError as exc:
        print(f"{_TAG} {_ERROR}Cannot run module '{args.module}': {exc}{_RESET}", file=sys.stderr)
        exit_code = 1

    logger.info("ServerWrapper exiting with code %d", exit_code)
    return exit_code


def _print_banner(module: str, config: WrapperConfig) -> None:
    banner = (
        f"{_INFO}{'─' * 60}{_RESET}\n"
        f"{_INFO}  ServerWrapper {__version__}{_RESET}\n"
        f"{_INFO}  Server module : {module}{_RESET}\n"
        f"{_INFO}  Scripts       : {config.script_directory}{_RESET}\n"
        f"{_INFO}{'─' * 60}{_RESET}"
    )
    print(banner, file=sys.stderr, flush=True)


if __name__ == "__main__":
    sys.exit(main())
