"""
script_engine - ServerWrapper's pluggable script execution layer.

Public API:
    ScriptRunner       : Abstract base - subclass this to add a new runtime.
    ScriptError        : The one exception type runners raise.
    PythonScriptRunner : Runs Python scripts from a script directory.
"""

from .base import ScriptError, ScriptRunner
from .python_runner import PythonScriptRunner

__all__ = [
    "PythonScriptRunner",
    "ScriptError",
    "ScriptRunner",
]
