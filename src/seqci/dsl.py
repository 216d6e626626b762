# dsl.py
from __future__ import annotations

import sys
from pathlib import PureWindowsPath
from typing import Any, Awaitable, Callable

from .model import FunctionStep, ProcessStep


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def call(name: str, operation: Callable[..., Awaitable[Any]], *args: Any) -> FunctionStep:
    """Create an in-process step: await operation(*args)."""
    return FunctionStep(name=name, operation=operation, args=tuple(args))


def spawn(
    name: str,
    command: str,
    *args: str,
    quiet: bool = False,
    cwd: str | None = None,
) -> ProcessStep:
    """Create an external process step."""
    return ProcessStep(name=name, command=command, args=tuple(args), quiet=quiet, cwd=cwd)


# ---------------------------------------------------------------------
# Platform command names
# ---------------------------------------------------------------------

def platform_command(command: str, platform: str | None = None) -> str:
    """
    Windows installs node-style executables as .cmd shims.

        platform_command("./bin/regenerator", "win32") -> "bin\\regenerator.cmd"
    """
    platform = platform or sys.platform
    if platform != "win32" or command.endswith(".cmd"):
        return command
    return str(PureWindowsPath(command)) + ".cmd"
