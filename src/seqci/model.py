# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Tuple, Union

# Status returned for an error value that is not a process exit code.
GENERIC_FAILURE_STATUS = -1


@dataclass(frozen=True)
class FunctionStep:
    """An in-process async operation with its bound arguments."""
    name: str
    operation: Callable[..., Awaitable[Any]]
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ProcessStep:
    """
    An external process invocation.

    quiet=True discards the process stdout; stderr is always passed through.
    """
    name: str
    command: str
    args: Tuple[str, ...] = ()
    quiet: bool = False
    cwd: str | None = None

    @property
    def cmdline(self) -> str:
        return " ".join([self.command, *self.args])


Step = Union[FunctionStep, ProcessStep]


@dataclass(frozen=True)
class Ok:
    """Completion of a step that succeeded."""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """
    Completion of a step that failed.

    code is either a process exit code or the error value raised by a
    function step.
    """
    code: Any = field(default=None)

    @property
    def ok(self) -> bool:
        return False

    @property
    def exit_status(self) -> int:
        return exit_status_for(self.code)


CompletionResult = Union[Ok, Err]


def exit_status_for(code: Any) -> int:
    """Numeric codes pass through; anything else maps to GENERIC_FAILURE_STATUS."""
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return GENERIC_FAILURE_STATUS
