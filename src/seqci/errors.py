# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .model import exit_status_for


TOOL_HINTS = {
    "mocha": "Install mocha (e.g., npm install mocha) or fix PATH.",
    "node": "Install Node.js or fix PATH.",
    "npm": "Install Node.js (includes npm) or fix PATH.",
    "browserify": "Install browserify (e.g., npm install browserify) to enable the bundle step.",
    "python3": "Install Python 3 or fix PATH (python3).",
}


def hint_for(command: str) -> str:
    tool = command.replace("\\", "/").rsplit("/", 1)[-1]
    if tool.endswith(".cmd"):
        tool = tool[: -len(".cmd")]
    return TOOL_HINTS.get(tool, f"Install {tool} or fix PATH.")


class ConfigError(Exception):
    """Invalid pipeline configuration, reported before any step runs."""


@dataclass
class StepFailure(Exception):
    """A step reported failure. Always fatal to the rest of the pipeline."""
    step: str
    code: Any

    @property
    def exit_status(self) -> int:
        return exit_status_for(self.code)

    def __str__(self) -> str:
        return f"step '{self.step}' failed (exit={self.exit_status}): {self.code}"


@dataclass
class ArtifactIOFailure(Exception):
    """Reading, writing or linking a pipeline artifact failed."""
    action: str
    path: str
    reason: str

    def __str__(self) -> str:
        return f"cannot {self.action} {self.path}: {self.reason}"


@dataclass
class CommandNotFound(Exception):
    command: str
    hint: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"command not found: {self.command}", f"hint={self.hint}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


@dataclass(frozen=True)
class MissingOptionalDependency:
    """
    An optional external tool could not be located.

    Not raised: the assembler records it as a warning and skips the step
    that needs the tool.
    """
    tool: str
    skipped: str
    hint: str = ""

    def __str__(self) -> str:
        msg = f"{self.tool} not installed; skipping {self.skipped}"
        if self.hint:
            msg += f" ({self.hint})"
        return msg


@dataclass
class SpawnFailure(Exception):
    """The OS refused to start a process for a reason other than a missing command."""
    command: str
    reason: str
    cwd: str = "."

    def __str__(self) -> str:
        return f"cannot start {self.command}: {self.reason} (cwd={self.cwd})"
