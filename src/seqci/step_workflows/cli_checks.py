# step_workflows/cli_checks.py
from __future__ import annotations

from typing import List, Sequence, Tuple

from ..dsl import spawn
from ..model import ProcessStep

# Every combination of the CLI tool's capability toggles, including none.
CLI_FLAG_COMBINATIONS: Tuple[Tuple[str, ...], ...] = (
    (),
    ("--include-runtime",),
    ("--disable-async",),
    ("--include-runtime", "--disable-async"),
)


def cli_checks(
    tool: str,
    fixtures: Sequence[str],
    *,
    combinations: Sequence[Sequence[str]] = CLI_FLAG_COMBINATIONS,
    cwd: str | None = None,
) -> List[ProcessStep]:
    """
    Run the command-line tool on each fixture with each flag combination.
    Only the exit code matters, so stdout is discarded.
    """
    steps: List[ProcessStep] = []
    for fixture in fixtures:
        for flags in combinations:
            label = " ".join([*flags, fixture])
            steps.append(spawn(f"cli {label}", tool, *flags, fixture, quiet=True, cwd=cwd))
    return steps
