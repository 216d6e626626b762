from __future__ import annotations

from typing import Sequence

from ..dsl import spawn
from ..model import ProcessStep


def runner_step(
    name: str,
    runner: str,
    files: Sequence[str],
    *,
    reporter: str,
    setup: str,
    flags: Sequence[str] = (),
    cwd: str | None = None,
) -> ProcessStep:
    """
    Turn a set of test files into one runner invocation:

        <runner> [flags] --reporter <reporter> --require <setup> <files...>

    Runner output is always visible.
    """
    if not files:
        raise ValueError(f"runner_step({name!r}) needs at least one test file")
    args = [*flags, "--reporter", reporter, "--require", setup, *files]
    return spawn(name, runner, *args, cwd=cwd)
