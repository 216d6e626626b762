# executor.py
from __future__ import annotations

import asyncio
import subprocess
import sys
from pathlib import Path

from .errors import CommandNotFound, SpawnFailure, StepFailure, hint_for
from .model import CompletionResult, Err, FunctionStep, Ok, ProcessStep, Step


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

async def _run_function(step: FunctionStep) -> CompletionResult:
    try:
        await step.operation(*step.args)
    except StepFailure as e:
        # operation wrapped a process; surface its exit code
        return Err(e.code)
    except Exception as e:
        return Err(e)
    return Ok()


async def _run_process(step: ProcessStep) -> CompletionResult:
    cwd = step.cwd or "."
    if not Path(cwd).is_dir():
        return Err(SpawnFailure(command=step.command, reason="working directory does not exist", cwd=cwd))

    # our own buffered output must land before the child's
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        proc = await asyncio.create_subprocess_exec(
            step.command,
            *step.args,
            cwd=step.cwd,
            stdin=None,
            stdout=subprocess.DEVNULL if step.quiet else None,
            stderr=None,
        )
    except (FileNotFoundError, PermissionError) as e:
        return Err(CommandNotFound(
            command=step.command,
            hint=hint_for(step.command),
            details={"reason": e.strerror or str(e), "cwd": cwd},
        ))
    except OSError as e:
        # e.g. ENOEXEC for a script without a shebang
        return Err(SpawnFailure(command=step.command, reason=e.strerror or str(e), cwd=cwd))

    code = await proc.wait()
    if code != 0:
        return Err(code)
    return Ok()


async def execute_step(step: Step) -> CompletionResult:
    """
    Perform one step and produce exactly one completion result.

    Function steps succeed by returning and fail by raising; the exception
    becomes the Err code. Process steps complete on exit with their exit code.
    """
    if isinstance(step, FunctionStep):
        return await _run_function(step)
    if isinstance(step, ProcessStep):
        return await _run_process(step)
    raise TypeError(f"Unknown step type: {type(step).__name__}")
