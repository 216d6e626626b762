# runner.py
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Optional

from .errors import CommandNotFound, StepFailure
from .executor import execute_step
from .model import CompletionResult, Err, ProcessStep, Step
from .step_queue import StepQueue
from .ui.console import Console, get_console


class Orchestrator:
    """
    Drains a StepQueue one step at a time.

    Every step reports to handle_completion(). The first Err ends the run;
    on Ok the orchestrator yields to the event loop before dequeuing the next
    step, so stack depth stays flat and pending I/O gets flushed.
    """

    def __init__(
        self,
        queue: StepQueue,
        *,
        console: Optional[Console] = None,
        execute: Callable[[Step], Awaitable[CompletionResult]] = execute_step,
    ):
        self.queue = queue
        self.console = console or get_console()
        self.execute = execute
        self.results: Dict[str, str] = {}

    def handle_completion(self, step: Step, result: CompletionResult) -> None:
        """Raise StepFailure for an Err, record success otherwise."""
        if isinstance(result, Err):
            self.results[step.name] = "failed"
            hint = result.code.hint if isinstance(result.code, CommandNotFound) else None
            self.console.print_failure(
                step.name,
                str(result.code),
                exit_code=result.exit_status,
                hint=hint,
                command=step.cmdline if isinstance(step, ProcessStep) else None,
            )
            raise StepFailure(step=step.name, code=result.code)
        self.results[step.name] = "ok"

    async def drain(self) -> None:
        while True:
            step = self.queue.dequeue_next()
            if step is None:
                return
            self.console.print_step(step.name)
            result = await self.execute(step)
            self.handle_completion(step, result)
            await asyncio.sleep(0)

    async def run(self) -> int:
        """Drain the queue and return the process exit status."""
        try:
            await self.drain()
        except StepFailure as e:
            self.console.print_debug(f"aborting with {len(self.queue)} step(s) left in queue")
            return e.exit_status
        return 0


def run_queue(queue: StepQueue, *, console: Optional[Console] = None) -> int:
    """Synchronous entry point: run every step in queue, return the exit status."""
    orchestrator = Orchestrator(queue, console=console)
    status = asyncio.run(orchestrator.run())
    orchestrator.console.print_results(orchestrator.results, not_run=len(queue))
    return status
