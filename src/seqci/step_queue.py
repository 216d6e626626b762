# step_queue.py
from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional

from .model import Step


class StepQueue:
    """
    Ordered, destructively consumed list of steps.

    Steps come out in exactly the order they were appended. The queue never
    reorders, parallelizes or retries entries.
    """

    def __init__(self, steps: Iterable[Step] = ()):
        self._steps: Deque[Step] = deque(steps)

    def enqueue(self, step: Step) -> None:
        self._steps.append(step)

    def extend(self, steps: Iterable[Step]) -> None:
        for step in steps:
            self.enqueue(step)

    def dequeue_next(self) -> Optional[Step]:
        """Remove and return the head, or None when the queue is empty."""
        if not self._steps:
            return None
        return self._steps.popleft()

    def snapshot(self) -> List[Step]:
        """Non-destructive copy of the remaining steps, head first."""
        return list(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __bool__(self) -> bool:
        return bool(self._steps)
