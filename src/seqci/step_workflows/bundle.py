# step_workflows/bundle.py
from __future__ import annotations

import asyncio
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..dsl import call
from ..errors import ArtifactIOFailure, StepFailure
from ..model import FunctionStep


@dataclass(frozen=True)
class BundlerHandle:
    """A located bundler executable: `<executable> <inputs...>` prints the bundle."""
    name: str
    executable: str

    async def bundle(self, inputs: Sequence[str | Path], output: str | Path) -> None:
        sys.stdout.flush()
        proc = await asyncio.create_subprocess_exec(
            self.executable,
            *[str(p) for p in inputs],
            stdout=subprocess.PIPE,
            stderr=None,
        )
        packed, _ = await proc.communicate()
        if proc.returncode != 0:
            raise StepFailure(step=f"bundle {output}", code=proc.returncode)

        out = Path(output)
        try:
            await asyncio.to_thread(out.write_bytes, packed)
        except OSError as e:
            raise ArtifactIOFailure(action="write", path=str(out), reason=e.strerror or str(e)) from e


def resolve_bundler(command: str, path: str | None = None) -> Optional[BundlerHandle]:
    """Locate the bundler once, at assembly time. None when it is not installed."""
    found = shutil.which(command, path=path)
    if found is None:
        return None
    return BundlerHandle(name=command, executable=found)


async def bundle(handle: BundlerHandle, inputs: Sequence[str | Path], output: str | Path) -> None:
    await handle.bundle(inputs, output)


def bundle_step(handle: BundlerHandle, inputs: Sequence[str | Path], output: str | Path) -> FunctionStep:
    return call(f"bundle {Path(output).name} ({handle.name})", bundle, handle, tuple(inputs), output)
