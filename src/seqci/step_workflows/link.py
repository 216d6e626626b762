# step_workflows/link.py
from __future__ import annotations

import os
from pathlib import Path

from ..dsl import call
from ..errors import ArtifactIOFailure
from ..model import FunctionStep


async def link(source: str | Path, destination: str | Path) -> None:
    """
    Make destination a symlink to source.

    A missing destination is fine; a stale one (link or file) is replaced.
    """
    src = Path(source)
    dst = Path(destination)

    try:
        dst.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise ArtifactIOFailure(action="remove", path=str(dst), reason=e.strerror or str(e)) from e

    try:
        os.symlink(src, dst)
    except OSError as e:
        raise ArtifactIOFailure(action="link", path=f"{dst} -> {src}", reason=e.strerror or str(e)) from e


def link_step(source: str | Path, destination: str | Path) -> FunctionStep:
    return call(f"link {Path(destination).name}", link, source, destination)
