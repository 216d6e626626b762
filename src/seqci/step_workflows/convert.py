# step_workflows/convert.py
from __future__ import annotations

import asyncio
import importlib
from pathlib import Path
from typing import Callable, Sequence

from ..dsl import call
from ..errors import ArtifactIOFailure, ConfigError
from ..model import FunctionStep

# source text -> transformed text; may raise
Transform = Callable[..., str]


# ---------------------------------------------------------------------
# Transform resolution
# ---------------------------------------------------------------------

def load_transform(spec: str | Transform) -> Transform:
    """
    Resolve a transform from a "package.module:attribute" import path.
    Callables are returned unchanged.
    """
    if callable(spec):
        return spec

    module_name, sep, attr = str(spec).partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Transform must look like 'module:function', got: {spec!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import transform module {module_name!r}: {e}") from e

    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigError(f"{module_name!r} has no attribute {attr!r}") from e

    if not callable(obj):
        raise ConfigError(f"Transform {spec!r} is not callable")
    return obj


# ---------------------------------------------------------------------
# Conversion operations
# ---------------------------------------------------------------------

async def _read(path: Path) -> str:
    try:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as e:
        raise ArtifactIOFailure(action="read", path=str(path), reason=e.strerror or str(e)) from e


async def _write(path: Path, text: str) -> None:
    try:
        await asyncio.to_thread(path.write_text, text, encoding="utf-8")
    except OSError as e:
        raise ArtifactIOFailure(action="write", path=str(path), reason=e.strerror or str(e)) from e


async def convert(source: str | Path, target: str | Path, transform: Transform) -> None:
    """Read source, run it through transform, write the result to target."""
    text = await _read(Path(source))
    await _write(Path(target), await asyncio.to_thread(transform, text))


async def convert_with_passes(
    source: str | Path,
    target: str | Path,
    transform: Transform,
    passes: Sequence[str],
) -> None:
    """Same as convert(), with extra transform passes applied."""
    text = await _read(Path(source))
    await _write(Path(target), await asyncio.to_thread(transform, text, passes=list(passes)))


def convert_step(
    source: str | Path,
    target: str | Path,
    transform: Transform,
    passes: Sequence[str] = (),
) -> FunctionStep:
    if passes:
        return call(f"convert {source} -> {target} (+{','.join(passes)})",
                    convert_with_passes, source, target, transform, tuple(passes))
    return call(f"convert {source} -> {target}", convert, source, target, transform)
