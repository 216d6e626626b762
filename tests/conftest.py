# tests/conftest.py
"""
Shared fixtures for seqci tests.

Fake external tools are tiny Python programs behind a /bin/sh wrapper, so
they can be used anywhere a command name is expected. Each one appends its
argv to calls.log in its working directory, which lets tests assert which
processes ran and in what order.
"""
from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from seqci.config import Conversion, PipelineConfig
from seqci.gate import Feature
from seqci.ui.console import Console, set_console

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake tools are sh scripts")


_RECORDING_TOOL = """\
import os, sys
with open(os.path.join(os.getcwd(), "calls.log"), "a") as f:
    f.write({tag!r} + " " + " ".join(sys.argv[1:]) + "\\n")
missing = [a for a in sys.argv[1:] if a.endswith(".js") and not os.path.exists(a)]
sys.exit({code} if not missing else 4)
"""

_BUNDLER = """\
import sys
for name in sys.argv[1:]:
    with open(name) as f:
        sys.stdout.write("/* " + name + " */\\n" + f.read())
"""


def make_tool(directory: Path, name: str, source: str) -> Path:
    """Write source as <name>.py plus an executable <name> wrapper."""
    directory.mkdir(parents=True, exist_ok=True)
    script = directory / f"{name}.py"
    script.write_text(source, encoding="utf-8")
    wrapper = directory / name
    wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n', encoding="utf-8")
    wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return wrapper


def recording_tool(directory: Path, name: str, tag: str | None = None, code: int = 0) -> Path:
    return make_tool(directory, name, _RECORDING_TOOL.format(tag=tag or name, code=code))


def read_calls(root: Path) -> list[str]:
    log = root / "calls.log"
    if not log.exists():
        return []
    return log.read_text(encoding="utf-8").splitlines()


def upper_transform(source: str, passes=()) -> str:
    out = source.upper()
    for p in passes:
        out += f"// pass: {p}\n"
    return out


@pytest.fixture(autouse=True)
def console():
    """Fresh non-debug console for every test."""
    c = Console(debug=False)
    set_console(c)
    return c


@pytest.fixture
def project(tmp_path) -> Path:
    """A checkout laid out like the default PipelineConfig expects."""
    test_dir = tmp_path / "test"
    test_dir.mkdir()
    for name in [
        "runtime.js",
        "tests.es6.js",
        "tests-node4.es6.js",
        "non-native.js",
        "async.js",
        "regression.js",
        "tests.transform.js",
        "nothing-to-transform.js",
    ]:
        (test_dir / name).write_text(f"// {name}\nvar x = 1;\n", encoding="utf-8")

    assets = tmp_path / "node_modules" / "mocha"
    assets.mkdir(parents=True)
    (assets / "mocha.js").write_text("// mocha\n", encoding="utf-8")
    (assets / "mocha.css").write_text("/* mocha */\n", encoding="utf-8")
    return tmp_path.resolve()


@pytest.fixture
def tools(tmp_path) -> dict:
    bin_dir = tmp_path / "tools"
    return {
        "runner": recording_tool(bin_dir, "mocha"),
        "cli": recording_tool(bin_dir, "regenerator"),
        "bundler": make_tool(bin_dir, "browserify", _BUNDLER),
    }


@pytest.fixture
def project_config(project, tools) -> PipelineConfig:
    return PipelineConfig(
        name="fixture",
        root=str(project),
        transform=upper_transform,
        test_runner=str(tools["runner"]),
        cli_tool=str(tools["cli"]),
        bundler=str(tools["bundler"]),
        features=(
            Feature("generators", minimum_version="0.11.2", suite="./test/tests.es6.js"),
            Feature("node4", minimum_version="4.0.0", suite="./test/tests-node4.es6.js"),
        ),
        conversions=(
            Conversion("./test/tests.es6.js", "./test/tests.es5.js", requires="generators"),
            Conversion("./test/tests-node4.es6.js", "./test/tests-node4.es5.js", requires="node4"),
            Conversion("./test/non-native.js", "./test/non-native.es5.js"),
            Conversion("./test/async.js", "./test/async.es5.js"),
            Conversion("./test/regression.js", "./test/regression.es5.js", passes=("spread", "parameters")),
        ),
        runtime_command=None,
    )
