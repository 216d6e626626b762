# config.py
from __future__ import annotations

import os
import runpy
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Mapping, Optional, Tuple, Union

from .errors import ConfigError
from .gate import Feature

DEFAULT_CONFIG_FILE = "seqci_config.py"


@dataclass(frozen=True)
class Conversion:
    """
    source -> target through the transform.

    passes:   extra transform passes (uses convert_with_passes)
    requires: feature name; while it is disabled the conversion is skipped
              and an empty target is written in its place
    """
    source: str
    target: str
    passes: Tuple[str, ...] = ()
    requires: Optional[str] = None


@dataclass(frozen=True)
class PipelineConfig:
    """
    Project layout and external commands.

    Relative paths are resolved against `root`. Process steps run with
    `root` as their working directory.
    """
    name: str = "regenerator"
    root: str = "."

    # transform callable, "package.module:function"
    transform: Union[str, Callable[..., str], None] = None

    # test runner
    test_runner: str = "mocha"
    reporter: str = "spec"
    setup_script: str = "./test/runtime.js"
    extra_test_files: Tuple[str, ...] = ("./test/tests.transform.js",)

    features: Tuple[Feature, ...] = (
        Feature(name="generators", minimum_version="0.11.2", suite="./test/tests.es6.js"),
        Feature(name="node4", minimum_version="4.0.0", suite="./test/tests-node4.es6.js"),
    )
    conversions: Tuple[Conversion, ...] = (
        Conversion("./test/tests.es6.js", "./test/tests.es5.js", requires="generators"),
        Conversion("./test/tests-node4.es6.js", "./test/tests-node4.es5.js", requires="node4"),
        Conversion("./test/non-native.js", "./test/non-native.es5.js"),
        Conversion("./test/async.js", "./test/async.es5.js"),
        Conversion("./test/regression.js", "./test/regression.es5.js", passes=("spread", "parameters")),
    )

    # runner static assets, symlinked into assets_dir
    runner_assets_dir: str = "node_modules/mocha"
    runner_assets: Tuple[str, ...] = ("mocha.js", "mocha.css")
    assets_dir: str = "./test"

    # optional bundler; None disables the step without a warning
    bundler: Optional[str] = "browserify"
    bundle_output: str = "./test/tests.browser.js"
    bundle_excluded_versions: Tuple[str, ...] = ("0.11.7",)

    # command-line tool checks
    cli_tool: str = "./bin/regenerator"
    cli_fixtures: Tuple[str, ...] = ("./test/async.es5.js", "./test/nothing-to-transform.js")

    # None -> version of the Python interpreter running seqci
    runtime_command: Optional[Tuple[str, ...]] = ("node", "--version")

    @property
    def root_path(self) -> Path:
        return Path(self.root).expanduser().resolve()

    def path(self, rel: str) -> Path:
        return self.root_path / rel


# ----------------------------------------------------------------------
# Loading (local file)
# ----------------------------------------------------------------------

def load_config(path: str | Path) -> PipelineConfig:
    """
    Load a pipeline config from a python file.

    The file must define either:
      - config() -> PipelineConfig
      - CONFIG = PipelineConfig(...)

    A config without an explicit root is rooted at the file's directory.
    """
    cfg_path = Path(path).expanduser().resolve()
    if not cfg_path.exists():
        raise ConfigError(f"Config file not found: {cfg_path}")
    if cfg_path.suffix != ".py":
        raise ConfigError(f"Config must be a .py file, got: {cfg_path.name}")

    module_name = f"seqci_config_{cfg_path.stem}"
    try:
        globals_dict = runpy.run_path(str(cfg_path), run_name=module_name)
    except Exception as e:
        raise ConfigError(f"Error while loading {cfg_path.name}: {e}") from e

    cfg = None
    if "config" in globals_dict and callable(globals_dict["config"]):
        cfg = globals_dict["config"]()
    elif "CONFIG" in globals_dict:
        cfg = globals_dict["CONFIG"]

    if not isinstance(cfg, PipelineConfig):
        raise ConfigError(
            "Config must return/define a PipelineConfig. "
            "Define config() -> PipelineConfig or CONFIG = PipelineConfig(...)."
        )

    if cfg.root == ".":
        cfg = replace(cfg, root=str(cfg_path.parent))
    return cfg


def discover_config(root: str | Path = ".") -> Optional[Path]:
    candidate = Path(root) / DEFAULT_CONFIG_FILE
    return candidate if candidate.exists() else None


def apply_env_overrides(cfg: PipelineConfig, environ: Mapping[str, str] | None = None) -> PipelineConfig:
    """
    SEQCI_TRANSFORM     transform import path
    SEQCI_TEST_RUNNER   test runner command
    SEQCI_BUNDLER       bundler command ("" disables bundling)
    """
    env = os.environ if environ is None else environ
    changes = {}
    if env.get("SEQCI_TRANSFORM"):
        changes["transform"] = env["SEQCI_TRANSFORM"]
    if env.get("SEQCI_TEST_RUNNER"):
        changes["test_runner"] = env["SEQCI_TEST_RUNNER"]
    if "SEQCI_BUNDLER" in env:
        changes["bundler"] = env["SEQCI_BUNDLER"] or None
    return replace(cfg, **changes) if changes else cfg
