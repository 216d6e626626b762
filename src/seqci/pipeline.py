# pipeline.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .config import PipelineConfig
from .dsl import platform_command
from .errors import ConfigError, MissingOptionalDependency, hint_for
from .gate import GateDecision, RuntimeVersion, evaluate_gates, write_placeholder
from .model import Step
from .step_queue import StepQueue
from .step_workflows.bundle import BundlerHandle, bundle_step, resolve_bundler
from .step_workflows.cli_checks import cli_checks
from .step_workflows.convert import convert_step, load_transform
from .step_workflows.link import link_step
from .step_workflows.test import runner_step
from .ui.console import Console, get_console


@dataclass
class Plan:
    """
    Ordered steps plus everything decided along the way.

    placeholders are paths that must exist (empty) before the queue runs.
    """
    steps: List[Step] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    placeholders: List[Path] = field(default_factory=list)
    warnings: List[MissingOptionalDependency] = field(default_factory=list)


@dataclass
class Pipeline:
    queue: StepQueue
    plan: Plan
    gates: GateDecision


# ----------------------------------------------------------------------
# Planning (no side effects)
# ----------------------------------------------------------------------

def plan_pipeline(
    cfg: PipelineConfig,
    gates: GateDecision,
    bundler: Optional[BundlerHandle],
) -> Plan:
    """
    Compose gate decisions with the baseline step list.

    Order: modern suites, conversions, runner asset links, bundle,
    final test run, CLI checks.
    """
    plan = Plan()
    cwd = str(cfg.root_path)
    runner = platform_command(cfg.test_runner)

    # ---- modern suites ----
    for feature in cfg.features:
        if gates.is_enabled(feature.name):
            plan.steps.append(runner_step(
                f"test {feature.suite}",
                runner,
                [feature.suite],
                reporter=cfg.reporter,
                setup=cfg.setup_script,
                flags=feature.runner_flags,
                cwd=cwd,
            ))
        else:
            plan.skipped.append((
                f"test {feature.suite}",
                f"{feature.name} needs runtime >= {feature.minimum_version}, have {gates.version}",
            ))

    # ---- conversions ----
    if cfg.conversions:
        if cfg.transform is None:
            raise ConfigError("No transform configured (set PipelineConfig.transform or SEQCI_TRANSFORM)")
        transform = load_transform(cfg.transform)

    for conv in cfg.conversions:
        if gates.is_enabled(conv.requires):
            plan.steps.append(convert_step(
                cfg.path(conv.source), cfg.path(conv.target), transform, conv.passes,
            ))
        else:
            # later steps still read the target
            plan.placeholders.append(cfg.path(conv.target))
            plan.skipped.append((
                f"convert {conv.source} -> {conv.target}",
                f"{conv.requires} disabled; empty placeholder written",
            ))

    # ---- runner static assets ----
    for asset in cfg.runner_assets:
        plan.steps.append(link_step(
            cfg.path(cfg.runner_assets_dir) / asset,
            cfg.path(cfg.assets_dir) / asset,
        ))

    # ---- bundle (tolerated when missing) ----
    if cfg.bundler is not None:
        if not gates.bundle_allowed:
            plan.skipped.append((f"bundle {cfg.bundle_output}", f"bundling disabled on runtime {gates.version}"))
        elif bundler is None:
            missing = MissingOptionalDependency(
                tool=cfg.bundler,
                skipped="bundle step",
                hint=hint_for(cfg.bundler),
            )
            plan.warnings.append(missing)
            plan.skipped.append((f"bundle {cfg.bundle_output}", str(missing)))
        else:
            inputs = [cfg.path(cfg.setup_script), *(cfg.path(c.target) for c in cfg.conversions)]
            plan.steps.append(bundle_step(bundler, inputs, cfg.path(cfg.bundle_output)))

    # ---- full test run over converted output ----
    files = [c.target for c in cfg.conversions] + list(cfg.extra_test_files)
    if files:
        plan.steps.append(runner_step(
            "test converted",
            runner,
            files,
            reporter=cfg.reporter,
            setup=cfg.setup_script,
            cwd=cwd,
        ))

    # ---- command-line tool ----
    plan.steps.extend(cli_checks(platform_command(cfg.cli_tool), cfg.cli_fixtures, cwd=cwd))

    return plan


# ----------------------------------------------------------------------
# Assembly
# ----------------------------------------------------------------------

def assemble(
    cfg: PipelineConfig,
    version: RuntimeVersion,
    *,
    bundler: Optional[BundlerHandle] = None,
    resolve: bool = True,
    console: Optional[Console] = None,
) -> Pipeline:
    """
    Build the queue once, before anything runs.

    With resolve=True the bundler is looked up on PATH when none is given.
    Placeholders for gated-off conversions are written here, synchronously.
    """
    console = console or get_console()

    gates = evaluate_gates(version, cfg.features, cfg.bundle_excluded_versions)
    if bundler is None and resolve and cfg.bundler is not None:
        bundler = resolve_bundler(cfg.bundler)

    plan = plan_pipeline(cfg, gates, bundler)

    for missing in plan.warnings:
        console.print_warning(str(missing))

    for path in plan.placeholders:
        write_placeholder(path)
        console.print_debug(f"placeholder written: {path}")

    return Pipeline(queue=StepQueue(plan.steps), plan=plan, gates=gates)
