# cli.py
from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import click

from seqci.config import PipelineConfig, apply_env_overrides, discover_config, load_config
from seqci.errors import ConfigError
from seqci.gate import evaluate_gates, host_runtime_version
from seqci.model import ProcessStep
from seqci.pipeline import Plan, assemble, plan_pipeline
from seqci.runner import run_queue
from seqci.step_workflows.bundle import resolve_bundler
from seqci.ui.console import Console, get_console, set_console


def resolve_config(config_arg: str | None, root_arg: str | None) -> tuple[PipelineConfig, str]:
    """
    Load the config from --config, or seqci_config.py in the root, or defaults.

    Returns:
        (config, label) where label names the config source for the header.
    """
    console = get_console()

    if config_arg:
        config_path = Path(config_arg)
        if not config_path.exists() and config_path.suffix != ".py":
            config_path = Path(str(config_path) + ".py")
        if not config_path.exists():
            console.print_config_error(
                f"config file not found: {config_arg}",
                suggestion="Create a config file or specify a different path:\n  seqci run --config seqci_config.py",
            )
            sys.exit(1)
        cfg = load_config(config_path)
        label = config_path.name
    else:
        found = discover_config(root_arg or ".")
        if found is not None:
            cfg = load_config(found)
            label = found.name
        else:
            cfg = PipelineConfig()
            label = "(defaults)"

    if root_arg:
        cfg = replace(cfg, root=root_arg)
    return apply_env_overrides(cfg), label


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """seqci: sequential, fail-fast test/build orchestrator."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--config", "config_file", default=None, help="Config file path (defaults to seqci_config.py if present)")
@click.option("--root", default=None, help="Project root (overrides the config)")
@click.option("--runtime-version", default=None, help="Gate on this version instead of probing the runtime")
@click.option("--print-plan/--no-print-plan", default=True, show_default=True, help="Print selected/skipped steps")
@click.pass_context
def run(ctx, config_file, root, runtime_version, print_plan):
    """Assemble the step queue and run it, stopping at the first failure."""
    console = get_console()
    label = None

    try:
        cfg, label = resolve_config(config_file, root)
        version = host_runtime_version(cfg.runtime_command, override=runtime_version)
        pipeline = assemble(cfg, version, console=console)

        console.print_run_started(
            project=cfg.name,
            config=label,
            runtime_version=str(pipeline.gates.version),
            step_count=len(pipeline.queue),
        )
        if print_plan:
            _print_plan(console, pipeline.plan)

        status = run_queue(pipeline.queue, console=console)
    except KeyboardInterrupt:
        console.print_interrupted()
        sys.exit(130)
    except ConfigError as e:
        console.print_config_error(str(e), source=label)
        sys.exit(1)
    except Exception as e:
        console.print_crash(e)
        sys.exit(1)

    sys.exit(status)


@cli.command()
@click.option("--config", "config_file", default=None, help="Config file path (defaults to seqci_config.py if present)")
@click.option("--root", default=None, help="Project root (overrides the config)")
@click.option("--runtime-version", default=None, help="Gate on this version instead of probing the runtime")
@click.pass_context
def plan(ctx, config_file, root, runtime_version):
    """Print the gated step list without writing or running anything."""
    console = get_console()
    label = None

    try:
        cfg, label = resolve_config(config_file, root)
        version = host_runtime_version(cfg.runtime_command, override=runtime_version)
        gates = evaluate_gates(version, cfg.features, cfg.bundle_excluded_versions)
        bundler = resolve_bundler(cfg.bundler) if cfg.bundler else None
        result = plan_pipeline(cfg, gates, bundler)
    except ConfigError as e:
        console.print_config_error(str(e), source=label)
        sys.exit(1)
    except Exception as e:
        console.print_crash(e)
        sys.exit(1)

    console.print_header(f"PLAN {cfg.name} ({label}, runtime {version})")
    _print_plan(console, result)
    for missing in result.warnings:
        console.print_warning(str(missing))


def _print_plan(console: Console, plan: Plan) -> None:
    for i, step in enumerate(plan.steps, start=1):
        kind = "process" if isinstance(step, ProcessStep) else "function"
        console.print_plan_step(f"{i:>2}. {step.name}", kind)
    for name, reason in plan.skipped:
        console.print_plan_step_skipped(name, reason)
    for path in plan.placeholders:
        console.print_placeholder(str(path))
    console.print_plan_end()


if __name__ == "__main__":
    cli()
