"""Console output for seqci runs: step progress on stdout, diagnostics on stderr."""

from __future__ import annotations

import sys
import traceback
from typing import Optional


class Console:
    """Everything seqci prints goes through here."""

    def __init__(self, debug: bool = False):
        """
        Args:
            debug: If True, print tracebacks and assembly details
        """
        self.debug = debug

    # ---- run lifecycle ----

    def print_header(self, title: str) -> None:
        print(f"\n{title}")
        print("-" * len(title))

    def print_run_started(
        self,
        project: str,
        config: str,
        runtime_version: str,
        step_count: int,
    ) -> None:
        print("\nRUN STARTED")
        print(f"Project: {project}")
        print(f"Config: {config}")
        print(f"Runtime: {runtime_version}")
        print(f"Steps: {step_count}")
        print()

    def print_step(self, name: str) -> None:
        print(f"STEP: {name}")

    def print_failure(
        self,
        name: str,
        reason: str,
        exit_code: Optional[int] = None,
        hint: Optional[str] = None,
        command: Optional[str] = None,
    ) -> None:
        """
        Print the diagnostic for the step that ended the run.

        Only the first line of reason is shown unless debug is on.
        """
        first, _, rest = (reason or "unknown error").partition("\n")
        print(f"STEP FAILED: {name}", file=sys.stderr)
        if command:
            print(f"  command: {command}", file=sys.stderr)
        print(f"process exited abnormally: {first}", file=sys.stderr)
        if exit_code is not None:
            print(f"Exit code: {exit_code}", file=sys.stderr)
        if hint:
            print(f"Hint: {hint}", file=sys.stderr)
        if self.debug and rest:
            print(f"Error details: {rest}", file=sys.stderr)

    def print_results(self, results: dict[str, str], not_run: int = 0) -> None:
        """Per-step outcome, then a one-line tally."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for step, status in results.items():
            print(f"  {step}: {'SUCCESS' if status == 'ok' else status.upper()}")
        passed = sum(1 for s in results.values() if s == "ok")
        tally = f"{passed} ok, {len(results) - passed} failed"
        if not_run:
            tally += f", {not_run} not run"
        print(tally)

    def print_interrupted(self) -> None:
        print("\nINTERRUPTED: run stopped by user", file=sys.stderr)

    # ---- assembly / plan ----

    def print_warning(self, message: str) -> None:
        print(f"WARNING: {message}", file=sys.stderr)

    def print_plan_step(self, name: str, kind: str) -> None:
        print(f"  {name} ({kind})")

    def print_plan_step_skipped(self, name: str, reason: str) -> None:
        print(f"  {name} (skipped: {reason})")

    def print_placeholder(self, path: str) -> None:
        print(f"PLACEHOLDER: {path}")

    def print_plan_end(self) -> None:
        print()

    # ---- errors outside any step ----

    def print_config_error(self, message: str, *, source: Optional[str] = None, suggestion: Optional[str] = None) -> None:
        where = f" ({source})" if source else ""
        print(f"\nCONFIG ERROR{where}: {message}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_crash(self, exc: BaseException) -> None:
        """Unexpected error while assembling or running; traceback only with --debug."""
        if self.debug:
            traceback.print_exception(type(exc), exc, exc.__traceback__)
            return
        print(f"seqci: {type(exc).__name__}: {exc}", file=sys.stderr)
        print("(rerun with --debug for a traceback)", file=sys.stderr)

    def print_debug(self, message: str) -> None:
        if self.debug:
            print(f"[debug] {message}", file=sys.stderr)


# Installed by the CLI group; library callers get a non-debug default.
_console: Optional[Console] = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    global _console
    _console = console
