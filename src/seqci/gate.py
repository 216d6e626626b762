# gate.py
from __future__ import annotations

import os
import platform
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .errors import ConfigError

_VERSION_RE = re.compile(r"v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


@dataclass(frozen=True, order=True)
class RuntimeVersion:
    """major.minor.patch of the runtime the pipeline is gated on."""
    parts: Tuple[int, int, int]
    raw: str = field(default="", compare=False)

    @classmethod
    def parse(cls, raw: str) -> RuntimeVersion:
        """
        Accepts "4.2.1", "v0.11.2", "3.12.1rc1", "v20.1.0\\n".
        Missing minor/patch components count as 0.
        """
        m = _VERSION_RE.match(raw.strip())
        if not m:
            raise ConfigError(f"Cannot parse runtime version: {raw!r}")
        parts = tuple(int(p) if p is not None else 0 for p in m.groups())
        return cls(parts=parts, raw=raw.strip())

    def at_least(self, minimum: str | RuntimeVersion) -> bool:
        if isinstance(minimum, str):
            minimum = RuntimeVersion.parse(minimum)
        return self.parts >= minimum.parts

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.parts)


def host_runtime_version(
    runtime_command: Optional[Sequence[str]] = None,
    override: Optional[str] = None,
) -> RuntimeVersion:
    """
    Resolve the runtime version once, before the queue is assembled.

    Precedence: explicit override, SEQCI_RUNTIME_VERSION, output of
    runtime_command (e.g. ["node", "--version"]), the Python interpreter.
    """
    override = override or os.environ.get("SEQCI_RUNTIME_VERSION")
    if override:
        return RuntimeVersion.parse(override)

    if runtime_command:
        try:
            out = subprocess.check_output(list(runtime_command), text=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise ConfigError(
                f"Cannot determine runtime version via {' '.join(runtime_command)!r}: {e}"
            ) from e
        return RuntimeVersion.parse(out)

    return RuntimeVersion.parse(platform.python_version())


# ----------------------------------------------------------------------
# Gate decisions
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Feature:
    """
    An optional capability of the runtime.

    When enabled, `suite` is run directly by the test runner with
    `runner_flags`; conversions that declare `requires=<name>` only run
    while the feature is enabled.
    """
    name: str
    minimum_version: str
    suite: str
    runner_flags: Tuple[str, ...] = ("--harmony",)


@dataclass(frozen=True)
class GateDecision:
    version: RuntimeVersion
    enabled: Dict[str, bool]
    bundle_allowed: bool

    def is_enabled(self, feature: Optional[str]) -> bool:
        if feature is None:
            return True
        if feature not in self.enabled:
            raise ConfigError(f"Unknown feature: {feature!r}")
        return self.enabled[feature]


def evaluate_gates(
    version: RuntimeVersion,
    features: Iterable[Feature],
    bundle_excluded_versions: Iterable[str] = (),
) -> GateDecision:
    """Pure: compare version against every feature threshold."""
    enabled = {f.name: version.at_least(f.minimum_version) for f in features}
    excluded = {RuntimeVersion.parse(v).parts for v in bundle_excluded_versions}
    return GateDecision(
        version=version,
        enabled=enabled,
        bundle_allowed=version.parts not in excluded,
    )


def write_placeholder(path: str | Path) -> Path:
    """Synchronously create (or truncate to) an empty artifact at path."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("", encoding="utf-8")
    return p
