from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .errors import ConfigError

# Fixed cargo overrides: every managed app is built for this machine, fully optimized.
DEFAULT_INSTALL_OVERRIDES = [
    'rustflags = ["-C", "target-cpu=native", "-C", "link-arg=-fuse-ld=lld"]',
    'profile.release.lto = "thin"',
    "profile.release.opt-level = 3",
    "profile.release.debug = false",
    "profile.release.debug-assertions = false",
    "profile.release.overflow-checks = false",
    'profile.release.strip = "symbols"',
    "profile.release.codegen-units = 1",
]


@dataclass(frozen=True)
class LauncherConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def toolchain_command(self) -> List[str]:
        cmd = (self.raw.get("toolchain") or {}).get("command")
        return [str(a) for a in cmd] if cmd else ["rustup", "update"]

    @property
    def installer_program(self) -> str:
        return str(((self.raw.get("installer") or {}).get("program")) or "cargo")

    @property
    def install_overrides(self) -> List[str]:
        overrides = (self.raw.get("installer") or {}).get("overrides")
        if overrides is None:
            return list(DEFAULT_INSTALL_OVERRIDES)
        return [str(o) for o in overrides]

    @property
    def persistent_console(self) -> bool:
        return bool((self.raw.get("console") or {}).get("persistent", False))

    @property
    def log_path(self) -> str | None:
        value = (self.raw.get("logging") or {}).get("path")
        return str(value) if value else None

    @property
    def debug(self) -> bool:
        return bool((self.raw.get("logging") or {}).get("debug", False))


def load_config(path: Path) -> LauncherConfig:
    """Load the optional launcher config; a missing file means defaults."""

    p = Path(path)
    if not p.exists():
        return LauncherConfig()

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read launcher config at '{p}'\n{e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Launcher config must contain a mapping/object: {p}")

    for section in ("toolchain", "installer", "console", "logging"):
        if raw.get(section) is not None and not isinstance(raw[section], dict):
            raise ConfigError(f"Launcher config section '{section}' must be a mapping: {p}")

    return LauncherConfig(raw=raw)
