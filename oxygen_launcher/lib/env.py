from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

EXE_SUFFIX = ".exe" if sys.platform == "win32" else ""


def own_executable() -> Path:
    """Path of the launcher itself: the bundle when frozen, else the entry script."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve()
    return Path(sys.argv[0] or sys.executable).resolve()


@dataclass(frozen=True)
class Paths:
    install_root: Path

    @property
    def bin_dir(self) -> Path:
        return self.install_root / "bin"

    @property
    def cache_dir(self) -> Path:
        return self.install_root / "cache"

    @property
    def config_path(self) -> Path:
        return self.install_root / "oxygen.yaml"

    @property
    def log_path(self) -> Path:
        return self.install_root / "oxygen.log"

    def app_path(self, name: str) -> Path:
        return self.bin_dir / f"{name}{EXE_SUFFIX}"


def resolve_paths(install_root: Optional[Path] = None) -> Paths:
    """The launcher is colocated with the apps it manages."""
    root = install_root if install_root is not None else own_executable().parent
    return Paths(install_root=Path(root))
