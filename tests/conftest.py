from pathlib import Path

import pytest

from oxygen_launcher.config import LauncherConfig
from oxygen_launcher.lib.command import CmdResult, SpawnError
from oxygen_launcher.lib.env import Paths
from oxygen_launcher.pipeline import LaunchCtx


class FakeHandle:
    def __init__(self, argv, returncode):
        self.argv = argv
        self.returncode = returncode

    def wait(self):
        return CmdResult(argv=self.argv, returncode=self.returncode)


class FakeSpawner:
    """Stands in for spawn_cmd; classifies every call as update/install/run."""

    def __init__(self, returncodes=None, missing=()):
        self.returncodes = dict(returncodes or {})
        self.missing = set(missing)
        self.calls = []
        self.kwargs = []

    @staticmethod
    def kind(argv):
        if argv[0] == "rustup":
            return "update"
        if argv[0] == "cargo":
            return "install"
        return "run"

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        kind = self.kind(argv)
        self.calls.append(kind)
        self.kwargs.append(kwargs)
        if kind in self.missing:
            raise SpawnError(argv, FileNotFoundError(2, "No such file or directory"))
        return FakeHandle(argv, self.returncodes.get(kind, 0))


class FakeConsole:
    def __init__(self, fail=()):
        self.attached = True
        self.ops = []
        self.fail = set(fail)

    def _op(self, name, attached):
        self.ops.append(name)
        if name in self.fail:
            from oxygen_launcher.errors import ConsoleError

            raise ConsoleError(f"{name} failed")
        self.attached = attached

    def suppress_own_console(self):
        self._op("suppress", False)

    def free_console(self):
        self._op("free", False)

    def allocate_console(self):
        self._op("allocate", True)


@pytest.fixture
def install_root(tmp_path) -> Path:
    root = tmp_path / "oxygen"
    (root / "bin").mkdir(parents=True)
    return root


@pytest.fixture
def write_manifest(tmp_path):
    def _write(text="name: demo\npath:\n  registry: demo-pkg\nfeatures: default\n", filename="demo.o2"):
        p = tmp_path / filename
        p.write_text(text, encoding="utf-8")
        return p

    return _write


@pytest.fixture
def make_ctx(install_root):
    def _make(spawner=None, console=None, config=None):
        return LaunchCtx(
            paths=Paths(install_root=install_root),
            config=config or LauncherConfig(),
            console=console or FakeConsole(),
            spawn=spawner or FakeSpawner(),
        )

    return _make
