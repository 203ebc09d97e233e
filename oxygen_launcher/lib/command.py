from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)

# subprocess.CREATE_NO_WINDOW only exists on Windows builds of Python.
CREATE_NO_WINDOW = 0x0800_0000


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class SpawnError(OSError):
    """The program could not be started at all (missing, not executable...)."""

    def __init__(self, argv: Sequence[str], cause: OSError):
        super().__init__(f"Failed to spawn {fmt_argv(argv)}: {cause}")
        self.argv = list(argv)
        self.cause = cause


class CommandFailed(RuntimeError):
    def __init__(self, result: CmdResult):
        detail = f"\n{result.stderr.strip()}" if result.stderr.strip() else ""
        super().__init__(f"Command failed ({result.returncode}): {fmt_argv(result.argv)}{detail}")
        self.result = result


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


class CmdHandle:
    """A spawned child that has not been waited on yet."""

    def __init__(self, argv: list[str], proc: subprocess.Popen):
        self.argv = argv
        self._proc = proc

    @property
    def pid(self) -> int:
        return self._proc.pid

    def wait(self) -> CmdResult:
        stdout, stderr = self._proc.communicate()
        result = CmdResult(
            argv=self.argv,
            returncode=self._proc.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )
        if result.stdout:
            logger.debug("STDOUT %s", result.stdout.strip())
        if result.stderr:
            logger.debug("STDERR %s", result.stderr.strip())
        logger.debug("EXIT %s -> %s", fmt_argv(self.argv), result.returncode)
        return result


def spawn_cmd(
    argv: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    capture: bool = False,
    hide_window: bool = False,
) -> CmdHandle:
    """Start a command and return immediately.

    - Always logs the command.
    - hide_window keeps the child from getting a visible terminal (Windows only).
    - A program that cannot be started raises SpawnError.
    """

    argv_list = [str(a) for a in argv]
    logger.info("CMD %s", fmt_argv(argv_list))

    kwargs = {}
    if hide_window and sys.platform == "win32":
        kwargs["creationflags"] = CREATE_NO_WINDOW
    if capture:
        kwargs.update(stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)

    try:
        proc = subprocess.Popen(
            argv_list,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
            **kwargs,
        )
    except OSError as e:
        raise SpawnError(argv_list, e) from e

    return CmdHandle(argv_list, proc)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = False,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    capture: bool = False,
    hide_window: bool = False,
) -> CmdResult:
    """Run a command to completion with consistent logging.

    Output goes straight to the launcher console unless capture is set, so the
    user can follow long installs.
    """

    result = spawn_cmd(argv, cwd=cwd, env=env, capture=capture, hide_window=hide_window).wait()
    if check and not result.ok:
        raise CommandFailed(result)
    return result
