from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from .config import LauncherConfig
from .errors import ConsoleError, LauncherError
from .lib.command import CmdHandle, CmdResult, spawn_cmd
from .lib.console import ConsoleController, NullConsole
from .lib.env import Paths
from .lib.manifests import Manifest
from .report import LaunchReport

logger = logging.getLogger(__name__)

ERROR_BANNER = "Oxygen encountered an error!"


@dataclass(frozen=True)
class LaunchCtx:
    paths: Paths
    config: LauncherConfig = field(default_factory=LauncherConfig)
    console: ConsoleController = field(default_factory=NullConsole)
    spawn: Callable[..., CmdHandle] = spawn_cmd
    manifest: Optional[Manifest] = None

    def run(self, argv, **kwargs) -> CmdResult:
        """Fire-and-wait through the injectable spawner."""
        return self.spawn(argv, **kwargs).wait()


class Phase(Protocol):
    """A single best-effort phase."""

    phase_id: str

    def run(self, ctx: LaunchCtx) -> None:
        ...


def report_failure(report: LaunchReport, phase_id: str, message: str) -> None:
    logger.error("%s\n%s", ERROR_BANNER, message)
    report.record_failure(phase_id, message)


def run_phase(phase: Phase, ctx: LaunchCtx, report: LaunchReport) -> bool:
    """Run one phase; any failure is recorded and never propagates.

    Returns True when the phase succeeded.
    """

    logger.debug("Running phase %s", phase.phase_id)
    report.record_ran(phase.phase_id)
    try:
        phase.run(ctx)
    except LauncherError as e:
        report_failure(report, phase.phase_id, str(e))
        return False
    except Exception as e:
        # Bugs still must not close the window on the user.
        logger.exception("Unexpected failure in phase %s", phase.phase_id)
        report_failure(report, phase.phase_id, f"Unexpected error: {e}")
        return False
    return True


def run_console_op(op: Callable[[], None], report: LaunchReport) -> bool:
    """Console visibility changes are best-effort."""

    try:
        op()
    except ConsoleError as e:
        report_failure(report, "console", str(e))
        return False
    return True
