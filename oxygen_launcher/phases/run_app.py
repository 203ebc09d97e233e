from __future__ import annotations

import logging

from ..errors import RunError
from ..lib.command import SpawnError
from ..pipeline import LaunchCtx

logger = logging.getLogger(__name__)


class RunAppPhase:
    phase_id = "run"

    def run(self, ctx: LaunchCtx) -> None:
        if ctx.manifest is None:
            raise RunError("No manifest loaded; nothing to run")

        # No existence re-check here: a vanished binary surfaces as a spawn failure.
        app = ctx.paths.app_path(ctx.manifest.name)
        logger.info("Spawning Application...")

        try:
            handle = ctx.spawn([str(app)], hide_window=True)
        except SpawnError as e:
            raise RunError(f"Failed to spawn {app}\n{e.cause}") from e

        result = handle.wait()
        if not result.ok:
            raise RunError(f"{ctx.manifest.name} exited abnormally (exit status {result.returncode})")
