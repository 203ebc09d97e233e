from __future__ import annotations

import logging

from ..errors import ToolUpdateError
from ..lib.command import SpawnError, fmt_argv
from ..pipeline import LaunchCtx

logger = logging.getLogger(__name__)


class UpdateToolchainPhase:
    phase_id = "update"

    def run(self, ctx: LaunchCtx) -> None:
        argv = ctx.config.toolchain_command
        logger.info("Updating toolchain (%s):", argv[0])

        try:
            result = ctx.run(argv)
        except SpawnError as e:
            raise ToolUpdateError(
                f"Failed to spawn '{fmt_argv(argv)}'. Is {argv[0]} installed?\n{e.cause}"
            ) from e

        if not result.ok:
            raise ToolUpdateError(f"'{fmt_argv(argv)}' failed (exit status {result.returncode})")
