from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import Callable, Optional

from . import __version__
from .config import LauncherConfig, load_config
from .errors import ConfigError, ManifestError
from .lib.console import get_console_controller
from .lib.env import resolve_paths
from .lib.manifests import load_manifest
from .logging_utils import configure_logging
from .phases import InstallPackagePhase, RunAppPhase, UpdateToolchainPhase
from .pipeline import LaunchCtx, report_failure, run_console_op, run_phase
from .report import LaunchReport

logger = logging.getLogger(__name__)

ROUTE_INSTALLED = "installed"
ROUTE_FRESH = "fresh"
ROUTE_MANIFEST_FAILED = "manifest_failed"


def _update_and_install(ctx: LaunchCtx, report: LaunchReport) -> None:
    # Install runs even when the update failed: a stale toolchain beats no app.
    run_phase(UpdateToolchainPhase(), ctx, report)
    run_phase(InstallPackagePhase(), ctx, report)


def _run_installed(ctx: LaunchCtx, report: LaunchReport) -> None:
    """App already present: launch it first, refresh for the next launch after."""

    if not ctx.config.persistent_console:
        run_console_op(ctx.console.suppress_own_console, report)
    ran_ok = run_phase(RunAppPhase(), ctx, report)

    # The console comes back for update feedback, or to show why the app died.
    if ctx.config.persistent_console or not ran_ok:
        run_console_op(ctx.console.allocate_console, report)

    _update_and_install(ctx, report)


def _run_fresh(ctx: LaunchCtx, report: LaunchReport) -> None:
    """Nothing installed yet: update, install, then run once."""

    _update_and_install(ctx, report)

    silent = not ctx.config.persistent_console
    if silent:
        run_console_op(ctx.console.suppress_own_console, report)

    ran_ok = run_phase(RunAppPhase(), ctx, report)
    if silent and not ran_ok:
        run_console_op(ctx.console.allocate_console, report)


def launch(
    manifest_path: Optional[str],
    ctx: LaunchCtx,
    report: Optional[LaunchReport] = None,
) -> LaunchReport:
    """Load the manifest, pick a route and drive every phase to completion."""

    report = report if report is not None else LaunchReport()

    logger.info("Deserializing Manifest...")
    try:
        manifest = load_manifest(manifest_path)
    except ManifestError as e:
        report_failure(report, "manifest", str(e))
        report.route = ROUTE_MANIFEST_FAILED
        # Best-effort maintenance even without a manifest.
        run_phase(UpdateToolchainPhase(), ctx, report)
        return report

    ctx = replace(ctx, manifest=manifest)
    app_path = ctx.paths.app_path(manifest.name)

    # Checked once; an install racing a user deleting the binary is accepted.
    try:
        installed = app_path.exists()
    except OSError as e:
        report_failure(report, "manifest", f"Cannot check for {app_path}\n{e}")
        installed = False

    if installed:
        report.route = ROUTE_INSTALLED
        logger.debug("%s is installed at %s", manifest.name, app_path)
        _run_installed(ctx, report)
    else:
        report.route = ROUTE_FRESH
        logger.debug("%s is not installed yet (%s missing)", manifest.name, app_path)
        _run_fresh(ctx, report)

    return report


def finish(
    ctx: LaunchCtx,
    report: LaunchReport,
    *,
    read_line: Optional[Callable[[str], str]] = None,
) -> int:
    """Hold the window open on problems; otherwise leave without delay."""

    if not report.problem:
        run_console_op(ctx.console.free_console, report)
        if not report.problem:
            return report.exit_code

    if not ctx.console.attached:
        run_console_op(ctx.console.allocate_console, report)

    logger.warning(
        "%d problem(s) during launch: %s",
        len(report.failures),
        ", ".join(f.phase_id for f in report.failures),
    )
    try:
        (read_line or input)("Press Enter to close...")
    except EOFError:
        pass
    return report.exit_code


class _ArgumentParser(argparse.ArgumentParser):
    """Bad arguments become a manifest problem instead of a closed window."""

    def error(self, message: str):
        raise ManifestError(f"Bad command line: {message}")


def main(argv: Optional[list[str]] = None) -> int:
    p = _ArgumentParser(
        prog="oxygen",
        description="Keep an app installed and current, then launch it.",
        add_help=False,
    )
    p.add_argument("manifest", nargs="?", default=None, help="Path to the app manifest (.o2)")

    arg_error: Optional[ManifestError] = None
    extras: list[str] = []
    try:
        args, extras = p.parse_known_args(argv)
        manifest_arg = args.manifest
    except ManifestError as e:
        manifest_arg, arg_error = None, e

    paths = resolve_paths()
    report = LaunchReport()

    config_error: Optional[ConfigError] = None
    try:
        config = load_config(paths.config_path)
    except ConfigError as e:
        config, config_error = LauncherConfig(), e

    configure_logging(
        log_path=config.log_path or str(paths.log_path),
        level=logging.DEBUG if config.debug else logging.INFO,
    )
    logger.info("--| Oxygen %s |--", __version__)
    if config_error is not None:
        report_failure(report, "config", f"{config_error}\nUsing default launcher settings.")
    if arg_error is not None:
        report_failure(report, "manifest", str(arg_error))
    if extras:
        logger.warning("Ignoring extra arguments: %s", " ".join(extras))

    ctx = LaunchCtx(paths=paths, config=config, console=get_console_controller())
    launch(manifest_arg, ctx, report)
    return finish(ctx, report)


if __name__ == "__main__":
    raise SystemExit(main())
