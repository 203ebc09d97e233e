from __future__ import annotations

import logging
from typing import List

from ..config import LauncherConfig
from ..errors import InstallError
from ..lib.command import SpawnError
from ..lib.env import Paths
from ..lib.manifests import (
    AddFeatures,
    AllFeatures,
    DefaultFeatures,
    FeatureSelection,
    Local,
    Manifest,
    NoFeatures,
    PackageSource,
    Registry,
    Remote,
    ReplaceFeatures,
)
from ..pipeline import LaunchCtx

logger = logging.getLogger(__name__)


def source_args(source: PackageSource) -> List[str]:
    if isinstance(source, Registry):
        return [source.identifier]
    if isinstance(source, Remote):
        args = ["--git", source.url]
        if source.subpath:
            args.append(source.subpath)
        return args
    if isinstance(source, Local):
        return ["--path", str(source.path)]
    raise TypeError(f"Unhandled package source: {source!r}")


def feature_args(features: FeatureSelection) -> List[str]:
    if isinstance(features, DefaultFeatures):
        return []
    if isinstance(features, NoFeatures):
        return ["--no-default-features"]
    if isinstance(features, AllFeatures):
        return ["--all-features"]
    if isinstance(features, AddFeatures):
        return ["--features", ",".join(features.features)] if features.features else []
    if isinstance(features, ReplaceFeatures):
        args = ["--no-default-features"]
        if features.features:
            args += ["--features", ",".join(features.features)]
        return args
    raise TypeError(f"Unhandled feature selection: {features!r}")


def build_install_argv(manifest: Manifest, paths: Paths, config: LauncherConfig) -> List[str]:
    argv = [
        config.installer_program,
        "install",
        "--root",
        str(paths.install_root),
        "--target-dir",
        str(paths.cache_dir),
    ]
    for override in config.install_overrides:
        argv += ["--config", override]
    argv += source_args(manifest.source)
    argv += feature_args(manifest.features)
    return argv


class InstallPackagePhase:
    phase_id = "install"

    def run(self, ctx: LaunchCtx) -> None:
        if ctx.manifest is None:
            raise InstallError("No manifest loaded; nothing to install")

        argv = build_install_argv(ctx.manifest, ctx.paths, ctx.config)
        program = ctx.config.installer_program
        logger.info("Installing %s (%s):", ctx.manifest.name, program)

        try:
            result = ctx.run(argv)
        except SpawnError as e:
            raise InstallError(f"Failed to spawn '{program} install'. Is {program} installed?\n{e.cause}") from e

        if not result.ok:
            raise InstallError(f"'{program} install' failed (exit status {result.returncode})")
