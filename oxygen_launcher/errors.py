from __future__ import annotations


class LauncherError(Exception):
    """Base for every failure the launcher records instead of propagating."""

    phase = "launcher"


class ConfigError(LauncherError):
    phase = "config"


class ManifestError(LauncherError):
    """Missing argument, bad path, unreadable or malformed manifest."""

    phase = "manifest"


class ToolUpdateError(LauncherError):
    phase = "update"


class InstallError(LauncherError):
    phase = "install"


class RunError(LauncherError):
    phase = "run"


class ConsoleError(LauncherError):
    phase = "console"
