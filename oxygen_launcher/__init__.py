"""Oxygen launcher (manifest-driven, self-updating).

Core design goals:
- Launch fast when the app is already installed
- Keep the toolchain and the app current for the next launch
- Best-effort phases: one failure never stops the next phase
- Never close the window on a failure the user has not seen
- Centralized logging
"""

__version__ = "0.4.0"

__all__ = ["__version__"]
