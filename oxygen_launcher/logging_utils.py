from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_FILENAME = "oxygen.log"


def _open_log_file(candidates: list[str]) -> tuple[Optional[logging.Handler], Optional[str]]:
    for candidate in candidates:
        try:
            Path(os.path.dirname(candidate) or ".").mkdir(parents=True, exist_ok=True)
            return logging.FileHandler(candidate, encoding="utf-8"), candidate
        except OSError:
            continue
    return None, None


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Attach the launcher's file and console handlers to the root logger.

    The install root may be read-only (e.g. under Program Files), so the log
    file falls back to the working directory, and failing that the launcher
    runs with the console handler alone. Console lines carry only the message;
    the file keeps timestamps and logger names.

    Safe to call twice. Returns the log file in use, or None.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if getattr(root, "_oxygen_configured", False):
        return getattr(root, "_oxygen_log_path", None)

    file_handler, chosen = _open_log_file([log_path, str(Path.cwd() / LOG_FILENAME)])
    if file_handler is not None:
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(console)

    root._oxygen_configured = True
    root._oxygen_log_path = chosen

    log = logging.getLogger(__name__)
    if chosen is None:
        log.warning("No writable log file (tried %s and the working directory)", log_path)
    else:
        log.debug("Logging to %s", chosen)
    return chosen


def rebind_console_handlers() -> None:
    """Point console handlers at the current sys.stderr.

    Needed after a console is (re)allocated: the old stream belongs to a console
    the process no longer has.
    """

    for h in logging.getLogger().handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setStream(sys.stderr)
