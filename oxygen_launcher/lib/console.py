from __future__ import annotations

import logging
import sys
from typing import Protocol

from ..errors import ConsoleError
from ..logging_utils import rebind_console_handlers

logger = logging.getLogger(__name__)


class ConsoleController(Protocol):
    """Hide/show the launcher's own console around the managed app."""

    @property
    def attached(self) -> bool:
        ...

    def suppress_own_console(self) -> None:
        ...

    def free_console(self) -> None:
        ...

    def allocate_console(self) -> None:
        ...


class NullConsole:
    """Platforms where a process cannot attach/detach a terminal: nothing to do."""

    attached = True

    def suppress_own_console(self) -> None:
        pass

    def free_console(self) -> None:
        pass

    def allocate_console(self) -> None:
        pass


class WindowsConsole:
    """kernel32 console attach/detach.

    ``kernel32`` is injectable so the state handling can be exercised off Windows.
    """

    def __init__(self, kernel32=None):
        if kernel32 is None:
            import ctypes

            kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        self._k32 = kernel32
        self._attached = bool(self._k32.GetConsoleWindow())

    @property
    def attached(self) -> bool:
        return self._attached

    def _detach(self, what: str) -> None:
        if not self._attached:
            return
        if not self._k32.FreeConsole():
            raise ConsoleError(f"{what}: FreeConsole failed")
        self._attached = False
        logger.debug("Console detached (%s)", what)

    def suppress_own_console(self) -> None:
        # A child spawned after this point cannot inherit our window.
        self._detach("suppress_own_console")

    def free_console(self) -> None:
        self._detach("free_console")

    def allocate_console(self) -> None:
        if self._attached or self._k32.GetConsoleWindow():
            self._attached = True
            return
        if not self._k32.AllocConsole():
            raise ConsoleError("allocate_console: AllocConsole failed")
        self._attached = True
        _rebind_std_streams()
        logger.debug("Console allocated")


def _rebind_std_streams() -> None:
    # The interpreter's std streams still point at the console we freed.
    try:
        sys.stdout = open("CONOUT$", "w", encoding="utf-8", buffering=1)
        sys.stderr = open("CONOUT$", "w", encoding="utf-8", buffering=1)
        sys.stdin = open("CONIN$", "r", encoding="utf-8")
    except OSError as e:
        raise ConsoleError(f"allocate_console: cannot open console streams\n{e}") from e
    rebind_console_handlers()


def get_console_controller() -> ConsoleController:
    if sys.platform == "win32":
        return WindowsConsole()
    return NullConsole()
