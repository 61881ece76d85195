"""Process shutdown on SIGINT / SIGTERM.

The listener prints a farewell notice and hands control to a shutdown
callback. The default callback exits the process with status 0; tests and
embedding applications inject their own.
"""

from __future__ import annotations

import logging
import signal
import sys
from collections.abc import Callable
from types import FrameType
from typing import Any

from httptoolkit.core.console import console

log = logging.getLogger(__name__)

FAREWELL_MESSAGE = "\r- Ctrl+C pressed... exiting... Thank you!"

LISTENED_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


def exit_gracefully() -> None:
    sys.exit(0)


class CloseListener:
    def __init__(
        self,
        on_shutdown: Callable[[], Any] | None = None,
        message: str = FAREWELL_MESSAGE,
    ) -> None:
        self._on_shutdown = on_shutdown or exit_gracefully
        self._message = message
        self._original_handlers: dict[signal.Signals, Any] = {}

    @property
    def installed(self) -> bool:
        return bool(self._original_handlers)

    def install(self) -> CloseListener:
        """Register the handlers; must run in the main thread."""
        if self.installed:
            return self
        for sig in LISTENED_SIGNALS:
            self._original_handlers[sig] = signal.signal(sig, self._handle)
        log.debug("Close listener installed for %s", ", ".join(sig.name for sig in LISTENED_SIGNALS))
        return self

    def uninstall(self) -> None:
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        log.info("Received %s, shutting down", signal.Signals(signum).name)
        console.print(self._message, style="notice", markup=False)
        self._on_shutdown()

    def __enter__(self) -> CloseListener:
        return self.install()

    def __exit__(self, *exc_info: object) -> None:
        self.uninstall()


def close_listener(
    on_shutdown: Callable[[], Any] | None = None,
    message: str = FAREWELL_MESSAGE,
) -> CloseListener:
    """Install a :class:`CloseListener` for the lifetime of the process."""
    return CloseListener(on_shutdown, message).install()
