"""Signal handling so an interrupted CLI still tears down its subprocesses."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import signal


logger = logging.getLogger(__name__)


def install_cancel_signals(task: asyncio.Task, *, loop: asyncio.AbstractEventLoop | None = None) -> Callable[[], None]:
    """Cancel ``task`` on SIGINT/SIGTERM so its ``finally`` blocks run.

    The first signal cancels the task; repeated signals are ignored.
    Returns a callable that removes the handlers again.
    """

    active_loop = loop or asyncio.get_running_loop()
    installed: list[signal.Signals] = []

    def _make_handler(sig: signal.Signals) -> Callable[[], None]:
        def _handler() -> None:  # pragma: no cover - signal glue
            if task.done() or task.cancelling():
                return
            logger.info("Received %s, cancelling search session", sig.name)
            task.cancel()

        return _handler

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            active_loop.add_signal_handler(sig, _make_handler(sig))
        except (NotImplementedError, RuntimeError, ValueError):  # pragma: no cover - unsupported platform
            logger.debug("Signal %s is not supported in this context", sig.name)
            continue
        installed.append(sig)

    def _remove() -> None:
        for sig in installed:
            active_loop.remove_signal_handler(sig)
        installed.clear()

    return _remove
