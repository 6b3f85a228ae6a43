"""Cooperative cancellation for unbounded actions."""
from __future__ import annotations

from contextlib import contextmanager
import signal
import sys
import threading

from .core import ActionCancelled


class CancellationToken:
    """One-shot flag checked by the engine between ``Forever`` iterations."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ActionCancelled()

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<CancellationToken cancelled={self.cancelled}>"


@contextmanager
def cancel_on_interrupt(token: CancellationToken):
    """Fire ``token`` on SIGINT instead of raising ``KeyboardInterrupt``.

    A blocked read only notices the token once it returns, so a second
    SIGINT while the token is already set raises ``KeyboardInterrupt``.
    """

    if threading.current_thread() is not threading.main_thread():
        yield token
        return

    def _handler(signum, frame):
        if token.cancelled:
            raise KeyboardInterrupt
        token.cancel()
        print(
            "^C: stopping after the current step (press Ctrl-C again to abort)",
            file=sys.stderr,
        )

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


__all__ = [
    "CancellationToken",
    "cancel_on_interrupt",
]
