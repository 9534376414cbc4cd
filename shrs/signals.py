"""Signals handled by the shell."""

from __future__ import annotations

import signal
import threading


class Signals:
    """Records SIGINT in a flag instead of interrupting the shell."""

    def __init__(self) -> None:
        self.interrupted = threading.Event()
        signal.signal(signal.SIGINT, self._on_interrupt)

    def _on_interrupt(self, signum, frame) -> None:
        self.interrupted.set()