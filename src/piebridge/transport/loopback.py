"""In-process loopback transport.

Nothing leaves the process: sent messages are recorded, and frames from the
"remote" side are supplied by calling :func:`Loopback.inject`. Useful for
tests, and for wiring a bridge to something else in the same process.
"""

from __future__ import annotations

import threading
from typing import Any, List

from ..message import Message
from .base import Transport, TransportConnectionError

SCHEME = "loopback"


class Loopback(Transport):
    """Loopback transport for ``loopback://`` endpoints."""

    def __init__(self, endpoint: str = "loopback://"):
        super().__init__(endpoint)
        self.sent: List[Message] = []
        self.opened = 0
        self.closed = 0
        self._open = False
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True
        self.opened += 1

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        self.closed += 1

    def send(self, msg: Message) -> None:
        if not self._open:
            raise TransportConnectionError(f"{self.endpoint}: not open")

        # Round-trip through the encoder so that anything that would fail
        # on a real wire fails here too.
        msg.encode()

        with self._lock:
            self.sent.append(msg)

    def inject(self, raw: Any) -> None:
        """Deliver *raw* as if it had just arrived from the remote side."""
        self._deliver(raw)

    def clear(self) -> None:
        with self._lock:
            self.sent = []
