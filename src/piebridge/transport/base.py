"""Transport interface.

This is the (small) contract that transport implementations should follow.
A transport moves whole frames; it knows nothing about mappings, and only
enough about messages to encode an outbound one.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..message import Message

logger = logging.getLogger(__name__)


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportEndpointError(TransportError):
    """The endpoint is malformed, or no transport handles its scheme."""


class Transport(ABC):
    """Minimal contract for a wire-level transport.

    Inbound frames are handed, raw, to the callback registered via
    :func:`on_message`. The callback is invoked from whatever thread the
    transport receives on; it is expected to hand the frame off quickly.
    """

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        self._callback: Optional[Callable[[Any], None]] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.endpoint!r})"

    @abstractmethod
    def open(self) -> None:
        """Establish the underlying connection/socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket. Closing a transport
        that is not open is not an error."""

    @abstractmethod
    def send(self, msg: Message) -> None:
        """Send a single message."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def on_message(self, callback: Optional[Callable[[Any], None]]) -> None:
        """Register the callback for inbound frames, replacing any previous
        one. None clears the callback; frames arriving without a callback
        are discarded."""
        self._callback = callback

    def _deliver(self, raw: Any) -> None:
        callback = self._callback
        if callback is None:
            logger.debug("%r: no receiver, dropping frame", self)
            return

        try:
            callback(raw)
        except Exception:
            logger.exception("%r: inbound callback failed", self)
