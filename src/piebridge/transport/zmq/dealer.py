"""ZeroMQ transport.

A DEALER socket connected to the remote endpoint; each message is a single
frame containing the JSON encoding of one unit (or, inbound, possibly an
array of units). A peer binding a ROUTER socket sees the usual identity
prefix; a peer using a PAIR or DEALER socket sees the bare frames.

ZeroMQ sockets are not thread-safe. The DEALER socket is only ever touched
by a dedicated background thread; other threads queue outbound frames and
poke that thread via an inproc PAIR socket.
"""

from __future__ import annotations

import atexit
import itertools
import logging
import queue
import threading
import weakref
from typing import Optional

import zmq

from ...message import Message
from ..base import Transport, TransportConnectionError, TransportEndpointError

logger = logging.getLogger(__name__)

SCHEMES = ("tcp", "ipc", "inproc")

zmq_context = zmq.Context()

_signal_ids = itertools.count()
_open_dealers: "weakref.WeakSet[Dealer]" = weakref.WeakSet()


class Dealer(Transport):
    """DEALER transport for ``tcp://``, ``ipc://`` and ``inproc://``
    endpoints."""

    # Milliseconds between checks for a shutdown request, in the absence of
    # any other activity.
    poll_interval = 1000

    # Seconds to wait for the background thread when closing.
    close_timeout = 5

    def __init__(self, endpoint: str):
        super().__init__(endpoint)

        scheme, separator, rest = endpoint.partition("://")
        if separator == "" or scheme not in SCHEMES or rest == "":
            raise TransportEndpointError(f"not a ZeroMQ endpoint: {endpoint!r}")

        self.socket: Optional[zmq.Socket] = None
        self._outbox: "queue.SimpleQueue[bytes]" = queue.SimpleQueue()
        self._signal_rx: Optional[zmq.Socket] = None
        self._signal_tx: Optional[zmq.Socket] = None
        self._signal_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._shutdown = False

    @property
    def is_open(self) -> bool:
        return self.socket is not None and not self._shutdown

    def open(self) -> None:
        with self._state_lock:
            if self.socket is not None:
                return

            socket = zmq_context.socket(zmq.DEALER)
            socket.setsockopt(zmq.LINGER, 0)

            try:
                socket.connect(self.endpoint)
            except zmq.ZMQError as exc:
                socket.close()
                raise TransportConnectionError(f"{self.endpoint}: {exc}") from exc

            internal = f"inproc://piebridge.Dealer:signal:{next(_signal_ids)}"
            self._signal_rx = zmq_context.socket(zmq.PAIR)
            self._signal_rx.setsockopt(zmq.LINGER, 0)
            self._signal_rx.bind(internal)
            self._signal_tx = zmq_context.socket(zmq.PAIR)
            self._signal_tx.setsockopt(zmq.LINGER, 0)
            self._signal_tx.connect(internal)

            self.socket = socket
            self._shutdown = False
            self._thread = threading.Thread(target=self.run, daemon=True)
            self._thread.start()

            _open_dealers.add(self)

        logger.info("%r: connected", self)

    def close(self) -> None:
        with self._state_lock:
            if self.socket is None or self._shutdown:
                return

            self._shutdown = True
            self._signal()
            thread = self._thread

        thread.join(self.close_timeout)

        with self._state_lock:
            with self._signal_lock:
                self._signal_tx.close()
                self._signal_tx = None
            self._signal_rx = None
            self.socket = None
            self._thread = None

        _open_dealers.discard(self)
        logger.info("%r: disconnected", self)

    def send(self, msg: Message) -> None:
        if not self.is_open:
            raise TransportConnectionError(f"{self.endpoint}: not open")

        # Encode here, in the caller's thread, so that encoding problems are
        # reported to the caller rather than the background thread.
        frame = msg.encode()
        self._outbox.put(frame)
        self._signal()

    def _signal(self) -> None:
        # One pending signal is enough to make the background thread drain
        # the whole outbox; if the signal pipe is full, it has one already.
        with self._signal_lock:
            if self._signal_tx is None:
                return
            try:
                self._signal_tx.send(b"", flags=zmq.NOBLOCK)
            except zmq.Again:
                pass

    def _handle_outgoing(self) -> None:
        # Clear any pending signals, then send everything queued so far.
        while True:
            try:
                self._signal_rx.recv(flags=zmq.NOBLOCK)
            except zmq.Again:
                break

        while True:
            try:
                frame = self._outbox.get(block=False)
            except queue.Empty:
                break

            try:
                self.socket.send(frame)
            except zmq.ZMQError:
                logger.exception("%r: send failed", self)

    def _handle_incoming(self) -> None:
        while True:
            try:
                parts = self.socket.recv_multipart(flags=zmq.NOBLOCK)
            except zmq.Again:
                break

            # A REQ-style peer inserts an empty delimiter frame; the payload
            # is always the last frame.
            if parts:
                self._deliver(parts[-1])

    def run(self) -> None:
        socket = self.socket
        signal_rx = self._signal_rx

        poller = zmq.Poller()
        poller.register(socket, zmq.POLLIN)
        poller.register(signal_rx, zmq.POLLIN)

        try:
            while True:
                for active, _flag in poller.poll(self.poll_interval):
                    if active == signal_rx:
                        self._handle_outgoing()
                    elif active == socket:
                        self._handle_incoming()

                if self._shutdown:
                    # Anything queued before close() was called still goes out.
                    self._handle_outgoing()
                    break
        except zmq.ZMQError:
            logger.exception("%r: receive loop failed", self)
        finally:
            socket.close()
            signal_rx.close()


def _cleanup() -> None:
    for dealer in tuple(_open_dealers):
        dealer.close()

    try:
        zmq_context.term()
    except zmq.ZMQError:
        pass


atexit.register(_cleanup)
