"""Transport layer implementations.

The backend is chosen by the scheme of the endpoint: ``tcp://``, ``ipc://``
and ``inproc://`` endpoints use ZeroMQ, ``loopback://`` endpoints stay
within the process.
"""

from .base import (
    Transport,
    TransportError,
    TransportConnectionError,
    TransportEndpointError,
)

from . import loopback
from . import zmq

_BACKENDS = dict()
_BACKENDS[loopback.SCHEME] = loopback.Loopback

for _scheme in zmq.SCHEMES:
    _BACKENDS[_scheme] = zmq.Dealer


def backend(endpoint):
    """Return the :class:`Transport` subclass that handles *endpoint*."""

    if not isinstance(endpoint, str):
        raise TransportEndpointError(f"endpoint must be a string: {endpoint!r}")

    scheme, separator, _rest = endpoint.partition("://")

    if separator == "":
        raise TransportEndpointError(f"endpoint has no scheme: {endpoint!r}")

    try:
        return _BACKENDS[scheme.lower()]
    except KeyError:
        raise TransportEndpointError(f"unknown transport scheme: {scheme!r}") from None


def connect(endpoint):
    """Create, open, and return a transport handle for *endpoint*. Raises a
    :class:`TransportError` if the endpoint is malformed or the connection
    cannot be established."""

    handle = backend(endpoint)(endpoint)
    handle.open()
    return handle


def disconnect(handle):
    """Close *handle*. Disconnecting None, or a handle that is already
    closed, is not an error."""

    if handle is None:
        return

    handle.close()
