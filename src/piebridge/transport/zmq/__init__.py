"""ZeroMQ transport backend."""

from .dealer import Dealer, SCHEMES, zmq_context
