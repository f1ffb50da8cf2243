import pytest

import piebridge
from piebridge.message import Message
from piebridge.transport import TransportConnectionError, TransportEndpointError
from piebridge.transport.loopback import Loopback
from piebridge.transport.zmq import Dealer


def test_backend_selection():

    assert piebridge.transport.backend('tcp://localhost:9981') is Dealer
    assert piebridge.transport.backend('ipc:///tmp/socket') is Dealer
    assert piebridge.transport.backend('inproc://name') is Dealer
    assert piebridge.transport.backend('loopback://') is Loopback
    assert piebridge.transport.backend('TCP://localhost:9981') is Dealer


def test_backend_errors():

    with pytest.raises(TransportEndpointError):
        piebridge.transport.backend('localhost:9981')

    with pytest.raises(TransportEndpointError):
        piebridge.transport.backend('carrier-pigeon://coop')

    with pytest.raises(TransportEndpointError):
        piebridge.transport.backend(None)


def test_connect_and_disconnect():

    handle = piebridge.transport.connect('loopback://')
    assert isinstance(handle, Loopback)
    assert handle.is_open

    piebridge.transport.disconnect(handle)
    assert handle.is_open == False

    piebridge.transport.disconnect(handle)
    piebridge.transport.disconnect(None)
    assert handle.closed == 1


def test_loopback_send():

    handle = piebridge.transport.connect('loopback://')
    handle.send(Message('a', 'b'))
    assert handle.sent == [Message('a', 'b')]

    handle.clear()
    assert handle.sent == []

    handle.close()

    with pytest.raises(TransportConnectionError):
        handle.send(Message('a'))


def test_loopback_inject():

    received = list()

    handle = Loopback()
    handle.inject(b'dropped, nobody is listening')

    handle.on_message(received.append)
    handle.inject(b'frame')
    assert received == [b'frame']

    handle.on_message(None)
    handle.inject(b'dropped again')
    assert received == [b'frame']


def test_callback_failure_isolated():

    def broken(raw):
        raise RuntimeError('broken callback')

    handle = Loopback()
    handle.on_message(broken)
    handle.inject(b'frame')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
