""" The :class:`Bridge` ties a :class:`piebridge.dispatch.Dispatcher` to a
    transport connection, and owns both for its lifetime.
"""

import logging
import threading

from . import config
from . import transport
from .dispatch import Dispatcher

logger = logging.getLogger(__name__)


class Bridge:
    """ A bridge between a remote peer and the local objects bound by
        *mappings*. The *endpoint* selects the transport; if it is not
        specified, :func:`piebridge.config.endpoint` supplies one. An already
        constructed *transport* can be provided instead, in which case the
        bridge opens it on :func:`start` and closes it on :func:`stop`.

        Nothing happens until :func:`start` is called. The bridge can also
        be used as a context manager::

            with piebridge.Bridge(mappings) as bridge:
                bridge.send('hello', 'world')
    """

    def __init__(self, mappings=(), endpoint=None, transport=None):

        if transport is not None and endpoint is None:
            endpoint = transport.endpoint

        self.endpoint = config.endpoint(endpoint)
        self.dispatcher = Dispatcher(mappings)
        self.transport = None

        self._provided = transport
        self._lock = threading.Lock()
        self._started = False


    def __enter__(self):
        self.start()
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.stop()


    def __repr__(self):
        return 'Bridge(%r)' % (self.endpoint,)


    @classmethod
    def from_config(cls, filename=None, objects=None, endpoint=None):
        """ Create a :class:`Bridge` using the mappings, and the endpoint
            unless one is specified here, loaded from *filename*. See
            :func:`piebridge.config.load`.
        """

        loaded = config.load(filename, objects)

        if endpoint is None:
            endpoint = loaded.endpoint

        return cls(loaded.mappings, endpoint)


    @property
    def connected(self):
        handle = self.transport
        return handle is not None and handle.is_open


    @property
    def mappings(self):
        return self.dispatcher.mappings


    @property
    def running(self):
        return self._started


    def start(self):
        """ Start the dispatch thread, connect to the endpoint, and begin
            listening to the events of the Send mappings. A connection
            failure is logged; the bridge keeps running unconnected, and any
            sends are dropped. Calling :func:`start` on a running bridge has
            no effect.
        """

        with self._lock:
            if self._started == True:
                return

            self._started = True
            self.dispatcher.start()

            handle = self._connect()

            if handle is not None:
                handle.on_message(self.dispatcher.receive)
                self.transport = handle
                self.dispatcher.transport = handle

            self.dispatcher.listen()


    def _connect(self):

        provided = self._provided

        try:
            if provided is None:
                return transport.connect(self.endpoint)
            else:
                provided.open()
                return provided
        except transport.TransportError as e:
            logger.error('cannot connect to %s: %s', self.endpoint, e)
            return None


    def stop(self, timeout=None):
        """ Stop listening, disconnect, and stop the dispatch thread once it
            has finished whatever was already queued. Stopping a bridge that
            is not running is not an error.
        """

        with self._lock:
            if self._started == False:
                return

            self._started = False
            self.dispatcher.unlisten()
            self.dispatcher.flush(timeout)

            handle = self.transport
            self.transport = None
            self.dispatcher.transport = None

            if handle is not None:
                handle.on_message(None)

                try:
                    transport.disconnect(handle)
                except transport.TransportError as e:
                    logger.error('error disconnecting from %s: %s', self.endpoint, e)

            self.dispatcher.stop(timeout)


    def send(self, message_id, value=None):
        """ Send a message directly, without going through a mapping. The
            send happens in the dispatch thread, in order with everything
            else the bridge sends.
        """

        self.dispatcher.post(message_id, value)


    def flush(self, timeout=None):
        return self.dispatcher.flush(timeout)


    def update(self, mappings):
        """ Replace the mapping table. Takes effect for the next message
            received or event fired.
        """

        self.dispatcher.update(mappings)


# end of class Bridge


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
