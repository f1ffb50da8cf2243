import logging
import queue
import threading

from . import catalog
from . import format
from . import json
from . import mapping
from . import message
from .transport import TransportError

logger = logging.getLogger(__name__)


class Dispatcher:
    """ The :class:`Dispatcher` owns the compiled mapping table and moves
        messages in both directions. Inbound frames are parsed, looked up,
        and routed to the bound actions; outbound triggers are resolved into
        a payload and sent via the *transport*.

        Bound actions may touch state that is only safe to touch from one
        thread. Once :func:`start` has been called, all dispatching in both
        directions happens on a single background thread, in the order it
        was requested: :func:`receive` and :func:`trigger` can be called
        from any thread, and return immediately. Without a running worker
        thread, the calling thread does the dispatching.

        Nothing raised while dispatching gets past the dispatcher: bad
        frames, missing bindings, and failing actions are logged, and
        processing moves on to the next thing.
    """

    def __init__(self, mappings=(), transport=None):

        self.transport = transport
        self.index = mapping.build(mappings)

        self.listening = False

        self._emit_lock = threading.RLock()
        self._worker_lock = threading.Lock()
        self._listening = list()
        self._queue = None
        self._worker = None


    @property
    def mappings(self):
        return self.index.mappings


    def update(self, mappings):
        """ Replace the mapping table with *mappings*. If the dispatcher is
            currently listening to events for Send mappings, the listeners
            are moved to the new table.
        """

        listening = self.listening

        if listening:
            self.unlisten()

        self.index = mapping.build(mappings)

        if listening:
            self.listen()


    # Inbound direction.

    def dispatch_inbound(self, raw):
        """ Dispatch one inbound frame on the calling thread. The frame can
            be raw JSON (bytes or string), a decoded unit, or a decoded
            array of units. Returns the number of actions invoked.
        """

        try:
            decoded = message.decode(raw)
            units = message.units(decoded)
        except message.ParseError as e:
            logger.warning('dropping inbound frame: %s', e)
            return 0

        invoked = 0

        for unit in units:
            try:
                invoked += self._dispatch_unit(unit)
            except Exception:
                logger.exception('unexpected failure dispatching %r', unit)

        return invoked


    def _dispatch_unit(self, unit):

        try:
            parsed = message.parse(unit)
        except message.ParseError as e:
            logger.warning('dropping inbound message: %s', e)
            return 0

        if parsed is None:
            return 0

        route = self.index.lookup(parsed.message_id)

        if route is None:
            logger.debug('no mapping for %r', parsed.message_id)
            return 0

        logger.debug('executing mapping %r for %r with value %r', route.label, parsed.message_id, parsed.value)
        return self.invoke(route, parsed.value)


    def invoke(self, route, value=None):
        """ Invoke every action of the Receive *route*, passing *value* if
            the route expects one. A failing action does not prevent the
            remaining actions from being invoked. Returns the number of
            actions invoked.
        """

        arguments = route.arguments(value)
        invoked = 0

        for action in route.actions:
            try:
                action.invoke(*arguments)
            except catalog.BindingError as e:
                logger.warning('%s: skipping action %r: %s', route.label, action, e)
                continue
            except Exception:
                logger.exception('%s: action %r failed', route.label, action)

            invoked += 1

        return invoked


    # Outbound direction.

    def dispatch_outbound(self, entry):
        """ Resolve the payload for the Send mapping *entry* and send it on the
            calling thread. Returns the :class:`piebridge.message.Message`
            sent, or None if nothing was sent.
        """

        route = self.index.route(entry)

        if route is None:
            logger.debug('%r is not an active mapping, not sending', entry)
            return None

        if route.direction != mapping.Direction.SEND:
            logger.warning('%r is not a Send mapping, not sending', entry)
            return None

        # Resolving the payload and sending it happen under the same lock,
        # so that frames from concurrent callers cannot interleave.

        with self._emit_lock:
            try:
                value = route.payload()
            except catalog.BindingError as e:
                logger.error('%s: not sending %r: %s', route.label, route.message_id, e)
                return None
            except Exception:
                logger.exception('%s: not sending %r, reading the value failed', route.label, route.message_id)
                return None

            outgoing = message.Message(route.message_id, value)

            if self.send(outgoing) == True:
                return outgoing

        return None


    def emit(self, message_id, value=None):
        """ Send a message directly, without a mapping, on the calling
            thread. The *value* is converted to a string the same way a
            dynamic payload would be. Returns the message sent, or None.
        """

        if message_id is None or message_id == '':
            raise ValueError('the message id must be specified')

        outgoing = message.Message(message_id, format.to_string(value))

        with self._emit_lock:
            if self.send(outgoing) == True:
                return outgoing

        return None


    def send(self, outgoing):
        """ Hand *outgoing* to the transport. Returns True if the transport
            accepted it.
        """

        transport = self.transport

        if transport is None or transport.is_open == False:
            logger.warning('not connected, dropping %r', outgoing)
            return False

        try:
            transport.send(outgoing)
        except TransportError as e:
            logger.error('failed to send %r: %s', outgoing, e)
            return False
        except json.EncodeError as e:
            logger.error('cannot encode %r: %s', outgoing, e)
            return False

        logger.debug('sent %r', outgoing)
        return True


    # Event listeners for Send mappings.

    def listen(self):
        """ Add a listener to the event of every active Send mapping, so that
            each firing triggers the mapping. Mappings whose event cannot be
            resolved are logged and skipped.
        """

        self.unlisten()

        for route in self.index.send:
            if not route.event:
                continue

            try:
                event = route.event.event()
            except catalog.BindingError as e:
                logger.warning('%s: cannot listen to %r: %s', route.label, route.event.path, e)
                continue

            listener = self._listener(route.mapping)
            event.add_listener(listener)

            # The event only holds a weak reference to the listener; this
            # list is what keeps it alive.

            self._listening.append((event, listener))

        self.listening = True


    def unlisten(self):
        """ Remove every listener added by :func:`listen`.
        """

        for event, listener in self._listening:
            event.remove_listener(listener)

        self._listening = list()
        self.listening = False


    def _listener(self, entry):

        def listener(*args):
            self.trigger(entry)

        return listener


    # Hand-off to the dispatch thread.

    def receive(self, raw):
        """ Queue an inbound frame for dispatch. This is the callback handed
            to the transport, and is safe to call from any thread.
        """

        self._submit(self.dispatch_inbound, raw)


    def trigger(self, entry):
        """ Queue the Send mapping *entry* for dispatch. Safe to call from any
            thread.
        """

        self._submit(self.dispatch_outbound, entry)


    def post(self, message_id, value=None):
        """ Queue a direct send of *message_id*; see :func:`emit`.
        """

        if message_id is None or message_id == '':
            raise ValueError('the message id must be specified')

        self._submit(self.emit, message_id, value)


    def _submit(self, method, *args):

        # The check and the put happen under the same lock that stop() holds
        # while queueing the stop request; nothing can land behind it.

        with self._worker_lock:
            if self._worker is not None:
                self._queue.put((method, args))
                return

        _run(method, args)


    def flush(self, timeout=None):
        """ Block until everything queued so far has been dispatched. Returns
            True if that happened within *timeout* seconds. Called from the
            dispatch thread itself, for example by a bound action, it cannot
            wait for the rest of the queue and returns False immediately.
        """

        with self._worker_lock:
            worker = self._worker

            if worker is None:
                return True

            if worker.current() == True:
                return False

            done = threading.Event()
            self._queue.put((done.set, ()))

        return done.wait(timeout)


    @property
    def running(self):
        return self._worker is not None


    def start(self):
        """ Start the dispatch thread. Has no effect if it is already
            running.
        """

        with self._worker_lock:
            if self._worker is not None:
                return

            self._queue = queue.SimpleQueue()
            self._worker = _Worker(self._queue)


    def stop(self, timeout=None):
        """ Stop the dispatch thread after it has worked through anything
            already queued. Has no effect if it is not running. Called from
            the dispatch thread itself, the thread exits once the current
            work is done, without being waited for.
        """

        with self._worker_lock:
            worker = self._worker

            if worker is None:
                return

            self._worker = None
            worker.stop()

        if worker.current() == False:
            worker.thread.join(timeout)


# end of class Dispatcher



def _run(method, args):

    try:
        method(*args)
    except Exception:
        logger.exception('dispatch of %r failed', method)



class _WorkerStop(RuntimeError):
    pass


class _Worker:
    """ Background thread to run queued dispatch requests, one at a time,
        in the order they were queued. This keeps the thread receiving from
        the transport free to move on to the next frame, where a bound
        action may take an unbounded amount of time.
    """

    def __init__(self, queue):

        self.queue = queue

        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    def run(self):

        while True:
            dequeued = self.queue.get()

            if isinstance(dequeued, _WorkerStop):
                break

            method, args = dequeued
            _run(method, args)


    def current(self):
        return threading.current_thread() is self.thread


    def stop(self):
        self.queue.put(_WorkerStop())


# end of class _Worker


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
