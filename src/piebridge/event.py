import logging

from . import weakref

logger = logging.getLogger(__name__)


class Event:
    """ An :class:`Event` is a slot on a local object that other components
        can listen to. A component declares one as an attribute, and calls
        :func:`invoke` whenever the thing it represents happens; any
        listeners added via :func:`add_listener` will be called in the order
        they were added.

        Send mappings refer to an :class:`Event` by name; the bridge adds a
        listener to it, and forwards a message to the remote side whenever
        the event fires.

        Listeners are held by weak reference. A listener that goes out of
        scope is quietly dropped, the caller is responsible for keeping a
        reference for as long as the listener should remain active.
    """

    def __init__(self):
        self.listeners = list()


    def __len__(self):
        count = 0
        for reference in self.listeners:
            if reference() is not None:
                count += 1

        return count


    def __call__(self, *args):
        self.invoke(*args)


    def add_listener(self, method):
        """ Register *method* to be called whenever this event is invoked.
            The arguments passed to :func:`invoke` are passed through to
            the listener as-is.
        """

        if callable(method):
            pass
        else:
            raise TypeError('the listener must be callable')

        reference = weakref.ref(method)
        self.listeners.append(reference)


    def remove_listener(self, method):
        """ Discontinue calls to *method*. Takes no action if the method is
            not a current listener.
        """

        remaining = list()

        for reference in self.listeners:
            listener = reference()

            if listener is None:
                continue

            if listener == method:
                continue

            remaining.append(reference)

        self.listeners = remaining


    def remove_all_listeners(self):
        self.listeners = list()


    def invoke(self, *args):
        """ Call every registered listener with the supplied arguments. A
            listener raising an exception does not prevent the remaining
            listeners from being called.
        """

        if self.listeners:
            pass
        else:
            return

        invalid = list()

        # Iterate over a copy; a listener is allowed to add or remove
        # listeners while it is being called.

        for reference in tuple(self.listeners):
            listener = reference()

            if listener is None:
                invalid.append(reference)
                continue

            try:
                listener(*args)
            except Exception:
                logger.exception('event listener %r failed', listener)
                continue

        for reference in invalid:
            try:
                self.listeners.remove(reference)
            except ValueError:
                pass


# end of class Event


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
