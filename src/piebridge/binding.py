from . import catalog
from . import weakref
from .catalog import BindingError
from .event import Event


class Binding:
    """ A :class:`Binding` is a reference to one member of a target object:
        an action to invoke, a value to read, or an :class:`Event` to listen
        to. The *target* is held by weak reference; the *path* is a string
        of the form ``Owner.member``, as produced by the
        :mod:`piebridge.catalog` discovery functions.

        Nothing is resolved when the binding is created. The path is
        looked up against the live target every time the binding is used,
        so a binding to a member that does not exist (yet) is legal, and
        will start working once the member appears.

        :ivar path: The persisted member path; the empty string if no member
                    has been selected.
    """

    def __init__(self, target=None, path=''):

        if path is None:
            path = ''

        self.path = str(path)
        self._reference = None
        self.target = target


    def __bool__(self):
        return self.path != ''


    def __repr__(self):
        return 'Binding(%r, %r)' % (self.target, self.path)


    @property
    def target(self):
        """ The object this binding refers to, or None if it was never set or
            no longer exists.
        """

        reference = self._reference

        if reference is None:
            return None

        return reference()


    @target.setter
    def target(self, target):

        if target is None:
            self._reference = None
        else:
            self._reference = weakref.ref(target)


    def resolve(self, kind=None):
        """ Resolve the binding into a (behavior, member name) tuple. Raises
            :class:`BindingError` if the target is gone, no member is
            selected, or the member cannot be found.
        """

        if self.path == '':
            raise BindingError('no member selected')

        target = self.target

        if target is None:
            raise BindingError('the target for ' + repr(self.path) + ' is gone')

        return catalog.resolve(target, self.path, kind)


    def invoke(self, *args):
        """ Invoke the bound action with the supplied arguments, and return
            whatever it returns. The arguments determine which kind of
            action is required.
        """

        if len(args) == 0:
            kind = catalog.Kind.ACTION
        else:
            kind = catalog.Kind.ACTION_WITH_VALUE

        behavior, member = self.resolve(kind)
        method = getattr(behavior, member)
        return method(*args)


    def read(self):
        """ Read the current value of the bound member.
        """

        behavior, member = self.resolve(catalog.Kind.READABLE)

        try:
            return getattr(behavior, member)
        except AttributeError as e:
            raise BindingError('cannot read %s: %s' % (self.path, e))


    def event(self):
        """ Return the bound :class:`Event` instance.
        """

        behavior, member = self.resolve(catalog.Kind.EVENT)
        event = getattr(behavior, member)

        if isinstance(event, Event):
            return event

        raise BindingError(repr(self.path) + ' is not an Event')


    def resolved(self, kind=None):
        """ Return True if the binding can currently be resolved, as a member
            of the given *kind* if one is specified.
        """

        try:
            self.resolve(kind)
        except BindingError:
            return False

        return True


# end of class Binding


class Call:
    """ Wrap a plain Python callable so that it can stand in for an action
        :class:`Binding` in a mapping. The callable is held by strong
        reference; it belongs to the mapping.
    """

    def __init__(self, method):

        if callable(method):
            pass
        else:
            raise TypeError('the action must be callable')

        self.method = method


    def __bool__(self):
        return True


    def __repr__(self):
        return 'Call(%r)' % (self.method,)


    def invoke(self, *args):
        return self.method(*args)


    def resolved(self, kind=None):
        return True


# end of class Call


def action(thing):
    """ Return *thing* as something with an :func:`invoke` method: a
        :class:`Binding` or :class:`Call` is returned as-is, a
        (target, path) tuple becomes a :class:`Binding`, and any other
        callable is wrapped in a :class:`Call`.
    """

    if isinstance(thing, (Binding, Call)):
        return thing

    if isinstance(thing, tuple) and len(thing) == 2:
        target, path = thing
        return Binding(target, path)

    if callable(thing):
        return Call(thing)

    raise TypeError('not a usable action: ' + repr(thing))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
