import weakref


class _Strong:
    """ Stand-in for a weak reference to an object that does not support
        weak references, such as a builtin function. It behaves like a
        reference that never expires.
    """

    def __init__(self, thing):
        self.thing = thing

    def __call__(self):
        return self.thing

    def __eq__(self, other):
        if isinstance(other, _Strong):
            return self.thing is other.thing
        return NotImplemented

    def __hash__(self):
        return id(self.thing)


def ref(thing):
    """ Return a weak reference to the supplied argument, regardless of
        whether it is a simple object or a bound method. Objects that cannot
        be weakly referenced get a strong reference with the same calling
        convention; dereferencing it always returns the original object.
    """

    try:
        thing.__func__
        thing.__self__
    except AttributeError:
        pass
    else:
        return weakref.WeakMethod(thing)

    try:
        return weakref.ref(thing)
    except TypeError:
        return _Strong(thing)


def alive(reference):
    """ Return True if the *reference* still points at something.
    """

    if reference is None:
        return False

    return reference() is not None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
