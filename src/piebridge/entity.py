class Entity:
    """ An :class:`Entity` is a named object composed of behaviors: plain
        Python objects attached in a specific order. It is the unit an
        operator selects when binding a mapping to something local; the
        :mod:`piebridge.catalog` enumerates the members of each attached
        behavior, in attach order.

        The *name* is descriptive only. The *behaviors*, if provided, are
        attached immediately, in the order given.
    """

    def __init__(self, name, behaviors=()):

        self.name = name
        self._behaviors = list()

        for behavior in behaviors:
            self.attach(behavior)


    def __contains__(self, behavior):
        for attached in self._behaviors:
            if attached is behavior:
                return True

        return False


    def __iter__(self):
        return iter(tuple(self._behaviors))


    def __len__(self):
        return len(self._behaviors)


    def __repr__(self):
        return 'Entity(%r)' % (self.name)


    def attach(self, behavior):
        """ Attach *behavior* to this entity; it will be the last in the
            iteration order. The same instance cannot be attached twice.
            The attached behavior is returned for convenience.
        """

        if behavior is None:
            raise ValueError('cannot attach None to ' + repr(self))

        if behavior in self:
            raise ValueError('behavior already attached to ' + repr(self))

        self._behaviors.append(behavior)
        return behavior


    @property
    def behaviors(self):
        """ A tuple of the attached behaviors, in attach order.
        """

        return tuple(self._behaviors)


    def detach(self, behavior):
        """ Remove *behavior* from this entity. Raises ValueError if it is
            not attached.
        """

        for index, attached in enumerate(self._behaviors):
            if attached is behavior:
                del self._behaviors[index]
                return

        raise ValueError('behavior not attached to ' + repr(self))


    def get(self, label):
        """ Return the first attached behavior whose class name matches
            *label*, or None if there is no such behavior.
        """

        for behavior in self._behaviors:
            if type(behavior).__name__ == label:
                return behavior

        return None


# end of class Entity


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
