""" The mapping table: the operator-editable :class:`Mapping` records, the
    compiled route variants the dispatcher actually works with, and the
    :class:`Index` built from an ordered sequence of mappings.
"""

import enum
import logging

from . import binding
from . import catalog
from . import format

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    RECEIVE = 'Receive'
    SEND = 'Send'


class Mode(enum.Enum):
    TRIGGER_ONLY = 'TriggerOnly'
    WITH_VALUE = 'WithValue'


class PayloadType(enum.Enum):
    STATIC_STRING = 'StaticString'
    DYNAMIC_VARIABLE = 'DynamicVariable'


def coerce(enumeration, value):
    """ Return the member of *enumeration* described by *value*, which can be
        a member, a member value ('WithValue'), or a member name
        ('WITH_VALUE', case-insensitive). Raises ValueError otherwise.
    """

    if isinstance(value, enumeration):
        return value

    try:
        return enumeration(value)
    except ValueError:
        pass

    try:
        return enumeration[str(value).upper()]
    except KeyError:
        pass

    raise ValueError('invalid %s: %r' % (enumeration.__name__, value))


class Mapping:
    """ One row of configuration: the association of a *message_id* with
        local bindings, in one *direction*.

        A Receive mapping invokes the *on_receive* actions (no arguments)
        or the *on_receive_with_value* actions (one string argument) when
        a message with a matching id arrives, depending on *receive_mode*.
        Actions can be :class:`piebridge.Binding` instances, (target, path)
        tuples, or plain callables.

        A Send mapping listens to the *event* on the *target* object, and
        sends a message whenever it fires. The *send_mode* and
        *payload_type* determine the value sent: nothing, the
        *static_value*, or the current value of the *variable* member on
        the *source* object.

        All of the fields can be set regardless of the direction and modes.
        Fields that do not apply are simply ignored; they are retained so
        that switching a mapping back and forth does not lose anything.
    """

    def __init__(self, message_id='', label='NewLabel', direction=Direction.RECEIVE,
                 receive_mode=Mode.TRIGGER_ONLY, on_receive=(), on_receive_with_value=(),
                 target=None, event='', send_mode=Mode.TRIGGER_ONLY,
                 payload_type=PayloadType.STATIC_STRING, static_value='',
                 source=None, variable=''):

        self.label = label
        self.message_id = message_id
        self.direction = coerce(Direction, direction)

        self.receive_mode = coerce(Mode, receive_mode)
        self.on_receive = [binding.action(thing) for thing in on_receive]
        self.on_receive_with_value = [binding.action(thing) for thing in on_receive_with_value]

        self.event = binding.Binding(target, event)
        self.send_mode = coerce(Mode, send_mode)
        self.payload_type = coerce(PayloadType, payload_type)
        self.static_value = static_value
        self.variable = binding.Binding(source, variable)


    def __repr__(self):
        return 'Mapping(%r, %r, %s)' % (self.label, self.message_id, self.direction.value)


    @property
    def message_id(self):
        """ The message id, always a string (or None). Inbound ids are
            converted to strings before lookup, so a numeric id given here
            is converted the same way.
        """

        return self._message_id


    @message_id.setter
    def message_id(self, message_id):

        if message_id is not None:
            message_id = format.to_string(message_id)

        self._message_id = message_id


    @property
    def source(self):
        """ The object the dynamic payload is read from.
        """

        return self.variable.target


    @source.setter
    def source(self, source):
        self.variable.target = source


    @property
    def target(self):
        """ The object whose event is observed by a Send mapping.
        """

        return self.event.target


    @target.setter
    def target(self, target):
        self.event.target = target


    def compile(self):
        """ Return the route variant for this mapping, which only carries the
            fields relevant to its direction and modes.
        """

        if self.direction == Direction.RECEIVE:
            if self.receive_mode == Mode.TRIGGER_ONLY:
                return ReceiveTrigger(self, self.on_receive)
            else:
                return ReceiveValue(self, self.on_receive_with_value)

        if self.send_mode == Mode.TRIGGER_ONLY:
            return SendTrigger(self)

        if self.payload_type == PayloadType.STATIC_STRING:
            return SendStatic(self, self.static_value)
        else:
            return SendDynamic(self, self.variable)


# end of class Mapping



class Route:
    """ Base class for a compiled :class:`Mapping`. Subclasses are the
        individual variants; a route only holds what its variant needs.
    """

    direction = None

    def __init__(self, mapping):
        self.mapping = mapping
        self.label = mapping.label
        self.message_id = mapping.message_id


    def __repr__(self):
        return '%s(%r, %r)' % (type(self).__name__, self.label, self.message_id)


class Receive(Route):

    direction = Direction.RECEIVE

    def __init__(self, mapping, actions):
        Route.__init__(self, mapping)
        self.actions = tuple(actions)


    def arguments(self, value):
        """ Return the argument tuple used to invoke each action, given the
            *value* of the inbound message.
        """

        raise NotImplementedError


class ReceiveTrigger(Receive):

    def arguments(self, value):
        return ()


class ReceiveValue(Receive):

    def arguments(self, value):
        return (value,)


class Send(Route):

    direction = Direction.SEND

    def __init__(self, mapping):
        Route.__init__(self, mapping)
        self.event = mapping.event


    def payload(self):
        """ Return the string value to send. Raises
            :class:`piebridge.catalog.BindingError` if the value cannot be
            determined.
        """

        raise NotImplementedError


class SendTrigger(Send):

    def payload(self):
        return ''


class SendStatic(Send):

    def __init__(self, mapping, value):
        Send.__init__(self, mapping)
        self.value = format.to_string(value)


    def payload(self):
        return self.value


class SendDynamic(Send):

    def __init__(self, mapping, variable):
        Send.__init__(self, mapping)
        self.variable = variable


    def payload(self):

        # Always a fresh read, the value must reflect the current state of
        # the source at the time of the trigger.

        value = self.variable.read()
        return format.to_string(value)



class Index:
    """ The lookup index for an ordered sequence of :class:`Mapping`
        instances. For each message id, the first Receive mapping wins;
        later Receive mappings with the same id are never dispatched. The
        same goes for Send mappings. Mappings with no message id are not
        indexed at all.
    """

    def __init__(self, mappings=()):

        self.mappings = tuple(mappings)
        self.receive = dict()
        self.send = list()
        self._send_by_id = dict()
        self._routes = dict()

        for mapping in self.mappings:
            message_id = mapping.message_id

            if message_id is None or message_id == '':
                continue

            if mapping.direction == Direction.RECEIVE:
                if message_id in self.receive:
                    continue
                route = mapping.compile()
                self.receive[message_id] = route
            else:
                if message_id in self._send_by_id:
                    continue
                route = mapping.compile()
                self._send_by_id[message_id] = route
                self.send.append(route)

            self._routes[id(mapping)] = route


    def __contains__(self, message_id):
        return message_id in self.receive


    def __len__(self):
        return len(self.receive) + len(self.send)


    def lookup(self, message_id):
        """ Return the Receive route for *message_id*, or None if there is
            no such route.
        """

        return self.receive.get(message_id)


    def route(self, mapping):
        """ Return the compiled route for *mapping*, or None if the mapping
            is not active in this index: not part of it, shadowed by an
            earlier mapping with the same id, or lacking an id.
        """

        try:
            route = self._routes[id(mapping)]
        except KeyError:
            return None

        if route.mapping is mapping:
            return route

        return None


# end of class Index


def build(mappings):
    """ Build an :class:`Index` for the ordered sequence of *mappings*. Any
        problems found by :func:`validate` are logged as warnings; none of
        them prevent the index from being built.
    """

    mappings = tuple(mappings)

    for warning in validate(mappings):
        logger.warning(warning)

    return Index(mappings)


def validate(mappings):
    """ Check the ordered sequence of *mappings* for configuration problems
        and return a list of human-readable descriptions. Duplicate ids are
        reported since only the first of them is ever used; bindings that do
        not currently resolve are reported since they will do nothing.
    """

    warnings = list()
    seen = dict()

    for position, mapping in enumerate(mappings):
        name = '%s (#%d)' % (mapping.label, position)
        message_id = mapping.message_id

        if message_id is None or message_id == '':
            warnings.append(name + ': no message id, mapping is ignored')
            continue

        key = (mapping.direction, message_id)

        try:
            first = seen[key]
        except KeyError:
            seen[key] = name
        else:
            warnings.append('%s: duplicate %s id %r, shadowed by %s' % (name, mapping.direction.value, message_id, first))
            continue

        route = mapping.compile()

        if isinstance(route, ReceiveTrigger):
            for action in route.actions:
                if action.resolved(catalog.Kind.ACTION) == False:
                    warnings.append('%s: action %r does not resolve' % (name, action))
        elif isinstance(route, ReceiveValue):
            for action in route.actions:
                if action.resolved(catalog.Kind.ACTION_WITH_VALUE) == False:
                    warnings.append('%s: action %r does not resolve' % (name, action))
        else:
            if route.event and route.event.resolved(catalog.Kind.EVENT) == False:
                warnings.append('%s: event %r does not resolve' % (name, route.event))

            if isinstance(route, SendDynamic):
                try:
                    route.variable.resolve(catalog.Kind.READABLE)
                except catalog.BindingError as e:
                    warnings.append('%s: variable %r does not resolve: %s' % (name, route.variable.path, e))

    return warnings


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
