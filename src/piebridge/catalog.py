""" Discovery of bindable members. Given a target object, the functions here
    enumerate what an operator can bind a mapping to: actions that take no
    arguments, actions that take a single string argument, readable data
    members, and :class:`piebridge.Event` slots.

    A target is either an :class:`piebridge.Entity`, in which case each of
    its attached behaviors is inspected in attach order, or any other object,
    which is treated as a single behavior. Members are identified by a path
    of the form ``Owner.member``, where ``Owner`` is the class name of the
    behavior; only the path string is persisted, and it is resolved against
    the live target via :func:`resolve` each time it is used.

    Everything in this module is a read-only query. Reading a property is
    the only way a query can run code on the target, and properties are
    never read here; they are classified by their declaration alone.
"""

import collections
import enum
import functools
import inspect
import types
import typing

from .entity import Entity
from .event import Event


class BindingError(RuntimeError):
    """ A binding reference could not be resolved against its target.
    """


class Kind(enum.Enum):
    ACTION = 'Action0'
    ACTION_WITH_VALUE = 'Action1String'
    READABLE = 'ReadableField'
    EVENT = 'Event'


class Entry(collections.namedtuple('Entry', ('owner', 'member', 'kind'))):
    """ One bindable member, as presented to an operator. The *owner* is the
        behavior label, the *member* is the attribute name, and the *kind*
        is a :class:`Kind` value.
    """

    __slots__ = ()

    @property
    def path(self):
        return self.owner + '.' + self.member


_empty = frozenset()
_readable = frozenset((Kind.READABLE,))
_event = frozenset((Kind.EVENT,))

_union_type = getattr(types, 'UnionType', None)

# Annotations that will happily accept a string argument, in the textual
# form they take with postponed evaluation of annotations. Whitespace is
# removed before comparison.

_string_annotations = frozenset((
    'str',
    'Optional[str]',
    'typing.Optional[str]',
    'Union[str,None]',
    'typing.Union[str,None]',
    'str|None',
    'None|str',
    'Any',
    'typing.Any',
    'object',
))


def behaviors(target):
    """ Return the behaviors of *target*, in a stable order.
    """

    if target is None:
        return ()

    if isinstance(target, Entity):
        return target.behaviors

    return (target,)


def label(behavior):
    """ Return the owner label used in binding paths for *behavior*.
    """

    return type(behavior).__name__


def hidden(name):
    return name.startswith('_')


def accepts_string(annotation):
    """ Return True if a parameter with the given *annotation* can be passed
        a string. Unannotated parameters are assumed to accept anything.
    """

    if annotation is inspect.Parameter.empty:
        return True

    if isinstance(annotation, str):
        annotation = annotation.replace(' ', '')
        return annotation in _string_annotations

    if annotation is str or annotation is object or annotation is typing.Any:
        return True

    origin = typing.get_origin(annotation)

    if origin is typing.Union or (_union_type is not None and origin is _union_type):
        arguments = set(typing.get_args(annotation))
        if str in arguments and arguments <= set((str, type(None))):
            return True

    return False


def arity(method):
    """ Classify a callable by how it can be invoked: a frozenset containing
        :attr:`Kind.ACTION` if it can be called with no arguments, and/or
        :attr:`Kind.ACTION_WITH_VALUE` if it can be called with a single
        string argument. The set is empty for anything else, including
        callables whose signature cannot be determined.
    """

    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        return _empty

    positional = list()
    variadic = False

    for parameter in signature.parameters.values():
        if parameter.kind == parameter.POSITIONAL_ONLY or parameter.kind == parameter.POSITIONAL_OR_KEYWORD:
            positional.append(parameter)
        elif parameter.kind == parameter.VAR_POSITIONAL:
            variadic = True
        elif parameter.kind == parameter.KEYWORD_ONLY:
            if parameter.default is parameter.empty:
                return _empty

    required = 0
    for parameter in positional:
        if parameter.default is parameter.empty:
            required += 1

    kinds = set()

    if required == 0:
        kinds.add(Kind.ACTION)

    if required <= 1:
        if positional:
            if accepts_string(positional[0].annotation):
                kinds.add(Kind.ACTION_WITH_VALUE)
        elif variadic:
            kinds.add(Kind.ACTION_WITH_VALUE)

    return frozenset(kinds)


def _returns_event(getter):

    try:
        returned = getter.__annotations__['return']
    except (AttributeError, KeyError):
        return False

    return returned is Event or returned == 'Event'


def classify(behavior, name):
    """ Return the frozenset of :class:`Kind` values that apply to the
        member *name* of *behavior*. The set is empty if the member does not
        exist, or cannot be bound to at all.
    """

    try:
        static = inspect.getattr_static(behavior, name)
    except AttributeError:
        return _empty

    # The order of these checks matters: an Event is callable, a property
    # is a data descriptor, and so on.

    if isinstance(static, Event):
        return _event

    if isinstance(static, property):
        if static.fget is None:
            return _empty
        if _returns_event(static.fget):
            return _event
        return _readable

    if isinstance(static, functools.cached_property):
        return _readable

    if inspect.isclass(static) or inspect.ismodule(static):
        return _empty

    if isinstance(static, (staticmethod, classmethod)) or inspect.isroutine(static):
        try:
            bound = getattr(behavior, name)
        except AttributeError:
            return _empty
        return arity(bound)

    if inspect.isdatadescriptor(static):
        return _readable

    # Anything else that is callable is a delegate of some kind: a callback
    # stored as an attribute, for example. Those are not data, and they are
    # not methods of the behavior either.

    if callable(static):
        return _empty

    return _readable


def members(behavior):
    """ Yield a (name, kinds) tuple for each bindable member of *behavior*.
        Class members come first, in declaration order, starting with the
        base-most class; instance attributes follow, in the order they were
        assigned. Repeated calls against an unchanged behavior yield the
        same sequence.
    """

    seen = set()

    for klass in reversed(type(behavior).__mro__):
        if klass is object:
            continue

        for name in tuple(vars(klass)):
            if name in seen or hidden(name):
                continue

            seen.add(name)
            kinds = classify(behavior, name)

            if kinds:
                yield name, kinds

    try:
        attributes = vars(behavior)
    except TypeError:
        # No __dict__, which is the case for objects using __slots__. The
        # slots themselves were already covered as class members.
        attributes = dict()

    for name in tuple(attributes):
        if name in seen or hidden(name):
            continue

        seen.add(name)
        kinds = classify(behavior, name)

        if kinds:
            yield name, kinds


def entries(target, kind):
    """ Return a list of :class:`Entry` instances for every member of
        *target* matching *kind*, across all of its behaviors.
    """

    kind = Kind(kind)
    found = list()

    for behavior in behaviors(target):
        if behavior is None:
            continue

        owner = label(behavior)

        for name, kinds in members(behavior):
            if kind in kinds:
                found.append(Entry(owner, name, kind))

    return found


def actions(target):
    """ Members of *target* that can be invoked with no arguments.
    """

    return entries(target, Kind.ACTION)


def actions_with_value(target):
    """ Members of *target* that can be invoked with one string argument.
    """

    return entries(target, Kind.ACTION_WITH_VALUE)


def readable(target):
    """ Data members and properties of *target*. Callables and event slots
        are excluded.
    """

    return entries(target, Kind.READABLE)


def events(target):
    """ :class:`piebridge.Event` slots on *target*.
    """

    return entries(target, Kind.EVENT)


def split(path):
    """ Split a binding *path* into its owner label and member name.
    """

    if path is None or path == '':
        raise BindingError('no member selected')

    owner, dot, member = path.partition('.')

    if dot == '' or owner == '' or member == '':
        raise BindingError('malformed binding path: ' + repr(path))

    return owner, member


def resolve(target, path, kind=None):
    """ Find the member identified by *path* on *target*, and return a
        (behavior, member name) tuple. If *kind* is specified the member
        must also be of that kind. Raises :class:`BindingError` if there
        is no such member; if more than one behavior matches the owner
        label, the first one with a matching member wins.
    """

    owner, member = split(path)

    if target is None:
        raise BindingError('the target for ' + repr(path) + ' is gone')

    if hidden(member):
        raise BindingError('not a bindable member: ' + repr(path))

    if kind is not None:
        kind = Kind(kind)

    for behavior in behaviors(target):
        if behavior is None or label(behavior) != owner:
            continue

        kinds = classify(behavior, member)

        if kind is None and kinds:
            return behavior, member

        if kind is not None and kind in kinds:
            return behavior, member

    raise BindingError('%s not found on %r' % (path, target))


class Picker:
    """ The list of choices an operator is presented with when binding a
        member of *target* of the given *kind*. The first option is always
        "None"; selecting it clears the binding.

        A :class:`Picker` never modifies a stored path. If a stored path is
        missing from a freshly computed list, :func:`index` reports the
        "None" option, but the stored string is left alone; if the member
        comes back later, the binding is restored without any further
        action.
    """

    none = 'None'

    def __init__(self, target, kind):

        self.kind = Kind(kind)
        self.entries = entries(target, self.kind)

        options = [self.none]
        labels = [self.none]

        for entry in self.entries:
            options.append(entry.path)
            labels.append(entry.member)

        self.options = tuple(options)
        self.labels = tuple(labels)


    def __len__(self):
        return len(self.options)


    def choose(self, index):
        """ Return the path to store when the operator selects the option
            at *index*. Selecting "None", or an index outside the list,
            returns the empty string.
        """

        if index is None or index <= 0 or index >= len(self.options):
            return ''

        return self.options[index]


    def index(self, stored):
        """ Return the index of the option matching the *stored* path; zero,
            the "None" option, if the stored path is empty or not present.
        """

        if stored is None or stored == '':
            return 0

        try:
            return self.options.index(stored, 1)
        except ValueError:
            return 0


    def resolved(self, stored):
        """ Return True if the *stored* path matches one of the options.
        """

        return self.index(stored) > 0


# end of class Picker


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
