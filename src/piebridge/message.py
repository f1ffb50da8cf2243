""" The on-the-wire representation of a bridge message. A single unit looks
    like this::

        {"messageId": "ChangeSeason", "value": "winter"}

    Inbound frames carry either one such object, or an array of them; each
    element of an array is handled independently. Outbound frames always
    carry a single unit.
"""

from . import format
from . import json


class ParseError(ValueError):
    """ An inbound frame, or one unit within a frame, could not be
        interpreted as a message.
    """


class Message:
    """ A single named message, with an optional string *value*. The
        *value* can be None; an outbound message with no value is sent
        with an empty string.
    """

    def __init__(self, message_id, value=None):
        self.message_id = message_id
        self.value = value


    def __eq__(self, other):
        if isinstance(other, Message):
            return self.message_id == other.message_id and self.value == other.value
        return NotImplemented


    def __hash__(self):
        return hash((self.message_id, self.value))


    def __repr__(self):
        return 'Message(%r, %r)' % (self.message_id, self.value)


    def encode(self):
        """ Return the JSON encoding of this message, as bytes.
        """

        return json.dumps(self.to_dict())


    def to_dict(self):

        value = self.value
        if value is None:
            value = ''

        return {'messageId': self.message_id, 'value': value}


# end of class Message


def decode(raw):
    """ Decode a raw inbound frame. Bytes and strings are parsed as JSON;
        anything else is assumed to be decoded already, and is returned
        as-is.
    """

    if isinstance(raw, (bytes, bytearray, memoryview)):
        raw = bytes(raw)
    elif isinstance(raw, str):
        pass
    else:
        return raw

    try:
        return json.loads(raw)
    except json.DecodeError as e:
        raise ParseError('malformed JSON frame: ' + str(e))


def units(decoded):
    """ Return the sequence of message units in a *decoded* frame: the
        elements of an array, or the frame itself if it is a single object.
        A frame of None, an empty frame, contains nothing.
    """

    if decoded is None:
        return ()

    if isinstance(decoded, (list, tuple)):
        return decoded

    if isinstance(decoded, dict):
        return (decoded,)

    raise ParseError('frame is neither an object nor an array: ' + repr(decoded))


def _scalar(unit, key):

    value = unit.get(key)

    if value is None:
        return None

    if isinstance(value, (dict, list)):
        raise ParseError('%r must be a string, not %s' % (key, type(value).__name__))

    return format.to_string(value)


def parse(unit):
    """ Interpret a single decoded *unit* as a :class:`Message`. Returns None
        if the unit has no message id, or an empty one; such units are
        dropped without comment. Raises :class:`ParseError` if the unit is
        not an object, or if its fields are not simple values.
    """

    if isinstance(unit, dict):
        pass
    else:
        raise ParseError('message is not an object: ' + repr(unit))

    message_id = _scalar(unit, 'messageId')

    if message_id is None or message_id == '':
        return None

    value = _scalar(unit, 'value')
    return Message(message_id, value)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
