""" Conversion of local values to the string payloads carried on the wire.
    The remote side only ever sees strings; numbers and booleans are rendered
    here, the same way regardless of the locale of the host process. Numbers
    are rendered the way an ECMAScript runtime would render them, since that
    is what the remote side runs on.
"""

import decimal
import enum
import math

try:
    import numpy
except ImportError:
    numpy = None

from . import json


def to_string(value):
    """ Return the canonical wire representation of *value*. None becomes the
        empty string; strings are passed through untouched.
    """

    if value is None:
        return ''

    if isinstance(value, str):
        return value

    if numpy is not None and isinstance(value, numpy.generic):
        value = value.item()
        return to_string(value)

    # bool is checked before int, since True is also an int.

    if isinstance(value, bool):
        if value == True:
            return 'true'
        else:
            return 'false'

    if isinstance(value, enum.Enum):
        return value.name

    if isinstance(value, int):
        return str(int(value))

    if isinstance(value, float):
        return format_float(value)

    if isinstance(value, decimal.Decimal):
        if value.is_finite():
            return format(value, 'f')
        return format_float(float(value))

    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('utf-8', errors='replace')

    if isinstance(value, (list, tuple, dict)):
        return json.dumps_text(value)

    return str(value)


def format_float(value):
    """ Render a float following ECMAScript Number::toString: the shortest
        sequence of digits that round-trips, plain notation between 1e-7 and
        1e21, exponential notation outside that range.
    """

    if math.isnan(value):
        return 'NaN'

    if math.isinf(value):
        if value > 0:
            return 'Infinity'
        else:
            return '-Infinity'

    if value == 0:
        return '0'

    if value < 0:
        return '-' + format_float(-value)

    # repr() already produces the shortest round-trip digits; Decimal is just
    # a convenient way to pull those digits and the exponent apart.

    shortest = decimal.Decimal(repr(value)).normalize()
    sign, digits, exponent = shortest.as_tuple()
    digits = ''.join(str(digit) for digit in digits)

    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        return digits + '0' * (n - k)

    if 0 < n <= 21:
        return digits[:n] + '.' + digits[n:]

    if -6 < n <= 0:
        return '0.' + '0' * (-n) + digits

    e = n - 1
    if e > 0:
        e = '+' + str(e)
    else:
        e = '-' + str(-e)

    if k == 1:
        return digits + 'e' + e
    else:
        return digits[0] + '.' + digits[1:] + 'e' + e


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
