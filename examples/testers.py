""" Simple local behaviors for exercising a bridge by hand. Attach them to an
    :class:`piebridge.Entity` and bind mappings to their members.
"""

import logging

import piebridge

logger = logging.getLogger(__name__)


colours = dict()
colours['red'] = (1.0, 0.0, 0.0)
colours['green'] = (0.0, 1.0, 0.0)
colours['blue'] = (0.0, 0.0, 1.0)
colours['yellow'] = (1.0, 0.92, 0.016)
colours['black'] = (0.0, 0.0, 0.0)
colours['white'] = (1.0, 1.0, 1.0)


def parse_colour(value):
    """ Return an (r, g, b) tuple of floats for *value*, which can be a
        colour word or an HTML-style ``#rrggbb`` (or ``#rgb``) string.
        Returns None if the value is not recognized.
    """

    if value is None:
        return None

    value = value.strip().lower()

    try:
        return colours[value]
    except KeyError:
        pass

    if value.startswith('#') == False:
        return None

    digits = value[1:]

    if len(digits) == 3:
        digits = ''.join(digit * 2 for digit in digits)

    if len(digits) != 6:
        return None

    try:
        channels = [int(digits[index:index + 2], 16) for index in (0, 2, 4)]
    except ValueError:
        return None

    return tuple(channel / 255.0 for channel in channels)


class ReceiveTester:
    """ Bind *message_received* to a TriggerOnly mapping, and
        *message_with_value_received* to a WithValue mapping. A value that
        looks like a colour changes the :attr:`colour` of the tester.
    """

    def __init__(self):
        self.colour = colours['white']
        self.received = 0


    def message_received(self):
        self.received += 1
        logger.info('receive tester: triggered without a value')


    def message_with_value_received(self, value: str):
        self.received += 1
        logger.info('receive tester: triggered with value %r', value)

        colour = parse_colour(value)

        if colour is not None:
            self.colour = colour
            logger.info('receive tester: colour changed to %s', value)


# end of class ReceiveTester


class SendTester:
    """ Bind a Send mapping to the *send_triggered* event, and optionally
        to the *payload* as its variable. Calling :func:`trigger` fires the
        event.
    """

    def __init__(self, payload='Hello from Python!'):
        self.send_triggered = piebridge.Event()
        self.payload = payload


    def set_payload(self, value: str):
        self.payload = value
        logger.info('send tester: payload updated to %r', value)


    def trigger(self):
        logger.info('send tester: invoking send event')
        self.send_triggered.invoke()


# end of class SendTester


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
