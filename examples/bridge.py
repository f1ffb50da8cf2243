""" Run a bridge between a remote peer and a pair of local test behaviors.
    Each line typed on standard input becomes the payload of the send
    tester, which then fires its event; an empty line fires it with the
    current payload. End of input stops the bridge.
"""

import logging
import os
import sys

import piebridge

import testers


here = os.path.dirname(os.path.abspath(__file__))


def main():
    import argparse

    parser = argparse.ArgumentParser(
        description='Bridge remote messages to local test behaviors'
    )
    parser.add_argument(
        '-c', '--config',
        help='Path to the mapping file (default: mappings.json next to this script)',
        default=os.path.join(here, 'mappings.json')
    )
    parser.add_argument(
        '-e', '--endpoint',
        help='Endpoint to connect to, overriding the mapping file',
        default=None
    )
    parser.add_argument(
        '-v', '--verbose',
        help='Log dispatching in detail',
        action='store_true'
    )

    args = parser.parse_args()

    if args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    receiver = testers.ReceiveTester()
    sender = testers.SendTester()
    cube = piebridge.Entity('Cube', (receiver, sender))

    objects = dict()
    objects[cube.name] = cube

    bridge = piebridge.Bridge.from_config(args.config, objects, args.endpoint)

    with bridge:
        for line in sys.stdin:
            line = line.rstrip('\n')

            if line != '':
                sender.set_payload(line)

            sender.trigger()


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
