""" Python implementation of a bidirectional message bridge. Named messages
    arriving from a remote peer invoke actions on local objects; events on
    local objects send named messages back to the peer. The association
    between the two is an ordered, editable table of mappings.
"""

# Utility components.

from . import json
from . import weakref
from . import format

# Submodules used by multiple other components.

from . import catalog
from . import message
from . import transport
from . import config
home = config.directory

from .event import Event
from .entity import Entity
from .binding import Binding

# Primary public-facing interfaces.

from . import mapping
from .mapping import Mapping, Direction, Mode, PayloadType
from .dispatch import Dispatcher
from .bridge import Bridge

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
