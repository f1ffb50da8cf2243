""" Configuration handling: where configuration files live, which endpoint
    to connect to, and persistence of mapping tables as JSON files.

    A mapping table on disk looks like::

        {"endpoint": "tcp://localhost:9981",
         "mappings": [{"mappingLabel": "Light", "messageId": "light", ...}]}

    Objects cannot be written to a file; every object reference in a
    mapping is stored as a name instead, and resolved against the *objects*
    dictionary supplied when the file is loaded.
"""

import logging
import os

from . import binding
from . import json
from . import mapping

logger = logging.getLogger(__name__)

default_endpoint = 'tcp://localhost:9981'
default_filename = 'mappings.json'


class Configuration:
    """ A loaded (or about to be saved) mapping table, along with the
        *endpoint* it should be connected to. The *objects* dictionary maps
        names to the objects referenced by the mappings.
    """

    def __init__(self, mappings=(), endpoint=None, objects=None):

        if objects is None:
            objects = dict()

        self.mappings = list(mappings)
        self.endpoint = endpoint
        self.objects = objects


    def __len__(self):
        return len(self.mappings)


    def __iter__(self):
        return iter(self.mappings)


    def to_dict(self):
        """ Return the JSON-ready dictionary representation of this
            configuration.
        """

        names = _names(self.objects)
        blocks = list()

        for entry in self.mappings:
            blocks.append(to_dict(entry, names))

        result = dict()
        if self.endpoint is not None:
            result['endpoint'] = self.endpoint
        result['mappings'] = blocks

        return result


    @classmethod
    def from_dict(cls, configuration, objects=None):
        """ Build a :class:`Configuration` from its dictionary representation.
            Raises ValueError if the dictionary is not shaped correctly.
        """

        if isinstance(configuration, dict):
            pass
        else:
            raise ValueError('configuration must be a JSON object')

        if objects is None:
            objects = dict()

        try:
            blocks = configuration['mappings']
        except KeyError:
            blocks = list()

        if isinstance(blocks, list):
            pass
        else:
            raise ValueError('the mappings must be a JSON array')

        endpoint = configuration.get('endpoint')
        mappings = list()

        for block in blocks:
            mappings.append(from_dict(block, objects))

        return cls(mappings, endpoint, objects)


# end of class Configuration



def directory(default=None):
    """ Return the directory configuration files are loaded from and saved
        to. Passing an absolute path as *default* selects (and creates)
        that directory for the remainder of the process. Otherwise the
        ``PIEBRIDGE_HOME`` environment variable is used, falling back to
        ``.piebridge`` in the user's home directory. The answer is decided
        once, on first use; later changes to the environment are ignored.
    """

    if default is not None:
        chosen = _prepare(default)
        os.environ['PIEBRIDGE_HOME'] = chosen
        directory.found = chosen

    if directory.found is None:
        directory.found = _locate()

    return directory.found

directory.found = None



def _prepare(location):
    """ Validate and create the explicitly chosen configuration directory.
    """

    location = os.path.expandvars(str(location))

    if os.path.isabs(location) == False:
        raise ValueError('the configuration directory must be an absolute path: ' + repr(location))

    os.makedirs(location, mode=0o775, exist_ok=True)
    return location



def _locate():
    """ Find the configuration directory from the environment.
    """

    for variable, suffix in (('PIEBRIDGE_HOME', None), ('HOME', '.piebridge')):
        try:
            found = os.environ[variable]
        except KeyError:
            continue

        if suffix is None:
            return found
        else:
            return os.path.join(found, suffix)

    raise RuntimeError('neither PIEBRIDGE_HOME nor HOME is set, cannot determine the configuration directory')



def endpoint(default=None):
    """ Return the endpoint to connect to: *default* if specified, otherwise
        the ``PIEBRIDGE_ENDPOINT`` environment variable, otherwise
        ``tcp://localhost:9981``.
    """

    if default is not None:
        return default

    try:
        return os.environ['PIEBRIDGE_ENDPOINT']
    except KeyError:
        return default_endpoint



def path(name=None):
    """ Return the full path to the mapping file *name*. Relative names are
        relative to :func:`directory`; the default name is ``mappings.json``.
    """

    if name is None:
        name = default_filename

    name = os.path.expanduser(str(name))

    if os.path.isabs(name):
        return name

    return os.path.join(directory(), name)



def load(filename=None, objects=None):
    """ Load a :class:`Configuration` from *filename*. Object names in the
        file are resolved via the *objects* dictionary; names that are not
        present load as unresolved bindings. Raises ValueError if the file
        does not contain a valid configuration.
    """

    target_filename = path(filename)

    raw_json = open(target_filename, 'rb').read()

    try:
        configuration = json.loads(raw_json)
    except json.DecodeError as e:
        raise ValueError('cannot parse ' + target_filename + ': ' + str(e))

    loaded = Configuration.from_dict(configuration, objects)
    logger.info('loaded %d mappings from %s', len(loaded), target_filename)
    return loaded



def save(configuration, filename=None, objects=None, endpoint=None):
    """ Save *configuration* to *filename*. The *configuration* can be a
        :class:`Configuration` instance, or a sequence of mappings; in the
        latter case the *objects* dictionary supplies the names to use for
        the objects the mappings refer to. Returns the filename written.
    """

    if isinstance(configuration, Configuration):
        if objects is not None:
            configuration.objects = objects
        if endpoint is not None:
            configuration.endpoint = endpoint
    else:
        configuration = Configuration(configuration, endpoint, objects)

    target_filename = path(filename)
    target_directory = os.path.dirname(target_filename)

    if target_directory != '' and os.path.exists(target_directory) == False:
        os.makedirs(target_directory, mode=0o775)

    raw_json = json.dumps(configuration.to_dict())

    writer = open(target_filename, 'wb')
    writer.write(raw_json)
    writer.close()

    logger.info('saved %d mappings to %s', len(configuration), target_filename)
    return target_filename



def to_dict(entry, names=None):
    """ Return the dictionary representation of one
        :class:`piebridge.mapping.Mapping`. Every field is included,
        whether or not it applies to the direction of the mapping. The
        *names* dictionary maps id() of each referenced object to its name.
    """

    if names is None:
        names = dict()

    block = dict()
    block['mappingLabel'] = entry.label
    block['messageId'] = entry.message_id
    block['direction'] = entry.direction.value
    block['receiveMode'] = entry.receive_mode.value
    block['onReceive'] = _actions_to_list(entry, entry.on_receive, names)
    block['onReceiveWithValue'] = _actions_to_list(entry, entry.on_receive_with_value, names)
    block['targetObject'] = _name(entry, entry.target, names)
    block['eventToListenTo'] = entry.event.path
    block['sendMode'] = entry.send_mode.value
    block['payloadType'] = entry.payload_type.value
    block['staticPayloadValue'] = entry.static_value
    block['variableSourceObject'] = _name(entry, entry.source, names)
    block['variableName'] = entry.variable.path

    return block



def from_dict(block, objects=None):
    """ Return a new :class:`piebridge.mapping.Mapping` from its dictionary
        representation. Missing fields take their default values; unknown
        enumeration values raise ValueError.
    """

    if isinstance(block, dict):
        pass
    else:
        raise ValueError('each mapping must be a JSON object: ' + repr(block))

    if objects is None:
        objects = dict()

    label = block.get('mappingLabel', 'NewLabel')

    arguments = dict()
    arguments['label'] = label
    arguments['message_id'] = block.get('messageId', '')
    arguments['direction'] = block.get('direction', mapping.Direction.RECEIVE)
    arguments['receive_mode'] = block.get('receiveMode', mapping.Mode.TRIGGER_ONLY)
    arguments['on_receive'] = _actions_from_list(label, block.get('onReceive'), objects)
    arguments['on_receive_with_value'] = _actions_from_list(label, block.get('onReceiveWithValue'), objects)
    arguments['target'] = _object(label, block.get('targetObject'), objects)
    arguments['event'] = block.get('eventToListenTo', '')
    arguments['send_mode'] = block.get('sendMode', mapping.Mode.TRIGGER_ONLY)
    arguments['payload_type'] = block.get('payloadType', mapping.PayloadType.STATIC_STRING)
    arguments['static_value'] = block.get('staticPayloadValue', '')
    arguments['source'] = _object(label, block.get('variableSourceObject'), objects)
    arguments['variable'] = block.get('variableName', '')

    return mapping.Mapping(**arguments)



def _names(objects):

    names = dict()

    if objects is None:
        return names

    for name, thing in objects.items():
        names[id(thing)] = name

    return names



def _name(entry, thing, names):
    """ Return the name to persist for the object *thing*.
    """

    if thing is None:
        return None

    try:
        return names[id(thing)]
    except KeyError:
        pass

    # Fall back to the object's own name, which is what an Entity carries.

    name = getattr(thing, 'name', None)

    if isinstance(name, str) and name != '':
        return name

    logger.warning('%s: no name for %r, the reference will not be saved', entry.label, thing)
    return None



def _object(label, name, objects):
    """ Return the object known by *name*, or None.
    """

    if name is None or name == '':
        return None

    try:
        return objects[name]
    except KeyError:
        logger.warning('%s: unknown object %r, binding left unresolved', label, name)
        return None



def _actions_to_list(entry, actions, names):

    persisted = list()

    for action in actions:
        if isinstance(action, binding.Binding):
            persisted.append({'targetObject': _name(entry, action.target, names),
                              'methodName': action.path})
        else:
            logger.warning('%s: %r cannot be saved, skipping it', entry.label, action)

    return persisted



def _actions_from_list(label, persisted, objects):

    if persisted is None:
        return list()

    if isinstance(persisted, list):
        pass
    else:
        raise ValueError(label + ': the actions must be a JSON array')

    actions = list()

    for block in persisted:
        if isinstance(block, dict):
            pass
        else:
            raise ValueError(label + ': each action must be a JSON object: ' + repr(block))

        target = _object(label, block.get('targetObject'), objects)
        path = block.get('methodName', '')
        actions.append(binding.Binding(target, path))

    return actions


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
