import os

import pytest

import piebridge
from piebridge import Direction, Mapping, Mode, PayloadType


def test_directory(home):
    assert piebridge.config.directory() == str(home)
    assert piebridge.home() == str(home)


def test_directory_override(home, tmp_path):

    override = tmp_path / 'elsewhere'
    assert piebridge.config.directory(str(override)) == str(override)
    assert os.path.isdir(str(override))

    with pytest.raises(ValueError):
        piebridge.config.directory('relative/path')


def test_endpoint(home, monkeypatch):

    assert piebridge.config.endpoint() == 'tcp://localhost:9981'
    assert piebridge.config.endpoint('ipc:///tmp/bridge') == 'ipc:///tmp/bridge'

    monkeypatch.setenv('PIEBRIDGE_ENDPOINT', 'tcp://example.com:1234')
    assert piebridge.config.endpoint() == 'tcp://example.com:1234'


def test_path(home):
    assert piebridge.config.path() == os.path.join(str(home), 'mappings.json')
    assert piebridge.config.path('other.json') == os.path.join(str(home), 'other.json')
    assert piebridge.config.path('/absolute/file.json') == '/absolute/file.json'


def test_save_and_load(home, stage, button):

    objects = {'Stage': stage, 'Button': button}

    mappings = list()
    mappings.append(Mapping('colour', label='Colour', receive_mode=Mode.WITH_VALUE,
                            on_receive=[(stage, 'Lamp.switch_on')],
                            on_receive_with_value=[(stage, 'Lamp.set_colour')]))
    mappings.append(Mapping('count', label='Count', direction=Direction.SEND,
                            send_mode=Mode.WITH_VALUE, payload_type=PayloadType.DYNAMIC_VARIABLE,
                            target=button, event='Button.clicked', static_value='inert',
                            source=stage, variable='Button.presses'))

    filename = piebridge.config.save(mappings, objects=objects, endpoint='loopback://')
    assert filename == os.path.join(str(home), 'mappings.json')

    loaded = piebridge.config.load(objects=objects)
    assert loaded.endpoint == 'loopback://'
    assert len(loaded) == 2

    first, second = loaded.mappings

    assert first.label == 'Colour'
    assert first.message_id == 'colour'
    assert first.direction == Direction.RECEIVE
    assert first.receive_mode == Mode.WITH_VALUE
    assert first.on_receive[0].target is stage
    assert first.on_receive[0].path == 'Lamp.switch_on'
    assert first.on_receive_with_value[0].path == 'Lamp.set_colour'

    assert second.direction == Direction.SEND
    assert second.send_mode == Mode.WITH_VALUE
    assert second.payload_type == PayloadType.DYNAMIC_VARIABLE
    assert second.target is button
    assert second.event.path == 'Button.clicked'
    assert second.static_value == 'inert'
    assert second.source is stage
    assert second.variable.path == 'Button.presses'


def test_file_format(home, stage):

    mappings = [Mapping('on', label='On', on_receive=[(stage, 'Lamp.switch_on')])]
    piebridge.config.save(mappings, 'format.json', objects={'Stage': stage})

    raw = open(os.path.join(str(home), 'format.json'), 'rb').read()
    saved = piebridge.json.loads(raw)

    assert 'endpoint' not in saved

    block = saved['mappings'][0]
    assert block['mappingLabel'] == 'On'
    assert block['messageId'] == 'on'
    assert block['direction'] == 'Receive'
    assert block['receiveMode'] == 'TriggerOnly'
    assert block['onReceive'] == [{'targetObject': 'Stage', 'methodName': 'Lamp.switch_on'}]
    assert block['onReceiveWithValue'] == []
    assert block['targetObject'] is None
    assert block['eventToListenTo'] == ''
    assert block['sendMode'] == 'TriggerOnly'
    assert block['payloadType'] == 'StaticString'
    assert block['staticPayloadValue'] == ''
    assert block['variableSourceObject'] is None
    assert block['variableName'] == ''


def test_entity_names(home, stage):
    """ An Entity is saved under its own name when it is not listed in the
        objects dictionary.
    """

    mappings = [Mapping('on', on_receive=[(stage, 'Lamp.switch_on')])]
    piebridge.config.save(mappings)

    loaded = piebridge.config.load(objects={'Stage': stage})
    assert loaded.mappings[0].on_receive[0].target is stage


def test_unknown_objects(home, stage):

    mappings = [Mapping('on', on_receive=[(stage, 'Lamp.switch_on')])]
    piebridge.config.save(mappings, objects={'Stage': stage})

    loaded = piebridge.config.load()
    action = loaded.mappings[0].on_receive[0]

    assert action.target is None
    assert action.path == 'Lamp.switch_on'
    assert action.resolved() == False


def test_callables_not_saved(home):

    mappings = [Mapping('on', on_receive=[print])]
    piebridge.config.save(mappings)

    loaded = piebridge.config.load()
    assert loaded.mappings[0].on_receive == []


def test_save_configuration(home):

    configuration = piebridge.config.Configuration([Mapping('a')], 'tcp://localhost:1')
    piebridge.config.save(configuration)

    loaded = piebridge.config.load()
    assert loaded.endpoint == 'tcp://localhost:1'
    assert [entry.message_id for entry in loaded] == ['a']


def test_defaults_for_missing_fields(home):

    loaded = piebridge.config.Configuration.from_dict({'mappings': [{'messageId': 'x'}]})
    entry = loaded.mappings[0]

    assert entry.label == 'NewLabel'
    assert entry.direction == Direction.RECEIVE
    assert entry.receive_mode == Mode.TRIGGER_ONLY


def test_malformed(home):

    with pytest.raises(ValueError):
        piebridge.config.Configuration.from_dict([])

    with pytest.raises(ValueError):
        piebridge.config.Configuration.from_dict({'mappings': {}})

    with pytest.raises(ValueError):
        piebridge.config.Configuration.from_dict({'mappings': ['not an object']})

    with pytest.raises(ValueError):
        piebridge.config.Configuration.from_dict({'mappings': [{'direction': 'Sideways'}]})

    filename = os.path.join(str(home), 'broken.json')
    writer = open(filename, 'w')
    writer.write('{"mappings": [')
    writer.close()

    with pytest.raises(ValueError):
        piebridge.config.load('broken.json')


def test_missing_file(home):

    with pytest.raises(FileNotFoundError):
        piebridge.config.load('absent.json')


def test_directory_from_home(tmp_path, monkeypatch):

    monkeypatch.delenv('PIEBRIDGE_HOME', raising=False)
    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.setattr(piebridge.config.directory, 'found', None)

    assert piebridge.config.directory() == os.path.join(str(tmp_path), '.piebridge')


def test_directory_without_environment(monkeypatch):

    monkeypatch.delenv('PIEBRIDGE_HOME', raising=False)
    monkeypatch.delenv('HOME', raising=False)
    monkeypatch.setattr(piebridge.config.directory, 'found', None)

    with pytest.raises(RuntimeError):
        piebridge.config.directory()


def test_numeric_message_id(home, lamp):
    """ A numeric message id in a mapping file matches the same number
        arriving on the wire.
    """

    block = {'messageId': 5, 'onReceive': [{'targetObject': 'Lamp', 'methodName': 'Lamp.switch_on'}]}
    loaded = piebridge.config.Configuration.from_dict({'mappings': [block]}, {'Lamp': lamp})

    assert loaded.mappings[0].message_id == '5'

    dispatcher = piebridge.Dispatcher(loaded.mappings)
    assert dispatcher.dispatch_inbound(b'{"messageId": 5}') == 1
    assert lamp.calls == ['on']


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
