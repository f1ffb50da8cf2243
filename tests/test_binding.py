import pytest

import piebridge
from piebridge.binding import Binding, Call, action
from piebridge.catalog import BindingError, Kind

from behaviors import Lamp


def test_invoke(lamp):

    Binding(lamp, 'Lamp.switch_on').invoke()
    Binding(lamp, 'Lamp.set_colour').invoke('red')

    assert lamp.calls == ['on', ('colour', 'red')]
    assert lamp.colour == 'red'


def test_invoke_wrong_arity(lamp):

    with pytest.raises(BindingError):
        Binding(lamp, 'Lamp.switch_on').invoke('unexpected')

    with pytest.raises(BindingError):
        Binding(lamp, 'Lamp.set_colour').invoke()

    assert lamp.calls == []


def test_read(stage, lamp, button):

    lamp.brightness = 11
    assert Binding(stage, 'Lamp.brightness').read() == 11

    button.press()
    assert Binding(stage, 'Button.pressed_count').read() == 1


def test_read_is_fresh(lamp):

    binding = Binding(lamp, 'Lamp.colour')

    lamp.colour = 'blue'
    assert binding.read() == 'blue'

    lamp.colour = 'green'
    assert binding.read() == 'green'


def test_event(button):

    event = Binding(button, 'Button.clicked').event()
    assert event is button.clicked

    with pytest.raises(BindingError):
        Binding(button, 'Button.payload').event()


def test_empty_binding(lamp):

    binding = Binding(lamp)
    assert bool(binding) == False
    assert binding.resolved() == False

    with pytest.raises(BindingError):
        binding.invoke()


def test_target_held_weakly():

    lamp = Lamp()
    binding = Binding(lamp, 'Lamp.switch_on')
    assert binding.resolved(Kind.ACTION)

    del lamp

    assert binding.target is None
    assert binding.resolved() == False

    with pytest.raises(BindingError):
        binding.invoke()


def test_late_binding(stage):
    """ A binding to a member that does not exist yet is legal, and starts
        working as soon as the member appears.
    """

    binding = Binding(stage, 'Lamp.switch_on')
    lamp = stage.get('Lamp')
    stage.detach(lamp)

    assert binding.resolved() == False

    stage.attach(lamp)
    assert binding.resolved()

    binding.invoke()
    assert lamp.calls == ['on']


def test_action_normalization(lamp):

    received = list()

    assert isinstance(action((lamp, 'Lamp.switch_on')), Binding)
    assert isinstance(action(received.append), Call)

    existing = Binding(lamp, 'Lamp.switch_on')
    assert action(existing) is existing

    action(received.append).invoke('value')
    assert received == ['value']

    with pytest.raises(TypeError):
        action('Lamp.switch_on')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
