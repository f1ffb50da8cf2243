import pytest

import piebridge

from behaviors import Lamp


def test_attach_order(lamp, button):

    entity = piebridge.Entity('Stage')
    entity.attach(button)
    entity.attach(lamp)

    assert entity.behaviors == (button, lamp)
    assert list(entity) == [button, lamp]
    assert len(entity) == 2
    assert lamp in entity


def test_attach_returns_behavior(lamp):

    entity = piebridge.Entity('Stage')
    assert entity.attach(lamp) is lamp


def test_attach_twice(lamp):

    entity = piebridge.Entity('Stage', (lamp,))

    with pytest.raises(ValueError):
        entity.attach(lamp)

    with pytest.raises(ValueError):
        entity.attach(None)

    # A different instance of the same class is fine.

    entity.attach(Lamp())
    assert len(entity) == 2


def test_detach(stage, lamp, button):

    stage.detach(lamp)
    assert stage.behaviors == (button,)
    assert lamp not in stage

    with pytest.raises(ValueError):
        stage.detach(lamp)


def test_get(stage, lamp, button):

    assert stage.get('Lamp') is lamp
    assert stage.get('Button') is button
    assert stage.get('Speaker') is None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
