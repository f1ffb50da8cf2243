import pytest

import piebridge
import piebridge.transport.loopback

from behaviors import Button, Lamp


@pytest.fixture
def lamp():
    return Lamp()


@pytest.fixture
def button():
    return Button()


@pytest.fixture
def stage(lamp, button):
    return piebridge.Entity('Stage', (lamp, button))


@pytest.fixture
def loopback():

    handle = piebridge.transport.loopback.Loopback()
    handle.open()

    yield handle

    handle.close()


@pytest.fixture
def home(tmp_path, monkeypatch):
    """ Point the configuration directory at a temporary location for the
        duration of one test.
    """

    monkeypatch.setenv('PIEBRIDGE_HOME', str(tmp_path))
    monkeypatch.delenv('PIEBRIDGE_ENDPOINT', raising=False)
    monkeypatch.setattr(piebridge.config.directory, 'found', None)

    yield tmp_path


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
