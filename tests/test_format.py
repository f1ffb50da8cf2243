import decimal
import enum

import pytest

import piebridge


class Season(enum.Enum):
    WINTER = 1
    SUMMER = 2


def test_none_and_strings():
    assert piebridge.format.to_string(None) == ''
    assert piebridge.format.to_string('') == ''
    assert piebridge.format.to_string('winter') == 'winter'
    assert piebridge.format.to_string(' padded ') == ' padded '


def test_booleans():
    assert piebridge.format.to_string(True) == 'true'
    assert piebridge.format.to_string(False) == 'false'


def test_integers():
    assert piebridge.format.to_string(0) == '0'
    assert piebridge.format.to_string(42) == '42'
    assert piebridge.format.to_string(-7) == '-7'


@pytest.mark.parametrize('value,expected', (
    (1.0, '1'),
    (-1.0, '-1'),
    (0.0, '0'),
    (-0.0, '0'),
    (1.5, '1.5'),
    (0.1, '0.1'),
    (123.456, '123.456'),
    (1e20, '100000000000000000000'),
    (1e21, '1e+21'),
    (1.5e22, '1.5e+22'),
    (0.000001, '0.000001'),
    (1e-7, '1e-7'),
    (1.25e-10, '1.25e-10'),
    (float('nan'), 'NaN'),
    (float('inf'), 'Infinity'),
    (float('-inf'), '-Infinity'),
))
def test_floats(value, expected):
    assert piebridge.format.to_string(value) == expected


def test_decimal():
    assert piebridge.format.to_string(decimal.Decimal('2.50')) == '2.50'
    assert piebridge.format.to_string(decimal.Decimal('Infinity')) == 'Infinity'


def test_enumerations():
    assert piebridge.format.to_string(Season.WINTER) == 'WINTER'


def test_containers():
    assert piebridge.format.to_string([1, 'a']) == '[1,"a"]'
    assert piebridge.format.to_string({'a': 1}) == '{"a":1}'


def test_bytes():
    assert piebridge.format.to_string(b'abc') == 'abc'


def test_other_objects():

    class Thing:
        def __str__(self):
            return 'a thing'

    assert piebridge.format.to_string(Thing()) == 'a thing'


def test_numpy_scalars():
    numpy = pytest.importorskip('numpy')

    assert piebridge.format.to_string(numpy.float64(2.0)) == '2'
    assert piebridge.format.to_string(numpy.int32(5)) == '5'
    assert piebridge.format.to_string(numpy.bool_(True)) == 'true'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
