import pytest

from flvreader.cursor import BufferCursor
from flvreader.errors import Truncated
from flvreader.primitives import *


def test_ui32():
    assert get_ui32(BufferCursor(b'\x02\x93\xd3\xde')) == 43242462
    assert make_ui32(3426345) == b'\x00\x34\x48\x29'


def test_si32_extended():
    assert get_si32_extended(BufferCursor(b'\xcc\xff\x1b\xff')) == -3342565
    assert get_si32_extended(BufferCursor(b'\x00\x26\x5f\x00')) == 9823
    assert make_si32_extended(9823) == b'\x00\x26\x5f\x00'
    # the extension byte holds the high 8 bits
    assert get_si32_extended(BufferCursor(b'\x00\x00\x01\x01')) == 0x01000001


def test_ui24():
    assert get_ui24(BufferCursor(b'\x00\x04\xd2')) == 1234
    assert make_ui24(4321) == b'\x00\x10\xe1'


def test_si24():
    assert get_si24(BufferCursor(b'\x00\x00\x21')) == 33
    assert get_si24(BufferCursor(b'\xff\xff\xfe')) == -2
    assert make_si24(-2) == b'\xff\xff\xfe'
    assert make_si24(66) == b'\x00\x00\x42'


def test_ui16():
    assert get_ui16(BufferCursor(b'\x00\x42')) == 66
    assert make_ui16(333) == b'\x01\x4d'


def test_si16():
    assert get_si16(BufferCursor(b'\x0d\xd8')) == 3544
    assert get_si16(BufferCursor(b'\xff\xe8')) == -24
    assert make_si16(-24) == b'\xff\xe8'


def test_ui8():
    assert get_ui8(BufferCursor(b'\x22')) == 34
    assert make_ui8(58) == b'\x3a'


def test_double():
    assert get_double(BufferCursor(b'\xbf\xd4\xdd\x2f\x1a\x9f\xbe\x77')) == -0.326
    assert make_double(324653.45) == b'\x41\x13\xd0\xb5\xcc\xcc\xcc\xcd'


def test_short_reads():
    for getter, data in ((get_ui32, b'\x00\x00\x00'),
                         (get_si32_extended, b'\x00'),
                         (get_ui24, b'\x00\x00'),
                         (get_ui16, b'\x00'),
                         (get_ui8, b''),
                         (get_double, b'\x00' * 7)):
        cursor = BufferCursor(data)
        with pytest.raises(Truncated):
            getter(cursor)
        # nothing gets consumed by a failed read
        assert cursor.offset == 0


def test_field_name_in_error():
    with pytest.raises(Truncated) as e:
        get_ui24(BufferCursor(b'\x01', base_offset=0x20), 'DataSize')
    assert e.value.field == 'DataSize'
    assert e.value.offset == 0x20
    assert str(e.value) == 'Expected 3 bytes, only 1 available (while reading DataSize) at offset 0x00000020'
