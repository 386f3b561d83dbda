"""
The internal FLV representations of numbers.

All multi-byte values are big-endian. Getters read from a cursor and raise the
cursor's short-read error when the source runs dry; makers are the inverse.
"""
from typing import Optional
from struct import pack, unpack

from .cursor import Cursor

__all__ = [
    'get_ui32', 'make_ui32',
    'get_si32_extended', 'make_si32_extended',
    'get_ui24', 'make_ui24',
    'get_si24', 'make_si24',
    'get_ui16', 'make_ui16',
    'get_si16', 'make_si16',
    'get_ui8', 'make_ui8',
    'get_double', 'make_double'
]


# UI32
def get_ui32(cursor: Cursor, field: Optional[str] = None) -> int:
    return unpack('>I', cursor.read_exact(4, field))[0]


def make_ui32(num: int) -> bytes:
    return pack('>I', num)


# SI32 extended
def get_si32_extended(cursor: Cursor, field: Optional[str] = None) -> int:
    # The last 8 bits are the high 8 bits of the whole number
    low_high = cursor.read_exact(4, field)
    combined = low_high[3:] + low_high[:3]
    return unpack('>i', combined)[0]


def make_si32_extended(num: int) -> bytes:
    ret = pack('>i', num)
    return ret[1:] + ret[:1]


# UI24
def get_ui24(cursor: Cursor, field: Optional[str] = None) -> int:
    high, low = unpack('>BH', cursor.read_exact(3, field))
    return (high << 16) + low


def make_ui24(num: int) -> bytes:
    return pack('>I', num)[1:]


# SI24
def get_si24(cursor: Cursor, field: Optional[str] = None) -> int:
    ret = get_ui24(cursor, field)
    if ret & 0x800000:
        ret -= 0x1000000
    return ret


def make_si24(num: int) -> bytes:
    return pack('>i', num)[1:]


# UI16
def get_ui16(cursor: Cursor, field: Optional[str] = None) -> int:
    return unpack('>H', cursor.read_exact(2, field))[0]


def make_ui16(num: int) -> bytes:
    return pack('>H', num)


# SI16
def get_si16(cursor: Cursor, field: Optional[str] = None) -> int:
    return unpack('>h', cursor.read_exact(2, field))[0]


def make_si16(num: int) -> bytes:
    return pack('>h', num)


# UI8
def get_ui8(cursor: Cursor, field: Optional[str] = None) -> int:
    return cursor.read_exact(1, field)[0]


def make_ui8(num: int) -> bytes:
    return pack('B', num)


# DOUBLE
def get_double(cursor: Cursor, field: Optional[str] = None) -> float:
    return unpack('>d', cursor.read_exact(8, field))[0]


def make_double(num: float) -> bytes:
    return pack('>d', num)
