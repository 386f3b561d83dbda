"""
The AS types and their FLV representations.

Script data values are decoded into plain Python values where one fits
(``float``, ``bool``, ``bytes``, ``None``, ``list``, ``dict`` subclasses) and
into small marker classes for the rest, so every variant keeps its identity
and ``script_value_type`` can tell them apart again.
"""
from typing import AnyStr, Any, List, Tuple, Dict, Union
import datetime
import calendar
import logging

from .constants import *
from .cursor import Cursor, BufferCursor
from .errors import MalformedFLV
from .primitives import *

__all__ = [
    'as_type_to_getter_and_maker', 'type_to_as_type', 'script_value_type',
    'ECMAArray', 'FLVObject', 'LongString', 'ScriptDate',
    'MovieClip', 'Undefined', 'Reference', 'ObjectEndMarker',
    'get_number', 'make_number',
    'get_boolean', 'make_boolean',
    'get_string', 'make_string',
    'get_long_string', 'make_long_string',
    'get_ecma_array', 'make_ecma_array',
    'get_strict_array', 'make_strict_array',
    'get_date', 'make_date',
    'get_null', 'make_null',
    'get_object', 'make_object',
    'get_movie_clip', 'make_movie_clip',
    'get_undefined', 'make_undefined',
    'get_reference', 'make_reference',
    'get_object_end_marker', 'make_object_end_marker',
    'decode_keyed_slot', 'encode_keyed_slot',
    'decode_value', 'encode_value',
    'decode_script_body', 'encode_script_body'
]

logger = logging.getLogger('flvreader.astypes')


# Number
def get_number(cursor: Cursor) -> float:
    return get_double(cursor, 'Number')


def make_number(number: float) -> bytes:
    return make_double(number)


# Boolean
def get_boolean(cursor: Cursor) -> bool:
    return bool(get_ui8(cursor, 'Boolean'))


def make_boolean(value: bool) -> bytes:
    return make_ui8(bool(value))


# String
def get_string(cursor: Cursor) -> bytes:
    # First 16 bits are the string's length, then the raw bytes.
    # No terminator, NUL bytes are allowed anywhere.
    length = get_ui16(cursor, 'String length')
    return cursor.read_exact(length, 'String')


def make_string(string: AnyStr) -> bytes:
    if isinstance(string, str):
        # We need a blob, not unicode.
        string = string.encode()
    return make_ui16(len(string)) + string


# Long String
class LongString(bytes):
    ...


def get_long_string(cursor: Cursor) -> LongString:
    length = get_ui32(cursor, 'Long string length')
    return LongString(cursor.read_exact(length, 'Long string'))


def make_long_string(string: AnyStr) -> bytes:
    if isinstance(string, str):
        string = string.encode()
    return make_ui32(len(string)) + string


# ECMA array
class ECMAArray(dict):
    ...


def get_ecma_array(cursor: Cursor) -> ECMAArray:
    length = get_ui32(cursor, 'ECMA array length')
    logger.debug('The ECMA array has %d elements', length)
    array = ECMAArray()
    # The count bounds the pairs, the end marker is only a trailer
    for _ in range(length):
        name, value = decode_keyed_slot(cursor)
        array[name] = value
    if cursor.next_is(OBJECT_END_SENTINEL):
        cursor.skip(len(OBJECT_END_SENTINEL), 'ECMA array end marker')
    else:
        logger.debug('ECMA array at offset 0x%08X has no end marker', cursor.offset)
    return array


def make_ecma_array(d: Dict[AnyStr, Any]) -> bytes:
    length = make_ui32(len(d))
    rest = b''.join(encode_keyed_slot(name, value) for name, value in d.items())
    return length + rest + OBJECT_END_SENTINEL


# Strict array
def get_strict_array(cursor: Cursor) -> List[Any]:
    length = get_ui32(cursor, 'Strict array length')
    logger.debug('Strict array length = %d', length)
    return [decode_value(cursor) for _ in range(length)]


def make_strict_array(array: List[Any]) -> bytes:
    length = make_ui32(len(array))
    rest = b''.join(encode_value(value) for value in array)
    return length + rest


# Date
class ScriptDate:
    """
    A point in time, as milliseconds since the Unix epoch.

    ``offset`` is the local time zone offset in minutes. Writers are told not
    to fill it in and readers not to use it, but it is kept as found.
    """
    timestamp: float
    offset: int

    def __init__(self, timestamp: float, offset: int = 0):
        self.timestamp = timestamp
        self.offset = offset

    @classmethod
    def from_datetime(cls, date: datetime.datetime) -> 'ScriptDate':
        if date.tzinfo:
            utc_date = date.astimezone(datetime.timezone.utc)
        else:
            # assume it's UTC
            utc_date = date.replace(tzinfo=datetime.timezone.utc)
        seconds = calendar.timegm(utc_date.timetuple())
        return cls(seconds * 1000 + utc_date.microsecond // 1000)

    def to_datetime(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(self.timestamp / 1000, datetime.timezone.utc)

    def __eq__(self, other):
        return (isinstance(other, ScriptDate) and
                self.timestamp == other.timestamp and
                self.offset == other.offset)

    def __hash__(self):
        return hash((self.timestamp, self.offset))

    def __repr__(self):
        try:
            date = self.to_datetime().isoformat()
        except (ValueError, OverflowError, OSError):
            # NaN, infinities and dates outside what datetime can hold
            date = '%r ms' % self.timestamp
        return '<ScriptDate %s, offset %d>' % (date, self.offset)


def get_date(cursor: Cursor) -> ScriptDate:
    timestamp = get_double(cursor, 'Date')
    offset = get_si16(cursor, 'Date time zone offset')
    return ScriptDate(timestamp, offset)


def make_date(date: Union[ScriptDate, datetime.datetime]) -> bytes:
    if isinstance(date, datetime.datetime):
        date = ScriptDate.from_datetime(date)
    return make_number(date.timestamp) + make_si16(date.offset)


# Null
def get_null(cursor: Cursor) -> None:
    return None


def make_null(value: None) -> bytes:
    return b''


# Object
class FLVObject(dict):
    ...


def get_object(cursor: Cursor) -> FLVObject:
    ret = FLVObject()
    # No count, only the end marker terminates. Running out of bytes
    # before it turns up surfaces as Truncated from the slot decoder.
    while not cursor.next_is(OBJECT_END_SENTINEL):
        name, value = decode_keyed_slot(cursor)
        ret[name] = value
    cursor.skip(len(OBJECT_END_SENTINEL), 'Object end marker')
    logger.debug('Object with %d entries', len(ret))
    return ret


def make_object(obj: Any) -> bytes:
    # If the object is iterable, serialize keys/values. If not, fall back on iterating over __dict__.
    try:
        iterator = obj.items()
    except AttributeError:
        iterator = obj.__dict__.items()
    ret = b''.join([encode_keyed_slot(name, value) for name, value in iterator])
    return ret + OBJECT_END_SENTINEL


class _Marker:
    """Base of the value types that carry no payload."""

    def __eq__(self, other):
        return type(other) is type(self)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return '<%s>' % type(self).__name__


# Movie clip, reserved and never carries data
class MovieClip(_Marker):
    ...


def get_movie_clip(cursor: Cursor) -> MovieClip:
    return MovieClip()


def make_movie_clip(clip: MovieClip) -> bytes:
    return b''


# Undefined
class Undefined(_Marker):
    ...


def get_undefined(cursor: Cursor) -> Undefined:
    return Undefined()


def make_undefined(value: Undefined) -> bytes:
    return b''


# Object end marker met as a value type of its own
class ObjectEndMarker(_Marker):
    ...


def get_object_end_marker(cursor: Cursor) -> ObjectEndMarker:
    return ObjectEndMarker()


def make_object_end_marker(value: ObjectEndMarker) -> bytes:
    return b''


# Reference
class Reference:
    """An index into a table of complex objects. Never resolved here."""
    ref: int

    def __init__(self, ref: int):
        self.ref = ref

    def __eq__(self, other):
        return isinstance(other, Reference) and self.ref == other.ref

    def __hash__(self):
        return hash(self.ref)

    def __repr__(self):
        return '<Reference to %d>' % self.ref


def get_reference(cursor: Cursor) -> Reference:
    return Reference(get_ui16(cursor, 'Reference'))


def make_reference(reference: Reference) -> bytes:
    return make_ui16(reference.ref)


as_type_to_getter_and_maker = {
    VALUE_TYPE_NUMBER: (get_number, make_number),
    VALUE_TYPE_BOOLEAN: (get_boolean, make_boolean),
    VALUE_TYPE_STRING: (get_string, make_string),
    VALUE_TYPE_OBJECT: (get_object, make_object),
    VALUE_TYPE_MOVIE_CLIP: (get_movie_clip, make_movie_clip),
    VALUE_TYPE_NULL: (get_null, make_null),
    VALUE_TYPE_UNDEFINED: (get_undefined, make_undefined),
    VALUE_TYPE_REFERENCE: (get_reference, make_reference),
    VALUE_TYPE_ECMA_ARRAY: (get_ecma_array, make_ecma_array),
    VALUE_TYPE_OBJECT_END_MARKER: (get_object_end_marker, make_object_end_marker),
    VALUE_TYPE_STRICT_ARRAY: (get_strict_array, make_strict_array),
    VALUE_TYPE_DATE: (get_date, make_date),
    VALUE_TYPE_LONG_STRING: (get_long_string, make_long_string)
}

type_to_as_type = {
    bool: VALUE_TYPE_BOOLEAN,
    int: VALUE_TYPE_NUMBER,
    float: VALUE_TYPE_NUMBER,
    str: VALUE_TYPE_STRING,
    bytes: VALUE_TYPE_STRING,
    bytearray: VALUE_TYPE_STRING,
    LongString: VALUE_TYPE_LONG_STRING,
    list: VALUE_TYPE_STRICT_ARRAY,
    tuple: VALUE_TYPE_STRICT_ARRAY,
    dict: VALUE_TYPE_ECMA_ARRAY,
    ECMAArray: VALUE_TYPE_ECMA_ARRAY,
    FLVObject: VALUE_TYPE_OBJECT,
    datetime.datetime: VALUE_TYPE_DATE,
    ScriptDate: VALUE_TYPE_DATE,
    Undefined: VALUE_TYPE_UNDEFINED,
    MovieClip: VALUE_TYPE_MOVIE_CLIP,
    ObjectEndMarker: VALUE_TYPE_OBJECT_END_MARKER,
    Reference: VALUE_TYPE_REFERENCE,
    type(None): VALUE_TYPE_NULL
}


def script_value_type(value: Any) -> int:
    # Anything unknown is serialized through its attributes, as an Object
    return type_to_as_type.get(type(value), VALUE_TYPE_OBJECT)


# Keyed slot: a member of an Object or an ECMA array
def decode_keyed_slot(cursor: Cursor) -> Tuple[bytes, Any]:
    name = get_string(cursor)
    logger.debug('Script data name = %r', name)
    value = decode_value(cursor)
    logger.debug('Script data value = %r', value)
    return name, value


def encode_keyed_slot(name: AnyStr, value: Any) -> bytes:
    return make_string(name) + encode_value(value)


# Script Data Value
def decode_value(cursor: Cursor) -> Any:
    offset = cursor.offset
    value_type = get_ui8(cursor, 'value type')
    try:
        get_value = as_type_to_getter_and_maker[value_type][0]
    except KeyError:
        raise MalformedFLV('Invalid script data value type: %d' % value_type, offset, 'value type')
    logger.debug('Script data value type = %s', value_type_to_string[value_type])
    return get_value(cursor)


def encode_value(value: Any) -> bytes:
    value_type = script_value_type(value)
    make_value = as_type_to_getter_and_maker[value_type][1]
    return make_ui8(value_type) + make_value(value)


# Script tag body: top-level values back to back, up to the end of the data
def decode_script_body(data: bytes, base_offset: int = 0) -> List[Any]:
    cursor = BufferCursor(data, base_offset)
    values = []
    try:
        while not cursor.at_end():
            values.append(decode_value(cursor))
    except RecursionError as e:
        # Containers can nest as deep as the tag size allows
        raise MalformedFLV('Script data nested too deeply', cursor.offset, 'value type') from e
    return values


def encode_script_body(values: List[Any]) -> bytes:
    return b''.join(encode_value(value) for value in values)
