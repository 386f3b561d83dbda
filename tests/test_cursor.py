from io import BytesIO

import pytest

from flvreader.cursor import Cursor, BufferCursor, StreamCursor
from flvreader.errors import FLVIOError, Truncated


class TrickleIO(BytesIO):
    """
    A BytesIO that hands out at most one byte per read and can't seek,
    like a slow pipe.
    """

    def read(self, size=-1):
        return BytesIO.read(self, min(size, 1) if size >= 0 else 1)

    def seekable(self):
        return False


class BrokenIO(BytesIO):

    def read(self, size=-1):
        raise OSError('device went away')


class TestBufferCursor:

    def test_read_exact(self):
        c = BufferCursor(b'\x01\x02\x03\x04')
        assert c.read_exact(1) == b'\x01'
        assert c.read_exact(3) == b'\x02\x03\x04'
        assert c.offset == 4
        assert c.remaining() == 0
        assert c.at_end()

    def test_zero_length_read(self):
        c = BufferCursor(b'')
        assert c.read_exact(0) == b''
        assert c.at_end()

    def test_peek_does_not_advance(self):
        c = BufferCursor(b'abc')
        assert c.peek(2) == b'ab'
        assert c.offset == 0
        assert c.read_exact(3) == b'abc'

    def test_short_read(self):
        # exact capacity, there is no slack after the data
        c = BufferCursor(bytearray(b'\x00\x05ab'))
        c.read_exact(2)
        with pytest.raises(Truncated) as e:
            c.read_exact(5, 'String')
        assert e.value.offset == 2
        assert e.value.field == 'String'
        assert c.offset == 2
        assert c.remaining() == 2
        with pytest.raises(Truncated):
            c.peek(3)

    def test_next_is(self):
        c = BufferCursor(b'\x00\x00\x09')
        assert c.next_is(b'\x00\x00\x09')
        assert not c.next_is(b'\x00\x00\x09\x00')
        assert not c.next_is(b'\x00\x01')
        c.skip(2)
        assert not c.next_is(b'\x00\x00\x09')

    def test_base_offset(self):
        c = BufferCursor(b'abcd', base_offset=100)
        c.skip(3)
        assert c.offset == 103

    def test_negative_size(self):
        with pytest.raises(ValueError):
            BufferCursor(b'abc').read_exact(-1)


class TestStreamCursor:

    def test_read_exact(self):
        c = StreamCursor(BytesIO(b'FLV\x01'))
        assert c.read_exact(3) == b'FLV'
        assert c.offset == 3
        assert c.remaining() == 1
        assert c.read_exact(1) == b'\x01'
        assert c.at_end()

    def test_trickling_source(self):
        c = StreamCursor(TrickleIO(b'0123456789'))
        assert c.peek(4) == b'0123'
        assert c.read_exact(6) == b'012345'
        assert c.next_is(b'67')
        assert c.remaining() is None
        assert c.read_exact(4) == b'6789'
        assert c.at_end()

    def test_short_read(self):
        c = StreamCursor(BytesIO(b'\x00\x00'))
        with pytest.raises(FLVIOError) as e:
            c.read_exact(4, 'PreviousTagSize')
        assert e.value.offset == 0
        assert e.value.field == 'PreviousTagSize'
        # the bytes that were there are still available
        assert c.read_exact(2) == b'\x00\x00'
        assert isinstance(e.value, EOFError)

    def test_at_end_and_next_is_never_raise(self):
        c = StreamCursor(BytesIO(b'\x00'))
        assert not c.at_end()
        assert not c.next_is(b'\x00\x00\x09')
        c.skip(1)
        assert c.at_end()

    def test_os_error(self):
        c = StreamCursor(BrokenIO(b'data'))
        with pytest.raises(FLVIOError) as e:
            c.read_exact(1, 'Signature')
        assert 'device went away' in str(e.value)
        assert isinstance(e.value.__cause__, OSError)


def test_cursor_is_abstract():
    class ReadOnlyCursor(Cursor):

        def read_exact(self, n, field=None):
            return b'\x00' * n

    with pytest.raises(TypeError):
        Cursor()
    with pytest.raises(TypeError):
        ReadOnlyCursor()
