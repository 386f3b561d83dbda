"""
Forward-only byte cursors.

Every read is bounds-checked: a cursor either returns exactly the number of
bytes asked for or raises, and never advances past the end of its source.
"""
from abc import ABCMeta, abstractmethod
from typing import BinaryIO, Optional, Union
import os

from .errors import FLVIOError, Truncated

__all__ = ['Cursor', 'BufferCursor', 'StreamCursor']


class Cursor(metaclass=ABCMeta):
    short_read_error = EOFError

    @property
    @abstractmethod
    def offset(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def read_exact(self, n: int, field: Optional[str] = None) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def peek(self, n: int, field: Optional[str] = None) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def next_is(self, prefix: bytes) -> bool:
        raise NotImplementedError

    @abstractmethod
    def remaining(self) -> Optional[int]:
        raise NotImplementedError

    @abstractmethod
    def at_end(self) -> bool:
        raise NotImplementedError

    def skip(self, n: int, field: Optional[str] = None) -> None:
        self.read_exact(n, field)

    def _short_read(self, wanted: int, available: int, field: Optional[str]):
        return self.short_read_error(
            'Expected %d bytes, only %d available' % (wanted, available), self.offset, field
        )


class BufferCursor(Cursor):
    """
    A cursor over an in-memory buffer.

    ``base_offset`` is added to positions reported in errors, so a cursor over
    a tag payload can report offsets relative to the start of the file.
    """

    short_read_error = Truncated

    def __init__(self, data: Union[bytes, bytearray, memoryview], base_offset: int = 0):
        self.data = memoryview(data)
        self.base_offset = base_offset
        self.pos = 0

    @property
    def offset(self) -> int:
        return self.base_offset + self.pos

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def peek(self, n: int, field: Optional[str] = None) -> bytes:
        if n < 0:
            raise ValueError('Negative read size: %d' % n)
        available = self.remaining()
        if n > available:
            raise self._short_read(n, available, field)
        return self.data[self.pos:self.pos + n].tobytes()

    def read_exact(self, n: int, field: Optional[str] = None) -> bytes:
        ret = self.peek(n, field)
        self.pos += n
        return ret

    def next_is(self, prefix: bytes) -> bool:
        if len(prefix) > self.remaining():
            return False
        return self.data[self.pos:self.pos + len(prefix)] == prefix


class StreamCursor(Cursor):
    """
    A cursor over a binary file object.

    The stream is only ever read forward. Bytes looked at with ``peek`` are
    kept in a lookahead buffer, so non-seekable sources (pipes, sockets) work
    the same as regular files.
    """

    short_read_error = FLVIOError

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self._lookahead = b''
        self._consumed = 0

    @property
    def offset(self) -> int:
        return self._consumed

    def _fill(self, n: int, field: Optional[str]) -> int:
        # Short reads from the stream are normal, keep asking until it is dry
        while len(self._lookahead) < n:
            try:
                chunk = self.stream.read(n - len(self._lookahead))
            except OSError as e:
                raise FLVIOError('Reading from the source failed: %s' % e, self.offset, field) from e
            if not chunk:
                break
            self._lookahead += chunk
        return len(self._lookahead)

    def peek(self, n: int, field: Optional[str] = None) -> bytes:
        if n < 0:
            raise ValueError('Negative read size: %d' % n)
        available = self._fill(n, field)
        if available < n:
            raise self._short_read(n, available, field)
        return self._lookahead[:n]

    def read_exact(self, n: int, field: Optional[str] = None) -> bytes:
        ret = self.peek(n, field)
        self._lookahead = self._lookahead[n:]
        self._consumed += n
        return ret

    def next_is(self, prefix: bytes) -> bool:
        available = self._fill(len(prefix), None)
        if available < len(prefix):
            return False
        return self._lookahead.startswith(prefix)

    def at_end(self) -> bool:
        return self._fill(1, None) == 0

    def remaining(self) -> Optional[int]:
        stream = self.stream
        seekable = getattr(stream, 'seekable', None)
        if seekable is None or not seekable():
            return None
        position = stream.tell()
        end = stream.seek(0, os.SEEK_END)
        stream.seek(position)
        return end - position + len(self._lookahead)
