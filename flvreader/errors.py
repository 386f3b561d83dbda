"""
Exceptions raised while reading FLV files.
"""
from typing import Optional

__all__ = ['FLVError', 'FLVIOError', 'MalformedFLV', 'UnknownTagType', 'Truncated', 'EndOfTags']


class FLVError(Exception):
    """
    Base class of every decoding failure.

    ``offset`` is the absolute byte position where the failing read started
    and ``field`` names what was being decoded, when known.
    """

    def __init__(self, message: str, offset: Optional[int] = None, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.field = field

    def __str__(self):
        ret = self.message
        if self.field is not None:
            ret = '%s (while reading %s)' % (ret, self.field)
        if self.offset is not None:
            ret = '%s at offset 0x%08X' % (ret, self.offset)
        return ret


class FLVIOError(FLVError, EOFError):
    ...


class MalformedFLV(FLVError):
    ...


class UnknownTagType(MalformedFLV):

    def __init__(self, tag_type: int, offset: Optional[int] = None):
        super().__init__('Invalid tag type: %d' % tag_type, offset, 'TagType')
        self.tag_type = tag_type


class Truncated(FLVError, EOFError):
    ...


class EndOfTags(Exception):
    ...
