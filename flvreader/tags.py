from typing import Optional, TypeVar, BinaryIO, Iterator, Callable, Union, AnyStr, Any
import io
import logging

from .astypes import decode_script_body, encode_value
from .constants import *
from .cursor import StreamCursor
from .errors import FLVError, FLVIOError, MalformedFLV, UnknownTagType, EndOfTags
from .primitives import *

__all__ = [
    'FileHeader', 'TagHeader', 'Tag', 'AudioTag', 'VideoTag', 'ScriptTag', 'FLV',
    'ensure', 'get_tag_header',
    'create_flv_header', 'create_flv_tag', 'create_script_tag', 'create_audio_tag', 'create_video_tag'
]

log = logging.getLogger('flvreader.tags')

T = TypeVar('T')


def ensure(value: T, expected: T, error_msg: str, strict: bool = False, offset: Optional[int] = None) -> None:
    if value == expected:
        return

    if strict:
        raise MalformedFLV(error_msg, offset)
    else:
        log.warning('Skipping non-conformant value in FLV file: %s', error_msg)


class FileHeader:

    def __init__(self, signature: bytes, version: int, flags: int, header_size: int):
        self.signature = signature
        self.version = version
        self.flags = flags
        self.header_size = header_size
        self.has_audio = bool(flags & TYPE_FLAGS_AUDIO)
        self.has_video = bool(flags & TYPE_FLAGS_VIDEO)

    def __repr__(self):
        return ('<FileHeader version %d, %s audio, %s video, header size %d>' %
                (self.version,
                 'has' if self.has_audio else 'no',
                 'has' if self.has_video else 'no',
                 self.header_size))


class TagHeader:

    def __init__(self, offset: int, tag_type: int, filter: int, data_size: int, timestamp: int, stream_id: int):
        self.offset = offset
        self.tag_type = tag_type
        self.filter = filter
        self.data_size = data_size
        self.timestamp = timestamp
        self.stream_id = stream_id

    def __repr__(self):
        return ('<TagHeader type %d at offset 0x%08X, time %d, size %d>' %
                (self.tag_type, self.offset, self.timestamp, self.data_size))


def get_tag_header(cursor: StreamCursor, strict: bool = False) -> TagHeader:
    offset = cursor.offset

    # Reserved (2 bits), Filter (1 bit), TagType (5 bits)
    flags = get_ui8(cursor, 'TagType')
    ensure(flags >> 6, 0, 'Tag reserved bits non zero: 0x%X' % (flags >> 6), strict, offset)

    # DataSize
    data_size = get_ui24(cursor, 'DataSize')

    # Timestamp + TimestampExtended
    timestamp = get_si32_extended(cursor, 'Timestamp')
    if timestamp < 0:
        log.warning('The tag at offset 0x%08X has negative timestamp: %d', offset, timestamp)

    # StreamID
    stream_id = get_ui24(cursor, 'StreamID')
    ensure(stream_id, 0, 'StreamID non zero: 0x%06X' % stream_id, strict, offset)

    return TagHeader(offset, flags & 0x1F, (flags & 0x20) >> 5, data_size, timestamp, stream_id)


class Tag:
    """
    One tag of the stream.

    ``parse`` consumes everything after the tag header: the codec sub-header
    (if the tag type has one), the payload and the trailing PreviousTagSize.
    ``payload`` holds the bytes left after the sub-header.
    """

    def __init__(self, header: TagHeader, strict: bool = False):
        self.header = header
        self.strict = strict
        self.payload = None
        self.payload_size = None
        self.previous_tag_size = None
        self.read_bytes = 0

    @property
    def offset(self) -> int:
        return self.header.offset

    @property
    def size(self) -> int:
        return self.header.data_size

    @property
    def timestamp(self) -> int:
        return self.header.timestamp

    def parse(self, cursor: StreamCursor) -> None:
        # The subclasses leave the cursor right before PreviousTagSize
        self.parse_tag_content(cursor)

        self.previous_tag_size = get_ui32(cursor, 'PreviousTagSize')
        ensure(
            self.previous_tag_size,
            self.size + TAG_HEADER_SIZE,
            'PreviousTagSize of %d (0x%08X) not equal to actual tag size of %d (0x%08X)' %
            (self.previous_tag_size, self.previous_tag_size,
             self.size + TAG_HEADER_SIZE, self.size + TAG_HEADER_SIZE),
            self.strict,
            self.offset
        )

    def parse_tag_content(self, cursor: StreamCursor) -> None:
        self.read_payload(cursor)

    def claim(self, n: int, field: str) -> None:
        # Sub-header bytes come out of DataSize, never out of what follows the tag
        if self.read_bytes + n > self.size:
            raise MalformedFLV(
                'DataSize of %d is too small for the %s sub-header field' % (self.size, field),
                self.offset, field
            )
        self.read_bytes += n

    def read_payload(self, cursor: StreamCursor) -> None:
        payload_size = self.size - self.read_bytes
        if payload_size < 0:
            raise MalformedFLV('Negative payload size: %d' % payload_size, self.offset, 'DataSize')
        self.payload = cursor.read_exact(payload_size, 'tag payload')
        self.payload_size = payload_size


class AudioTag(Tag):

    def __init__(self, header: TagHeader, strict: bool = False):
        super().__init__(header, strict)
        self.sound_format = None
        self.sound_rate = None
        self.sound_size = None
        self.sound_type = None
        self.aac_packet_type = None  # always None for non-AAC tags

    def parse_tag_content(self, cursor: StreamCursor) -> None:
        self.claim(1, 'SoundFlags')
        sound_flags = get_ui8(cursor, 'SoundFlags')

        self.sound_format = (sound_flags & 0xF0) >> 4
        self.sound_rate = (sound_flags & 0xC) >> 2
        self.sound_size = (sound_flags & 0x2) >> 1
        self.sound_type = sound_flags & 0x1

        if self.sound_format == SOUND_FORMAT_AAC:
            # AAC packets can be sequence headers or raw data.
            self.claim(1, 'AACPacketType')
            self.aac_packet_type = get_ui8(cursor, 'AACPacketType')
            # AAC always has sampling rate of 44 kHz
            ensure(self.sound_rate, SOUND_RATE_44_KHZ,
                   'AAC sound format with incorrect sound rate: %d' % self.sound_rate,
                   self.strict, self.offset)
            # AAC is always stereo
            ensure(self.sound_type, SOUND_TYPE_STEREO,
                   'AAC sound format with incorrect sound type: %d' % self.sound_type,
                   self.strict, self.offset)

        if self.strict:
            if self.sound_format not in sound_format_to_string:
                raise MalformedFLV('Invalid sound format: %d' % self.sound_format, self.offset, 'SoundFormat')
            if self.aac_packet_type is not None and self.aac_packet_type not in aac_packet_type_to_string:
                raise MalformedFLV('Invalid AAC packet type: %d' % self.aac_packet_type,
                                   self.offset, 'AACPacketType')

        self.read_payload(cursor)

    def __repr__(self):
        if self.payload is None:
            return '<AudioTag unparsed>'
        elif self.aac_packet_type is None:
            return ('<AudioTag at offset 0x%08X, time %d, size %d, %s>' %
                    (self.offset, self.timestamp, self.size,
                     sound_format_to_string.get(self.sound_format, '?'))
                    )
        else:
            return ('<AudioTag at offset 0x%08X, time %d, size %d, %s, %s>' %
                    (self.offset, self.timestamp, self.size,
                     sound_format_to_string.get(self.sound_format, '?'),
                     aac_packet_type_to_string.get(self.aac_packet_type, '?'))
                    )


class VideoTag(Tag):

    def __init__(self, header: TagHeader, strict: bool = False):
        super().__init__(header, strict)
        self.frame_type = None
        self.codec_id = None
        # AVC packet header, always None for non-AVC tags
        self.avc_packet_type = None
        self.composition_time = None
        # Always None for non-VP6 tags
        self.vp6_adjustment = None

    def parse_tag_content(self, cursor: StreamCursor) -> None:
        self.claim(1, 'VideoFlags')
        video_flags = get_ui8(cursor, 'VideoFlags')

        self.frame_type = (video_flags & 0xF0) >> 4
        self.codec_id = video_flags & 0xF

        if self.codec_id == CODEC_ID_AVC:
            # AVC packets can be sequence headers, NAL units or sequence ends.
            self.claim(4, 'AVCPacketHeader')
            self.avc_packet_type = get_ui8(cursor, 'AVCPacketType')
            self.composition_time = get_si24(cursor, 'CompositionTime')
        elif self.codec_id in (CODEC_ID_VP6, CODEC_ID_VP6_WITH_ALPHA):
            self.claim(1, 'VP6 adjustment')
            self.vp6_adjustment = get_ui8(cursor, 'VP6 adjustment')

        if self.strict:
            if self.frame_type not in frame_type_to_string:
                raise MalformedFLV('Invalid frame type: %d' % self.frame_type, self.offset, 'FrameType')
            if self.codec_id not in codec_id_to_string:
                raise MalformedFLV('Invalid codec ID: %d' % self.codec_id, self.offset, 'CodecID')
            if self.avc_packet_type is not None and self.avc_packet_type not in avc_packet_type_to_string:
                raise MalformedFLV('Invalid AVC packet type: %d' % self.avc_packet_type,
                                   self.offset, 'AVCPacketType')

        self.read_payload(cursor)

    def __repr__(self):
        if self.payload is None:
            return '<VideoTag unparsed>'
        elif self.avc_packet_type is None:
            return ('<VideoTag at offset 0x%08X, time %d, size %d, %s (%s)>' %
                    (self.offset, self.timestamp, self.size,
                     codec_id_to_string.get(self.codec_id, '?'),
                     frame_type_to_string.get(self.frame_type, '?'))
                    )
        else:
            return ('<VideoTag at offset 0x%08X, time %d, size %d, %s (%s), %s>' %
                    (self.offset, self.timestamp, self.size,
                     codec_id_to_string.get(self.codec_id, '?'),
                     frame_type_to_string.get(self.frame_type, '?'),
                     avc_packet_type_to_string.get(self.avc_packet_type, '?'))
                    )


class ScriptTag(Tag):

    def __init__(self, header: TagHeader, strict: bool = False):
        super().__init__(header, strict)
        self.values = None
        self.name = None
        self.variable = None

    def parse_tag_content(self, cursor: StreamCursor) -> None:
        payload_offset = cursor.offset
        self.read_payload(cursor)

        # Decoded from our own copy of the payload, so a broken value can
        # never reach into the trailer or the next tag
        self.values = decode_script_body(self.payload, payload_offset)

        # By convention the first value is the event name, e.g. onMetaData,
        # and the second one its argument
        if self.values:
            ensure(isinstance(self.values[0], bytes), True,
                   'The name of a script tag is not a string', self.strict, self.offset)
            self.name = self.values[0]
        if len(self.values) > 1:
            self.variable = self.values[1]
        log.debug('A script tag with a name of %r and value of %r', self.name, self.variable)

    def __repr__(self):
        if self.payload is None:
            return '<ScriptTag unparsed>'
        else:
            return ('<ScriptTag %s at offset 0x%08X, time %d, size %d>' %
                    (self.name, self.offset, self.timestamp, self.size))


tag_to_class = {
    TAG_TYPE_AUDIO: AudioTag,
    TAG_TYPE_VIDEO: VideoTag,
    TAG_TYPE_SCRIPT: ScriptTag,
}


class FLV:
    """
    Reads an FLV stream front to back.

    Handlers are optional callables: ``on_header(header, previous_tag_size)``
    and ``on_audio(tag)``, ``on_video(tag)``, ``on_script(tag)``, called once
    per item, in stream order. Tags are produced one at a time by
    ``get_next_tag`` or lazily by ``iter_tags``, so the caller can stop at any
    point. Any error is final: the reader stays failed and handlers already
    called stand.
    """

    START, HEADER_READ, END, FAILED = 'start', 'header read', 'end', 'failed'

    def __init__(self,
                 source: Union[BinaryIO, bytes],
                 on_header: Optional[Callable[[FileHeader, int], Any]] = None,
                 on_video: Optional[Callable[[VideoTag], Any]] = None,
                 on_audio: Optional[Callable[[AudioTag], Any]] = None,
                 on_script: Optional[Callable[[ScriptTag], Any]] = None,
                 strict: bool = False):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(source)
        self.stream = source
        self.cursor = StreamCursor(source)
        self.strict = strict
        self.on_header = on_header
        self.handlers = {
            TAG_TYPE_AUDIO: on_audio,
            TAG_TYPE_VIDEO: on_video,
            TAG_TYPE_SCRIPT: on_script,
        }
        self.state = self.START
        self.header = None
        self.tags = []
        self._owned_file = None

    @classmethod
    def open(cls, path: str, **kwargs) -> 'FLV':
        try:
            f = open(path, 'rb')
        except OSError as e:
            raise FLVIOError('Failed to open "%s": %s' % (path, e)) from e
        flv = cls(f, **kwargs)
        flv._owned_file = f
        return flv

    def close(self) -> None:
        if self._owned_file is not None:
            self._owned_file.close()
            self._owned_file = None

    def __enter__(self) -> 'FLV':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @property
    def version(self) -> Optional[int]:
        return self.header and self.header.version

    @property
    def has_audio(self) -> Optional[bool]:
        return self.header and self.header.has_audio

    @property
    def has_video(self) -> Optional[bool]:
        return self.header and self.header.has_video

    def parse_header(self) -> FileHeader:
        if self.state != self.START:
            raise FLVError('The file header has already been read')
        try:
            header, previous_tag_size = self._read_header()
        except FLVError:
            self.state = self.FAILED
            raise
        self.header = header
        self.state = self.HEADER_READ
        if self.on_header is not None:
            self.on_header(header, previous_tag_size)
        return header

    def _read_header(self):
        cursor = self.cursor

        signature = cursor.read_exact(3, 'Signature')
        if signature != FLV_SIGNATURE:
            raise MalformedFLV('Stream signature is incorrect: %r' % signature, 0, 'Signature')

        version = get_ui8(cursor, 'Version')
        log.debug('FLV version is %d', version)

        # TypeFlags
        flags = get_ui8(cursor, 'TypeFlags')
        ensure(flags & TYPE_FLAGS_RESERVED, 0,
               'TypeFlagsReserved fields non zero: 0x%X' % (flags & TYPE_FLAGS_RESERVED),
               self.strict, 4)

        header_size = get_ui32(cursor, 'DataOffset')
        log.debug('Header size is %d bytes', header_size)
        if header_size < FLV_HEADER_SIZE or (version == 1 and header_size != FLV_HEADER_SIZE):
            raise MalformedFLV('Invalid header size for version %d: %d' % (version, header_size), 5, 'DataOffset')
        # Later versions may carry more header bytes, which we don't know about
        cursor.skip(header_size - FLV_HEADER_SIZE, 'header extension')

        header = FileHeader(signature, version, flags, header_size)
        log.debug('Stream %s audio', (header.has_audio and 'has') or 'does not have')
        log.debug('Stream %s video', (header.has_video and 'has') or 'does not have')

        previous_tag_size_offset = cursor.offset
        tag_0_size = get_ui32(cursor, 'PreviousTagSize0')
        if tag_0_size != 0:
            raise MalformedFLV('PreviousTagSize0 non zero: 0x%08X' % tag_0_size,
                               previous_tag_size_offset, 'PreviousTagSize0')

        return header, tag_0_size

    def get_next_tag(self) -> Tag:
        if self.state == self.START:
            raise FLVError('The file header has not been read yet')
        if self.state == self.END:
            raise EndOfTags
        if self.state == self.FAILED:
            raise FLVError('The reader has already failed')

        cursor = self.cursor
        try:
            if cursor.at_end():
                self.state = self.END
                raise EndOfTags

            header = get_tag_header(cursor, self.strict)
            tag_klass = self.tag_type_to_class(header)
            tag = tag_klass(header, self.strict)
            tag.parse(cursor)
        except FLVError:
            self.state = self.FAILED
            raise

        handler = self.handlers[header.tag_type]
        if handler is not None:
            handler(tag)

        return tag

    def iter_tags(self) -> Iterator[Tag]:
        if self.state == self.START:
            self.parse_header()
        try:
            while True:
                yield self.get_next_tag()
        except EndOfTags:
            pass

    def read_tags(self) -> None:
        self.tags = list(self.iter_tags())

    def parse(self) -> bool:
        for _ in self.iter_tags():
            pass
        return True

    def tag_type_to_class(self, header: TagHeader) -> type:
        try:
            return tag_to_class[header.tag_type]
        except KeyError:
            raise UnknownTagType(header.tag_type, header.offset)


def create_flv_header(has_audio: bool = True, has_video: bool = True, version: int = 1) -> bytes:
    type_flags = 0
    if has_video:
        type_flags = type_flags | TYPE_FLAGS_VIDEO
    if has_audio:
        type_flags = type_flags | TYPE_FLAGS_AUDIO
    return b''.join([FLV_SIGNATURE, make_ui8(version), make_ui8(type_flags),
                     make_ui32(FLV_HEADER_SIZE), make_ui32(0)])


def create_flv_tag(tag_type: int, data: bytes, timestamp: int = 0) -> bytes:
    data_size = len(data)
    tag_size = data_size + TAG_HEADER_SIZE

    return b''.join([make_ui8(tag_type), make_ui24(data_size), make_si32_extended(timestamp),
                     make_ui24(0), data, make_ui32(tag_size)])


def create_audio_tag(sound_format: int, data: bytes, timestamp: int = 0,
                     sound_rate: int = SOUND_RATE_44_KHZ, sound_size: int = SOUND_SIZE_16_BIT,
                     sound_type: int = SOUND_TYPE_STEREO, aac_packet_type: Optional[int] = None) -> bytes:
    sub_header = make_ui8((sound_format << 4) | (sound_rate << 2) | (sound_size << 1) | sound_type)
    if sound_format == SOUND_FORMAT_AAC:
        sub_header += make_ui8(aac_packet_type or 0)
    return create_flv_tag(TAG_TYPE_AUDIO, sub_header + data, timestamp)


def create_video_tag(codec_id: int, data: bytes, timestamp: int = 0,
                     frame_type: int = FRAME_TYPE_KEYFRAME, avc_packet_type: Optional[int] = None,
                     composition_time: int = 0, vp6_adjustment: Optional[int] = None) -> bytes:
    sub_header = make_ui8((frame_type << 4) | codec_id)
    if codec_id == CODEC_ID_AVC:
        sub_header += make_ui8(avc_packet_type or 0) + make_si24(composition_time)
    elif codec_id in (CODEC_ID_VP6, CODEC_ID_VP6_WITH_ALPHA):
        sub_header += make_ui8(vp6_adjustment or 0)
    return create_flv_tag(TAG_TYPE_VIDEO, sub_header + data, timestamp)


def create_script_tag(name: AnyStr, data: Any, timestamp: int = 0) -> bytes:
    payload = encode_value(name) + encode_value(data)
    return create_flv_tag(TAG_TYPE_SCRIPT, payload, timestamp)
