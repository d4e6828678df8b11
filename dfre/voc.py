"""
dfre: VOC (Creative Voice File) decoder.

Header (26 bytes):
  "Creative Voice File\\x1a\\x1a\\x00" (22 bytes, signature and header size)
  uint16 LE  version
  uint16 LE  version_check = (~version + 0x1234) & 0xFFFF

Chunks follow until a type 0 byte:
  uint8     type
  uint24 LE length
  byte[length] payload

  1 sound start:    uint8 rate, uint8 codec, PCM bytes (length - 2)
  2 sound continue: PCM bytes, same format as the previous sound start
  3 silence:        uint16 sample_count, uint8 rate
  6 repeat start:   uint16 count (0xFFFF: forever)
  7 repeat end:     no payload
  anything else is kept as (type, length) with its payload skipped.

Sample rates are stored as rate = 256 - 1000000 / hz. Decoding is
hz = 1000000 / (256 - rate), which is lossy: 11025 Hz encodes to 165 and
decodes to 10989 Hz.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .binio import as_stream, read_bytes, read_u8, read_u16, read_u24
from .constants import (
    VOC_CHECKSUM_SALT, VOC_CHUNK_END, VOC_CHUNK_REPEAT, VOC_CHUNK_REPEAT_END,
    VOC_CHUNK_SILENCE, VOC_CHUNK_SOUND_CONTINUE, VOC_CHUNK_SOUND_START,
    VOC_MAGIC, VOC_REPEAT_FOREVER, VOC_SILENCE_BYTE,
)
from .errors import DecodingError, SignatureError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleRate:
    encoded: int

    @property
    def hz(self) -> int:
        return 1_000_000 // (256 - self.encoded)

    @classmethod
    def encode(cls, hz: int) -> 'SampleRate':
        encoded = round(256 - 1_000_000 / hz)
        if not 0 <= encoded <= 255:
            raise ValueError(f"sample rate {hz} Hz cannot be encoded")
        return cls(encoded)

    def __str__(self):
        return f"~{self.hz}Hz"


@dataclass(frozen=True)
class SoundStart:
    sample_rate: SampleRate
    codec: int
    data: bytes


@dataclass(frozen=True)
class SoundContinue:
    data: bytes


@dataclass(frozen=True)
class Silence:
    sample_count: int
    sample_rate: SampleRate


@dataclass(frozen=True)
class Repeat:
    count: Optional[int]    # None repeats forever


@dataclass(frozen=True)
class RepeatEnd:
    pass


@dataclass(frozen=True)
class Unknown:
    kind: int
    length: int


Chunk = Union[SoundStart, SoundContinue, Silence, Repeat, RepeatEnd, Unknown]


@dataclass(frozen=True)
class Voc:
    version: int
    chunks: Tuple[Chunk, ...]

    @property
    def sample_rate(self) -> Optional[SampleRate]:
        """Rate of the first sound chunk."""
        for chunk in self.chunks:
            if isinstance(chunk, SoundStart):
                return chunk.sample_rate
        return None

    def pcm(self) -> bytes:
        """Concatenate unsigned 8-bit PCM, expanding silences. Repeats play once."""
        out = bytearray()
        for chunk in self.chunks:
            if isinstance(chunk, (SoundStart, SoundContinue)):
                out += chunk.data
            elif isinstance(chunk, Silence):
                out += bytes([VOC_SILENCE_BYTE]) * (chunk.sample_count + 1)
        return bytes(out)


def version_check(version: int) -> int:
    return ((~version) + VOC_CHECKSUM_SALT) & 0xFFFF


def read_chunk(f) -> Optional[Chunk]:
    """Read one chunk, None at the terminator."""
    kind = read_u8(f)
    if kind == VOC_CHUNK_END:
        return None

    length = read_u24(f)
    content = io.BytesIO(read_bytes(f, length))

    if kind == VOC_CHUNK_SOUND_START:
        rate = SampleRate(read_u8(content))
        codec = read_u8(content)
        return SoundStart(rate, codec, content.read())
    if kind == VOC_CHUNK_SOUND_CONTINUE:
        return SoundContinue(content.getvalue())
    if kind == VOC_CHUNK_SILENCE:
        count = read_u16(content)
        return Silence(count, SampleRate(read_u8(content)))
    if kind == VOC_CHUNK_REPEAT:
        count = read_u16(content)
        return Repeat(None if count == VOC_REPEAT_FOREVER else count)
    if kind == VOC_CHUNK_REPEAT_END:
        return RepeatEnd()

    log.debug("skipping unknown VOC chunk type %d (%d bytes)", kind, length)
    return Unknown(kind, length)


def read_voc(data) -> Voc:
    f = as_stream(data)

    magic = read_bytes(f, len(VOC_MAGIC))
    if magic != VOC_MAGIC:
        raise SignatureError(VOC_MAGIC, magic)

    version = read_u16(f)
    check = read_u16(f)
    expected = version_check(version)
    if check != expected:
        log.debug("VOC version check: %04x (expected %04x)", check, expected)
        raise DecodingError(f"VOC version check failed: {check:04x} != {expected:04x}")

    chunks = []
    while True:
        chunk = read_chunk(f)
        if chunk is None:
            break
        chunks.append(chunk)

    return Voc(version, tuple(chunks))
