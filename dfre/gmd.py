"""
dfre: GMD music container.

GMD wraps a Standard MIDI File in IFF-style chunks (big-endian sizes):
  char[4]   "MIDI"
  uint32 BE size
  repeated:
    char[4]   tag   (e.g. "MDpg" iMUSE data)
    uint32 BE length
    byte[length]
  until the tag "MThd", where the embedded SMF begins.
"""

import struct

from .constants import GMD_MAGIC, SMF_MAGIC
from .errors import DecodingError, SignatureError, TruncatedError


def read_gmd(data: bytes) -> bytes:
    """Return the embedded Standard MIDI File."""
    if data[:4] != GMD_MAGIC:
        raise SignatureError(GMD_MAGIC, bytes(data[:4]))

    pos = 8
    while data[pos:pos + 4] != SMF_MAGIC:
        if pos + 8 > len(data):
            raise TruncatedError(8, max(0, len(data) - pos), pos)
        tag = bytes(data[pos:pos + 4])
        length = struct.unpack_from('>I', data, pos + 4)[0]
        pos += 8 + length
        if pos > len(data):
            raise DecodingError(f"GMD chunk {tag!r} runs past end of data")

    return bytes(data[pos:])
