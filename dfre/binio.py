"""
dfre: Primitive little-endian readers.

All decoders read from a seekable binary stream. Bytes-like input is wrapped
in an io.BytesIO first (see as_stream), so a decoder can be handed either a
whole entry payload or an open archive view.

Every read is exact: a short read raises TruncatedError instead of returning
fewer bytes.
"""

import io
import struct

from .errors import DecodingError, TruncatedError

_U8 = struct.Struct('<B')
_U16 = struct.Struct('<H')
_U32 = struct.Struct('<I')
_I32 = struct.Struct('<i')


def as_stream(data):
    """Return a seekable binary stream for bytes or an already open stream."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(data))
    return data


def read_bytes(f, n: int) -> bytes:
    """Read exactly n bytes."""
    if n == 0:
        return b''
    offset = _tell(f)
    buf = f.read(n)
    if len(buf) != n:
        raise TruncatedError(n, len(buf), offset)
    return buf


def read_u8(f) -> int:
    return _U8.unpack(read_bytes(f, 1))[0]


def read_u16(f) -> int:
    return _U16.unpack(read_bytes(f, 2))[0]


def read_u24(f) -> int:
    # zero-extended to 32 bits
    return _U32.unpack(read_bytes(f, 3) + b'\x00')[0]


def read_u32(f) -> int:
    return _U32.unpack(read_bytes(f, 4))[0]


def read_i32(f) -> int:
    return _I32.unpack(read_bytes(f, 4))[0]


def read_vec2(f, read) -> tuple:
    """Read an (x, y) pair with the given scalar reader."""
    x = read(f)
    y = read(f)
    return (x, y)


def read_vec2_u16(f) -> tuple:
    return read_vec2(f, read_u16)


def read_vec2_u32(f) -> tuple:
    return read_vec2(f, read_u32)


def read_vec2_i32(f) -> tuple:
    return read_vec2(f, read_i32)


def read_cstr(f, n: int) -> str:
    """Read a fixed n-byte ASCII field, truncated at the first NUL."""
    raw = read_bytes(f, n)
    try:
        return raw.split(b'\x00', 1)[0].decode('ascii')
    except UnicodeDecodeError:
        raise DecodingError(f"non-ASCII name field {raw!r}") from None


def _tell(f):
    try:
        return f.tell()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return None
