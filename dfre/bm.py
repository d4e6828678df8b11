"""
dfre: BM bitmap decoder.

BM header (32 bytes):
  char[4]   "BM \\x1e"
  uint16 LE width, height
  uint16 LE idem_width, idem_height
  uint8     flags          (0x08: colour 0 is opaque)
  uint8     log_size_y     (non-zero for power-of-two wall textures)
  uint8     compression    0 = none, 1 = RLE1, 2 = RLE0
  uint8     padding
  uint32 LE data_size      (compressed payload size)
  byte[12]  reserved

Pixel data follows the header. Uncompressed images store width × height
bytes; compressed images store the payload, then the column offset table at
32 + data_size with offsets relative to the end of the header. Either way
the pixels are columns, bottom to top, and get transposed.

A width of 1 with a height other than 1 marks a multi-BM (several tiles,
each with its own sub-header). Multi-BMs are not decoded; they come back as a
1×1 placeholder so a texture lookup does not fail a whole level.
"""

import enum
import io
import logging
from dataclasses import dataclass
from typing import Tuple

from .binio import as_stream, read_bytes, read_u8, read_u32, read_vec2_u16
from .compression import columns_to_rows, rle0_decompress, rle1_decompress
from .constants import (
    BM_COMPRESSION_NONE, BM_COMPRESSION_RLE0, BM_COMPRESSION_RLE1,
    BM_FLAG_OPAQUE, BM_HEADER_SIZE, BM_MAGIC, BM_RESERVED_SIZE,
)
from .errors import DecodingError, SignatureError

log = logging.getLogger(__name__)


class Compression(enum.IntEnum):
    NONE = BM_COMPRESSION_NONE
    RLE1 = BM_COMPRESSION_RLE1
    RLE0 = BM_COMPRESSION_RLE0


@dataclass(frozen=True)
class Bm:
    size: Tuple[int, int]
    idem_size: Tuple[int, int]
    flags: int
    log_size_y: bool
    compression: Compression
    pixels: bytes
    multiple: bool = False

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    @property
    def transparent(self) -> bool:
        return not (self.flags & BM_FLAG_OPAQUE)


def read_bm(data) -> Bm:
    """Decode a BM image to row-major palette indices."""
    f = as_stream(data)

    magic = read_bytes(f, 4)
    if magic != BM_MAGIC:
        raise SignatureError(BM_MAGIC, magic)

    size = read_vec2_u16(f)
    idem_size = read_vec2_u16(f)
    flags = read_u8(f)
    log_size_y = read_u8(f) != 0
    raw_compression = read_u8(f)
    try:
        compression = Compression(raw_compression)
    except ValueError:
        raise DecodingError(f"invalid BM compression {raw_compression}") from None
    read_u8(f)  # padding
    data_size = read_u32(f)
    f.seek(BM_RESERVED_SIZE, io.SEEK_CUR)

    width, height = size
    if width == 1 and height != 1:
        log.warning("multi-BM (%d sub-images) not supported, using 1x1 placeholder", height)
        return Bm((1, 1), idem_size, flags, log_size_y, compression, b'\x01', multiple=True)

    if compression == Compression.NONE:
        columns = read_bytes(f, width * height)
    else:
        f.seek(BM_HEADER_SIZE + data_size)
        if compression == Compression.RLE1:
            columns = rle1_decompress(f, BM_HEADER_SIZE, width, height)
        else:
            columns = rle0_decompress(f, BM_HEADER_SIZE, width, height)

    pixels = columns_to_rows(width, height, columns)
    return Bm(size, idem_size, flags, log_size_y, compression, pixels)
