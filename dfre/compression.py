"""
dfre: Column run-length codecs shared by the image formats.

Compressed images start with a table of `width` uint32 LE column offsets,
relative to a caller supplied base. Each column is then a run of control
bytes that must expand to exactly `height` bytes:

RLE0 (RLE-A, BM compression 2, FME/WAX cells):
  control <= 128: copy `control` literal bytes
  control  > 128: emit (control - 128) zero bytes (transparent)

RLE1 (RLE-B, BM compression 1):
  control  < 128: copy `control` literal bytes
  control >= 128: emit (control - 128) copies of the following data byte
                  (control == 128 is a legal zero-length run that still
                  consumes its data byte)

Decoded data is column-major with each column stored bottom to top.
columns_to_rows transposes it into the row-major, top-left-origin layout
every consumer expects.
"""

from .binio import read_bytes, read_u8, read_u32
from .errors import DecodingError


def _column_offsets(f, base: int, width: int) -> list:
    return [base + read_u32(f) for _ in range(width)]


def rle0_decompress(f, base: int, width: int, height: int) -> bytes:
    """Decode an RLE0 (zero-run) column image. f sits on the offset table."""
    columns = bytearray()

    for offset in _column_offsets(f, base, width):
        f.seek(offset)
        unpacked = 0
        while unpacked < height:
            control = read_u8(f)
            if control <= 128:
                columns += read_bytes(f, control)
            else:
                control -= 128
                columns += bytes(control)
            unpacked += control

    if len(columns) != width * height:
        raise DecodingError(
            f"RLE0 decoded size did not match: {len(columns)} != {width}x{height}")
    return bytes(columns)


def rle1_decompress(f, base: int, width: int, height: int) -> bytes:
    """Decode an RLE1 (byte-run) column image. f sits on the offset table."""
    columns = bytearray()

    for offset in _column_offsets(f, base, width):
        f.seek(offset)
        unpacked = 0
        while unpacked < height:
            control = read_u8(f)
            if control < 128:
                columns += read_bytes(f, control)
            else:
                value = read_u8(f)
                control -= 128
                columns += bytes([value]) * control
            unpacked += control

    if len(columns) != width * height:
        raise DecodingError(
            f"RLE1 decoded size did not match: {len(columns)} != {width}x{height}")
    return bytes(columns)


def columns_to_rows(width: int, height: int, columns: bytes) -> bytes:
    """Transpose bottom-to-top columns into top-to-bottom rows."""
    if len(columns) != width * height:
        raise DecodingError(f"pixel count {len(columns)} != {width}x{height}")
    rows = bytearray(width * height)
    for x in range(width):
        # column x, reversed, lands on every width-th byte starting at x
        start = x * height
        rows[x::width] = columns[start:start + height][::-1]
    return bytes(rows)


def rows_to_columns(width: int, height: int, rows: bytes) -> bytes:
    """Inverse of columns_to_rows."""
    if len(rows) != width * height:
        raise DecodingError(f"pixel count {len(rows)} != {width}x{height}")
    columns = bytearray(width * height)
    for x in range(width):
        start = x * height
        columns[start:start + height] = rows[x::width][::-1]
    return bytes(columns)
