"""
Shared builders for synthetic Dark Forces data.

Everything here writes the formats the library only reads, so tests can
assemble small archives, images and sounds with known contents.
"""

import struct

import pytest

from dfre.compression import rows_to_columns
from dfre.constants import BM_MAGIC, CELL_HEADER_SIZE, GOB_MAGIC, VOC_MAGIC


class Blob:
    """Growable byte buffer that hands out absolute offsets."""

    def __init__(self, size: int = 0):
        self.data = bytearray(size)

    def append(self, chunk: bytes) -> int:
        offset = len(self.data)
        self.data += chunk
        return offset

    def patch(self, offset: int, chunk: bytes):
        self.data[offset:offset + len(chunk)] = chunk

    def __bytes__(self):
        return bytes(self.data)


# =============================================================================
# ARCHIVES
# =============================================================================

def make_gob(entries) -> bytes:
    """entries: [(name, payload)]"""
    blob = Blob(8)
    directory = []
    for name, payload in entries:
        directory.append((blob.append(payload), len(payload), name))
    catalog_offset = blob.append(struct.pack('<I', len(directory)))
    for offset, length, name in directory:
        blob.append(struct.pack('<II13s', offset, length, name.encode('ascii')))
    blob.patch(0, GOB_MAGIC + struct.pack('<I', catalog_offset))
    return bytes(blob)


def make_lfd(entries) -> bytes:
    """entries: [(type, name, payload)]"""
    out = bytearray()
    for kind, name, payload in entries:
        out += struct.pack('<4s8sI', kind.encode('ascii'), name.encode('ascii'), len(payload))
        out += payload
    return bytes(out)


# =============================================================================
# RLE ENCODERS
# =============================================================================

def rle0_column(column: bytes) -> bytes:
    out = bytearray()
    i = 0
    while i < len(column):
        j = i
        if column[i] == 0:
            while j < len(column) and column[j] == 0 and j - i < 127:
                j += 1
            out.append(128 + (j - i))
        else:
            while j < len(column) and column[j] != 0 and j - i < 128:
                j += 1
            out.append(j - i)
            out += column[i:j]
        i = j
    return bytes(out)


def rle1_column(column: bytes) -> bytes:
    out = bytearray()
    i = 0
    n = len(column)
    while i < n:
        j = i
        while j < n and column[j] == column[i] and j - i < 127:
            j += 1
        if j - i >= 3:
            out += bytes([128 + (j - i), column[i]])
        else:
            j = i
            while j < n and j - i < 127 and not (
                    j + 2 < n and column[j] == column[j + 1] == column[j + 2]):
                j += 1
            out.append(j - i)
            out += column[i:j]
        i = j
    return bytes(out)


# =============================================================================
# IMAGES
# =============================================================================

def make_bm(width: int, height: int, rows: bytes, compression: int = 0, flags: int = 0) -> bytes:
    columns = rows_to_columns(width, height, rows)
    if compression == 0:
        payload = columns
        table = b''
    else:
        encoder = rle1_column if compression == 1 else rle0_column
        encoded = [encoder(columns[x * height:(x + 1) * height]) for x in range(width)]
        offsets = []
        pos = 0
        for column in encoded:
            offsets.append(pos)
            pos += len(column)
        payload = b''.join(encoded)
        table = struct.pack(f'<{width}I', *offsets)
    header = struct.pack('<4sHHHHBBBBI12x', BM_MAGIC, width, height, width, height,
                         flags, 0, compression, 0, len(payload))
    return header + payload + table


def make_cell(width: int, height: int, rows: bytes, compressed: bool = False,
              data_offset: int = 0) -> bytes:
    """A position independent cell: RLE offsets are relative to its start."""
    columns = rows_to_columns(width, height, rows)
    if not compressed:
        body = columns
    else:
        encoded = [rle0_column(columns[x * height:(x + 1) * height]) for x in range(width)]
        offsets = []
        pos = CELL_HEADER_SIZE + 4 * width
        for column in encoded:
            offsets.append(pos)
            pos += len(column)
        body = struct.pack(f'<{width}I', *offsets) + b''.join(encoded)
    return struct.pack('<IIIIiI', width, height, int(compressed), len(body), data_offset, 0) + body


def frame_record(x: int, y: int, flip: bool, cell_offset: int) -> bytes:
    return struct.pack('<iiII', x, y, int(flip), cell_offset) + bytes(16)


def make_fme(x, y, flip, cell: bytes) -> bytes:
    return frame_record(x, y, flip, 32) + cell


# =============================================================================
# AUDIO
# =============================================================================

def voc_chunk(kind: int, payload: bytes = b'') -> bytes:
    return bytes([kind]) + struct.pack('<I', len(payload))[:3] + payload


def make_voc(chunks, version: int = 0x010A, check: int = None) -> bytes:
    if check is None:
        check = ((~version) + 0x1234) & 0xFFFF
    return VOC_MAGIC + struct.pack('<HH', version, check) + b''.join(chunks) + b'\x00'


# =============================================================================
# LEVELS
# =============================================================================

def wall_line(left: int, right: int, adjoin: int = -1, light: int = 0) -> str:
    return (f"    WALL LEFT: {left} RIGHT: {right} MID: 1 0.00 0.00 0 TOP: -1 0.00 0.00 0 "
            f"BOT: -1 0.00 0.00 0 SIGN: -1 0.00 0.00 ADJOIN: {adjoin} MIRROR: {adjoin} "
            f"WALK: {adjoin} FLAGS: 0 0 0 LIGHT: {light}\n")


LEVEL_TEXT = """\
LEV 2.1
LEVELNAME TEST
# header comment
PALETTE SECBASE.PAL
MUSIC NATURAL.GMD
PARALLAX 1024.0000 768.5000

TEXTURES 2
TEXTURE: DEFAULT.BM   # 0
TEXTURE: ZWALL1.BM
NUMSECTORS 1

SECTOR 0
  NAME start
  AMBIENT 20
  FLOOR TEXTURE 0 0.00 0.00 0
  FLOOR ALTITUDE 0.00
  CEILING TEXTURE 1 1.50 -2.00 0
  CEILING ALTITUDE -16.00
  SECOND ALTITUDE 0.00
  FLAGS 1 0 0
  LAYER -1
  VERTICES 3
    X: 0.00 Z: 0.00   # origin
    X: 10.00 Z: 0.00
    X: 0.00 Z: 10.00
  WALLS 3
""" + wall_line(0, 1) + wall_line(1, 2, light=5) + """\
    # the last wall adjoins nothing
""" + wall_line(2, 0)


@pytest.fixture
def level_text():
    return LEVEL_TEXT


@pytest.fixture
def gradient():
    """4x3 image whose rows are distinguishable: row y, column x = 16*y + x + 1."""
    width, height = 4, 3
    rows = bytes(16 * y + x + 1 for y in range(height) for x in range(width))
    return width, height, rows
