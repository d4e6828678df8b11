"""
dfre: FME sprite frame decoder.

Frame header (at offset 0 in an FME, at each frame offset in a WAX):
  int32 LE  insert_x, insert_y   (draw offset relative to the object)
  uint32 LE flip                 (non-zero: mirror horizontally)
  uint32 LE cell_offset
  uint32 LE unit_width, unit_height, pad, pad   (unused)

Cell (at cell_offset):
  uint32 LE width, height
  uint32 LE compressed           (non-zero: RLE0)
  uint32 LE data_size
  int32 LE  data_offset          always 0
  uint32 LE padding
  then width × height raw bytes, or the RLE0 column table with offsets
  relative to the start of the cell.
"""

from dataclasses import dataclass
from typing import Tuple

from .binio import as_stream, read_bytes, read_i32, read_u32, read_vec2_i32, read_vec2_u32
from .compression import columns_to_rows, rle0_decompress
from .errors import DecodingError


@dataclass(frozen=True)
class Frame:
    offset: Tuple[int, int]
    flip: bool


@dataclass(frozen=True)
class Cell:
    size: Tuple[int, int]
    compressed: bool
    pixels: bytes

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]


@dataclass(frozen=True)
class Fme:
    frame: Frame
    cell: Cell


def read_frame(f) -> Frame:
    """Read frame placement from the current position."""
    offset = read_vec2_i32(f)
    flip = read_u32(f) != 0
    return Frame(offset, flip)


def read_cell(f, offset: int) -> Cell:
    """Read the cell at offset and decode its pixels."""
    f.seek(offset)
    width, height = read_vec2_u32(f)
    compressed = read_u32(f) != 0
    read_u32(f)  # data size
    data_offset = read_i32(f)
    read_u32(f)  # padding

    if data_offset != 0:
        raise DecodingError(f"cell at 0x{offset:X} has data offset {data_offset}, expected 0")

    if compressed:
        columns = rle0_decompress(f, offset, width, height)
    else:
        columns = read_bytes(f, width * height)

    return Cell((width, height), compressed, columns_to_rows(width, height, columns))


def read_fme(data) -> Fme:
    f = as_stream(data)
    frame = read_frame(f)
    cell_offset = read_u32(f)
    return Fme(frame, read_cell(f, cell_offset))
