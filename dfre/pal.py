"""
dfre: PAL palette decoder.

A palette is exactly 768 bytes: 256 × (r, g, b), each channel 0..63 as
programmed into the VGA DAC. Channels are expanded to 8 bits by replicating
the top bits into the bottom: (v << 2) | (v >> 4), so 0 → 0 and 63 → 255.

Index 0 is conventionally transparent for images, the palette itself does
not enforce that (see indexed_to_rgba).
"""

from dataclasses import dataclass
from typing import Tuple

from .binio import as_stream, read_u8
from .constants import PAL_ENTRIES


def expand_channel(value: int) -> int:
    """Expand a 6-bit VGA channel to 8 bits."""
    return ((value << 2) | (value >> 4)) & 0xFF


@dataclass(frozen=True)
class PaletteEntry:
    r: int
    g: int
    b: int

    def to_rgb(self) -> Tuple[int, int, int]:
        return (expand_channel(self.r), expand_channel(self.g), expand_channel(self.b))


@dataclass(frozen=True)
class Palette:
    entries: Tuple[PaletteEntry, ...]

    def __getitem__(self, index):
        return self.entries[index]

    def __len__(self):
        return len(self.entries)

    def to_rgb(self) -> list:
        return [e.to_rgb() for e in self.entries]


def read_pal(data) -> Palette:
    """Decode a 768-byte palette, reading r, g, b field by field."""
    f = as_stream(data)
    entries = []
    for _ in range(PAL_ENTRIES):
        r = read_u8(f)
        g = read_u8(f)
        b = read_u8(f)
        entries.append(PaletteEntry(r, g, b))
    return Palette(tuple(entries))


def indexed_to_rgba(pixels: bytes, palette: Palette, transparent: bool = True) -> bytes:
    """Convert palette indices to RGBA8 bytes.

    With transparent set, index 0 becomes (0, 0, 0, 0).
    """
    lut = [bytes(rgb) + b'\xff' for rgb in palette.to_rgb()]
    if transparent:
        lut[0] = b'\x00\x00\x00\x00'
    return b''.join(lut[i] for i in pixels)
