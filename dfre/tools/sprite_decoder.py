#!/usr/bin/env python3
"""
Dark Forces Image/Sprite Decoder

Decodes BM bitmaps, FME frames and WAX sprites to palette-indexed images.

Usage:
  df-sprite --gob TEXTURES.GOB ZWALL1.BM --stats
  df-sprite --gob SPRITES.GOB STORMFIN.WAX --stats
  df-sprite --gob SPRITES.GOB STORMFIN.WAX --pal SECBASE.PAL --pal-gob DARK.GOB --export out/
  df-sprite IST-GUNI.FME --ascii
"""

import argparse
import os
import sys

from ..bm import Bm
from ..decoders import decode_entry
from ..errors import ReadError
from ..fme import Fme
from ..pal import read_pal
from ..wax import Wax
from . import load_input, setup_logging

ASCII_RAMP = " .:-=+*#%@"


def images(decoded) -> list:
    """(label, width, height, pixels) for every image in a decoded sprite."""
    if isinstance(decoded, Bm):
        return [('bm', decoded.width, decoded.height, decoded.pixels)]
    if isinstance(decoded, Fme):
        cell = decoded.cell
        return [('cell', cell.width, cell.height, cell.pixels)]
    if isinstance(decoded, Wax):
        return [(f'cell{i:03d}', c.width, c.height, c.pixels)
                for i, c in enumerate(decoded.cells)]
    raise TypeError(f"not an image: {type(decoded).__name__}")


def grey_palette() -> list:
    return [(i, i, i) for i in range(256)]


def image_to_ppm(width: int, height: int, pixels: bytes, palette: list, outpath: str) -> bool:
    """Write an indexed image as a binary PPM."""
    if width == 0 or height == 0:
        return False
    with open(outpath, 'wb') as f:
        f.write(f'P6\n{width} {height}\n255\n'.encode())
        f.write(b''.join(bytes(palette[i]) for i in pixels))
    return True


def ascii_art(width: int, height: int, pixels: bytes, max_width: int = 80) -> list:
    step = max(1, width // max_width)
    lines = []
    for y in range(0, min(height, 60)):
        row = pixels[y * width:(y + 1) * width:step]
        lines.append(''.join(ASCII_RAMP[v * len(ASCII_RAMP) // 256] for v in row))
    return lines


def show_stats(name: str, decoded):
    print(f"File: {name}")
    if isinstance(decoded, Bm):
        print(f"  Size:        {decoded.width} x {decoded.height}")
        print(f"  Compression: {decoded.compression.name}")
        print(f"  Flags:       0x{decoded.flags:02X} ({'transparent' if decoded.transparent else 'opaque'})")
        if decoded.multiple:
            print("  Multi-BM:    yes (placeholder)")
    elif isinstance(decoded, Fme):
        print(f"  Offset:      {decoded.frame.offset}  flip={decoded.frame.flip}")
        print(f"  Cell:        {decoded.cell.width} x {decoded.cell.height}"
              f"  {'RLE0' if decoded.cell.compressed else 'raw'}")
    elif isinstance(decoded, Wax):
        print(f"  Version:     0x{decoded.version:X}")
        print(f"  States:      {len(decoded.states)}")
        print(f"  Sequences:   {len(decoded.sequences)} (header says {decoded.num_sequences})")
        print(f"  Frames:      {len(decoded.frames)} (header says {decoded.num_frames})")
        print(f"  Cells:       {len(decoded.cells)} (header says {decoded.num_cells})")
        print()
        print(f"  {'State':>5}  {'World':>11}  {'Rate':>4}  Unique sequences")
        for i, state in enumerate(decoded.states):
            unique = sorted(set(state.angle_sequence_indices))
            print(f"  {i:5d}  {state.world_size[0]:5d}x{state.world_size[1]:<5d}  "
                  f"{state.frame_rate:4d}  {unique}")


def main(argv=None):
    p = argparse.ArgumentParser(
        description='Dark Forces Image/Sprite Decoder (BM, FME, WAX)',
        formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument('file', help='BM/FME/WAX file, or entry name with --gob')
    p.add_argument('--gob', metavar='ARCHIVE', help='Read the image from this archive')
    p.add_argument('--pal', metavar='PAL', help='Palette file (or entry with --pal-gob)')
    p.add_argument('--pal-gob', metavar='ARCHIVE', help='Read the palette from this archive')
    p.add_argument('--stats', action='store_true', help='Show structure')
    p.add_argument('--export', metavar='DIR', help='Export images as PPM to DIR')
    p.add_argument('--ascii', action='store_true', help='ASCII-art preview of the first image')
    p.add_argument('-v', '--verbose', action='store_true')
    args = p.parse_args(argv)
    setup_logging(args.verbose)

    try:
        name, data = load_input(args.file, args.gob)
        decoded = decode_entry(name, data)
    except (OSError, KeyError, ReadError) as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 1
    if not isinstance(decoded, (Bm, Fme, Wax)):
        print(f"{name}: not a BM, FME or WAX", file=sys.stderr)
        return 1

    if args.stats:
        show_stats(name, decoded)
        return 0

    if args.ascii:
        label, w, h, pixels = images(decoded)[0]
        print(f"{name} {label}: {w}x{h}")
        print('\n'.join(ascii_art(w, h, pixels)))
        return 0

    if args.export:
        palette = grey_palette()
        if args.pal:
            try:
                _, pal_data = load_input(args.pal, args.pal_gob)
                palette = read_pal(pal_data).to_rgb()
            except (OSError, KeyError, ReadError) as e:
                print(f"{args.pal}: {e}", file=sys.stderr)
                return 1
        os.makedirs(args.export, exist_ok=True)
        base = os.path.splitext(name)[0]
        exported = 0
        found = images(decoded)
        for label, w, h, pixels in found:
            outpath = os.path.join(args.export, f'{base}_{label}.ppm')
            if image_to_ppm(w, h, pixels, palette, outpath):
                exported += 1
        print(f"Exported {exported}/{len(found)} images to {args.export}/")
        return 0

    for label, w, h, _ in images(decoded):
        print(f"  {name} {label}: {w}x{h}")
    return 0


if __name__ == '__main__':
    sys.exit(main() or 0)
