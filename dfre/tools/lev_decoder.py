#!/usr/bin/env python3
"""
Dark Forces LEV Decoder

Parses level geometry and reports sectors, stitched floor polygons and
triangle counts.

Usage:
  df-level --gob DARK.GOB SECBASE.LEV             # Summary
  df-level --gob DARK.GOB SECBASE.LEV --sector 3  # One sector in detail
  df-level SECBASE.LEV --open                     # Sectors with unclosed walls
"""

import argparse
import sys

from ..errors import ReadError
from ..geometry import stitch_walls, triangulate_sector_indices
from ..lev import read_lev
from . import load_input, setup_logging


def sector_summary(sector) -> dict:
    polygons, contours = stitch_walls((w.left_vertex, w.right_vertex) for w in sector.walls)
    return {
        'id': sector.id,
        'name': sector.name or '',
        'vertices': len(sector.vertices),
        'walls': len(sector.walls),
        'polygons': len(polygons),
        'open': len(contours),
        'triangles': len(triangulate_sector_indices(sector)),
        'layer': sector.layer,
    }


def show_level(level):
    print(f"Level {level.name} (LEV {level.version})")
    print(f"  Palette:   {level.palette_name}")
    print(f"  Music:     {level.music}")
    print(f"  Parallax:  {level.parallax[0]:.2f} {level.parallax[1]:.2f}")
    print(f"  Textures:  {len(level.texture_names)}")
    print(f"  Sectors:   {len(level.sectors)}")
    print()
    print(f"  {'Id':>4}  {'Name':<16s} {'Layer':>5}  {'Verts':>5}  {'Walls':>5}  "
          f"{'Polys':>5}  {'Open':>4}  {'Tris':>4}")
    for sector in level.sectors:
        s = sector_summary(sector)
        print(f"  {s['id']:4d}  {s['name']:<16s} {s['layer']:5d}  {s['vertices']:5d}  "
              f"{s['walls']:5d}  {s['polygons']:5d}  {s['open']:4d}  {s['triangles']:4d}")


def show_sector(level, index: int):
    sector = level.sectors[index]
    polygons, contours = stitch_walls((w.left_vertex, w.right_vertex) for w in sector.walls)

    def tex(t):
        name = level.texture_names[t.index] if t.index is not None and t.index < len(level.texture_names) else '--'
        return f"{name} ({t.offset[0]:.2f}, {t.offset[1]:.2f})"

    print(f"Sector {sector.id} {sector.name or ''}")
    print(f"  Ambient:  {sector.ambient}")
    print(f"  Floor:    {sector.floor_altitude:.2f}  {tex(sector.floor_texture)}")
    print(f"  Ceiling:  {sector.ceiling_altitude:.2f}  {tex(sector.ceiling_texture)}")
    print(f"  Flags:    {sector.flags}")
    print(f"  Layer:    {sector.layer}")
    print(f"  Polygons: {polygons}")
    if contours:
        print(f"  Open:     {contours}")
    for i, wall in enumerate(sector.walls):
        kind = 'solid' if wall.solid else f'adjoin {wall.adjoin_sector}'
        print(f"  [{i:3d}] {wall.left_vertex:3d} -> {wall.right_vertex:3d}  {kind:<10s}  "
              f"mid {tex(wall.middle_texture)}")


def main(argv=None):
    p = argparse.ArgumentParser(description='Dark Forces LEV Decoder')
    p.add_argument('file', help='LEV file, or entry name with --gob')
    p.add_argument('--gob', metavar='ARCHIVE', help='Read the level from this archive')
    p.add_argument('--sector', type=int, metavar='N', help='Show sector N in detail')
    p.add_argument('--open', action='store_true',
                   help='List sectors whose walls do not close')
    p.add_argument('-v', '--verbose', action='store_true')
    args = p.parse_args(argv)
    setup_logging(args.verbose)

    try:
        _, data = load_input(args.file, args.gob)
        level = read_lev(data)
    except (OSError, KeyError, ReadError) as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 1

    if args.sector is not None:
        if not 0 <= args.sector < len(level.sectors):
            print(f"Error: sector {args.sector} out of range (0-{len(level.sectors) - 1})",
                  file=sys.stderr)
            return 1
        show_sector(level, args.sector)
        return 0

    if args.open:
        count = 0
        for i, sector in enumerate(level.sectors):
            s = sector_summary(sector)
            if s['open']:
                print(f"  [{i:4d}] sector {s['id']} {s['name']}: {s['open']} open contour(s)")
                count += 1
        print(f"{count} sector(s) with open contours")
        return 0

    show_level(level)
    return 0


if __name__ == '__main__':
    sys.exit(main() or 0)
