#!/usr/bin/env python3
"""
Dark Forces Archive Index

Lists the catalog of GOB and LFD archives with sizes, format category and
the tool that decodes each entry.

Usage:
  df-index DARK.GOB SOUNDS.GOB              # Full index
  df-index DARK.GOB --category level        # Filter by category
  df-index *.GOB --summary                  # Category summary
  df-index DARK.GOB --extract out/ --match '*.LEV'   # Extract raw entries
"""

import argparse
import fnmatch
import os
import sys

from ..catalog import open_catalog
from ..constants import CATEGORIES, classify_name
from ..errors import ReadError
from . import setup_logging


def scan_archives(paths: list) -> list:
    """Read every archive catalog and classify its entries."""
    results = []
    for path in paths:
        catalog = open_catalog(path)
        for entry in catalog:
            category = classify_name(entry.name)
            suffix = entry.name.rsplit('.', 1)[-1].upper()
            _, desc, tool = CATEGORIES.get(suffix, (category, 'Unclassified', None))
            results.append({
                'archive': os.path.basename(path),
                'path': path,
                'name': entry.name,
                'offset': entry.offset,
                'length': entry.length,
                'category': category,
                'description': desc,
                'tool': tool,
                'catalog': catalog,
                'entry': entry,
            })
    return results


def show_index(results: list, category_filter: str = None):
    """Display full entry index."""
    if category_filter:
        results = [r for r in results if r['category'] == category_filter]

    print(f"{'Archive':<13s} {'Entry':<14s} {'Offset':>9}  {'Size':>8}  {'Category':<9s}  {'Tool'}")
    print('-' * 72)

    for r in results:
        tool = r['tool'] or '--'
        print(f"{r['archive']:<13s} {r['name']:<14s} 0x{r['offset']:07X}  {r['length']:>8,}  "
              f"{r['category']:<9s}  {tool}")

    print(f"\nTotal: {len(results)} entries")


def show_summary(results: list):
    """Display category summary."""
    cats = {}
    for r in results:
        cat = cats.setdefault(r['category'], {'count': 0, 'total': 0, 'tool': r['tool']})
        cat['count'] += 1
        cat['total'] += r['length']

    print(f"{'Category':<10s} {'Count':>5}  {'Size':>11}  {'Tool'}")
    print('-' * 44)

    for name in sorted(cats):
        info = cats[name]
        print(f"{name:<10s} {info['count']:>5}  {info['total']:>11,}  {info['tool'] or '--'}")

    total_count = sum(c['count'] for c in cats.values())
    total_size = sum(c['total'] for c in cats.values())
    print(f"\n{'Total':<10s} {total_count:>5}  {total_size:>11,}")


def extract(results: list, outdir: str, pattern: str) -> int:
    """Write matching entry payloads to outdir. Returns the count written."""
    os.makedirs(outdir, exist_ok=True)
    written = 0
    for r in results:
        if not fnmatch.fnmatch(r['name'].upper(), pattern.upper()):
            continue
        # entry names come from the archive; keep only the final component
        filename = os.path.basename(r['name'].replace('\\', '/'))
        if filename in ('', '.', '..'):
            print(f"Skipping unsafe entry name: {r['name']!r}", file=sys.stderr)
            continue
        with open(r['path'], 'rb') as f:
            data = r['catalog'].read(f, r['entry'])
        with open(os.path.join(outdir, filename), 'wb') as out:
            out.write(data)
        written += 1
    return written


def main(argv=None):
    p = argparse.ArgumentParser(
        description='Dark Forces Archive Index (GOB/LFD)',
        formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument('archives', nargs='+', help='GOB or LFD archive(s)')
    p.add_argument('--category', '-c', help='Filter by category')
    p.add_argument('--summary', '-s', action='store_true',
                   help='Show category summary')
    p.add_argument('--extract', metavar='DIR',
                   help='Extract raw entries to DIR')
    p.add_argument('--match', default='*',
                   help='Entry name pattern for --extract (default: *)')
    p.add_argument('-v', '--verbose', action='store_true')
    args = p.parse_args(argv)
    setup_logging(args.verbose)

    for path in args.archives:
        if not os.path.isfile(path):
            print(f"File not found: {path}", file=sys.stderr)
            return 1

    try:
        results = scan_archives(args.archives)
    except ReadError as e:
        print(f"Bad archive: {e}", file=sys.stderr)
        return 1

    if args.extract:
        n = extract(results, args.extract, args.match)
        print(f"Extracted {n} entries to {args.extract}/")
    elif args.summary:
        show_summary(results)
    else:
        show_index(results, args.category)

    return 0


if __name__ == '__main__':
    sys.exit(main() or 0)
