#!/usr/bin/env python3
"""
Dark Forces Sound Decoder

Analyzes Creative Voice File (VOC) sound effects and exports them to WAV.
Inputs are loose .VOC files or entries of an archive (--gob SOUNDS.GOB).

Usage:
  df-sound BLASTER.VOC                        # Analyze a file
  df-sound --gob SOUNDS.GOB ST-DIE-1.VOC      # Analyze an archive entry
  df-sound --gob SOUNDS.GOB *.VOC --wav out/  # Export to WAV
"""

import argparse
import fnmatch
import os
import struct
import sys

from ..catalog import open_catalog
from ..errors import ReadError
from ..voc import Repeat, RepeatEnd, Silence, SoundContinue, SoundStart, Unknown, read_voc
from . import load_input, setup_logging


def describe(name: str, voc) -> list:
    """Human readable analysis lines for a decoded VOC."""
    rate = voc.sample_rate
    pcm = voc.pcm()
    lines = [f"=== {name} ==="]
    lines.append(f"  VOC version:   {voc.version >> 8}.{voc.version & 0xFF:02d}")
    lines.append(f"  Sample rate:   {rate if rate else '--'}")
    lines.append(f"  Total samples: {len(pcm):,}")
    if rate:
        lines.append(f"  Duration:      {len(pcm) / rate.hz:.2f}s")
    lines.append(f"  Chunks:        {len(voc.chunks)}")

    for i, chunk in enumerate(voc.chunks):
        if isinstance(chunk, SoundStart):
            codec = 'PCM8' if chunk.codec == 0 else f'0x{chunk.codec:02X}'
            text = f"sound    {len(chunk.data):8,} samples  {chunk.sample_rate}  {codec}"
        elif isinstance(chunk, SoundContinue):
            text = f"continue {len(chunk.data):8,} samples"
        elif isinstance(chunk, Silence):
            text = f"silence  {chunk.sample_count + 1:8,} samples  {chunk.sample_rate}"
        elif isinstance(chunk, Repeat):
            text = f"repeat   {'forever' if chunk.count is None else chunk.count}"
        elif isinstance(chunk, RepeatEnd):
            text = "end repeat"
        elif isinstance(chunk, Unknown):
            text = f"unknown  type 0x{chunk.kind:02X} ({chunk.length} bytes)"
        lines.append(f"  [{i:3d}] {text}")
    return lines


def export_wav(name: str, voc, outdir: str) -> str:
    """Write VOC samples as an 8-bit mono WAV. Returns the output path."""
    samples = voc.pcm()
    rate = voc.sample_rate.hz if voc.sample_rate else 11025
    base = os.path.splitext(name)[0]
    outpath = os.path.join(outdir, f"{base}.wav")

    data_size = len(samples)
    with open(outpath, 'wb') as f:
        f.write(b'RIFF')
        f.write(struct.pack('<I', 36 + data_size))  # file size - 8
        f.write(b'WAVE')
        f.write(b'fmt ')
        f.write(struct.pack('<I', 16))          # chunk size
        f.write(struct.pack('<H', 1))           # PCM format
        f.write(struct.pack('<H', 1))           # mono
        f.write(struct.pack('<I', rate))        # sample rate
        f.write(struct.pack('<I', rate))        # byte rate (sr * 1 * 1)
        f.write(struct.pack('<H', 1))           # block align
        f.write(struct.pack('<H', 8))           # bits per sample
        f.write(b'data')
        f.write(struct.pack('<I', data_size))
        f.write(samples)

    return outpath


def _inputs(names: list, archive: str) -> list:
    if archive is None:
        return names
    catalog = open_catalog(archive)
    matched = []
    for pattern in names:
        matched.extend(n for n in catalog.names() if fnmatch.fnmatch(n.upper(), pattern.upper()))
    return matched


def main(argv=None):
    p = argparse.ArgumentParser(
        description='Dark Forces Sound Decoder (VOC format)',
        formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument('files', nargs='+', help='VOC file(s), or entry patterns with --gob')
    p.add_argument('--gob', metavar='ARCHIVE', help='Read entries from this archive')
    p.add_argument('--wav', type=str, default=None, metavar='DIR',
                   help='Export to WAV files in DIR')
    p.add_argument('-v', '--verbose', action='store_true')
    args = p.parse_args(argv)
    setup_logging(args.verbose)

    status = 0
    for path in _inputs(args.files, args.gob):
        try:
            name, data = load_input(path, args.gob)
            voc = read_voc(data)
        except (OSError, KeyError, ReadError) as e:
            print(f"{path}: {e}", file=sys.stderr)
            status = 1
            continue

        if args.wav:
            os.makedirs(args.wav, exist_ok=True)
            outpath = export_wav(name, voc, args.wav)
            print(f"Exported {name} -> {outpath}")
        else:
            print('\n'.join(describe(name, voc)))
            print()

    return status


if __name__ == '__main__':
    sys.exit(main() or 0)
