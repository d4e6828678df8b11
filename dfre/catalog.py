"""
dfre: Archive catalog readers.

Two container layouts, one result type:

GOB (random access, trailing directory):
  char[4]   "GOB\\n"
  uint32 LE catalog_offset
  ...       entry payloads
  at catalog_offset:
    uint32 LE count
    count × { uint32 offset, uint32 length, char[13] name (NUL padded) }

LFD (sequential, self describing):
  repeated until EOF:
    char[4]   type   (e.g. "ANIM", "DELT", "VOIC")
    char[8]   name   (NUL padded)
    uint32 LE length
    byte[length] payload
  The logical entry name is "<name>.<type>". Its offset is the stream cursor
  after the 16-byte record header, so each record advances it by 16 + length.

Entries are located by name with a linear scan; catalogs hold a few hundred
entries at most.
"""

import io
import os
from dataclasses import dataclass
from typing import List

from .binio import read_bytes, read_cstr, read_u32
from .constants import GOB_MAGIC, GOB_NAME_SIZE, LFD_HEADER_SIZE, LFD_NAME_SIZE, LFD_TYPE_SIZE
from .errors import DecodingError, SignatureError, TruncatedError


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    offset: int
    length: int


class Catalog:
    """Ordered list of CatalogEntry read from one archive."""

    def __init__(self, entries):
        self.entries: List[CatalogEntry] = list(entries)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def find(self, name: str, ignore_case: bool = True) -> CatalogEntry:
        """Return the first entry called name. Raises KeyError if absent."""
        if ignore_case:
            wanted = name.upper()
            for entry in self.entries:
                if entry.name.upper() == wanted:
                    return entry
        else:
            for entry in self.entries:
                if entry.name == name:
                    return entry
        raise KeyError(name)

    def read(self, f, entry: CatalogEntry) -> bytes:
        """Read the payload of entry from the archive stream f.

        Uses os.pread when f is a real file, so concurrent readers sharing
        one descriptor do not race on the file position.
        """
        fileno = _fileno(f)
        if fileno is not None and hasattr(os, 'pread'):
            data = os.pread(fileno, entry.length, entry.offset)
            if len(data) != entry.length:
                raise TruncatedError(entry.length, len(data), entry.offset)
            return data
        f.seek(entry.offset)
        return read_bytes(f, entry.length)

    def open(self, f, entry: CatalogEntry) -> 'EntryStream':
        """Return a seekable view of entry inside f, offsets relative to it."""
        return EntryStream(f, entry.offset, entry.length)


class EntryStream(io.RawIOBase):
    """Bounded window [offset, offset + length) over a seekable stream.

    Seeks are translated to the underlying stream; reads stop at the end of
    the window. The underlying position is stateful, so one view per stream
    at a time.
    """

    def __init__(self, f, offset: int, length: int):
        super().__init__()
        self._f = f
        self._offset = offset
        self._length = length
        self._pos = 0

    def readable(self):
        return True

    def seekable(self):
        return True

    def tell(self):
        return self._pos

    def seek(self, pos, whence=io.SEEK_SET):
        if whence == io.SEEK_SET:
            new = pos
        elif whence == io.SEEK_CUR:
            new = self._pos + pos
        elif whence == io.SEEK_END:
            new = self._length + pos
        else:
            raise ValueError(f"invalid whence {whence}")
        if new < 0:
            raise OSError(f"negative seek position {new}")
        self._pos = new
        return new

    def readinto(self, buf):
        remaining = self._length - self._pos
        if remaining <= 0:
            return 0
        n = min(len(buf), remaining)
        self._f.seek(self._offset + self._pos)
        data = self._f.read(n)
        buf[:len(data)] = data
        self._pos += len(data)
        return len(data)


# =============================================================================
# GOB
# =============================================================================

def read_gob(f) -> Catalog:
    """Read the directory of a GOB archive."""
    magic = read_bytes(f, 4)
    if magic != GOB_MAGIC:
        raise SignatureError(GOB_MAGIC, magic)

    catalog_offset = read_u32(f)
    f.seek(catalog_offset)
    count = read_u32(f)

    entries = []
    for _ in range(count):
        offset = read_u32(f)
        length = read_u32(f)
        name = read_cstr(f, GOB_NAME_SIZE)
        entries.append(CatalogEntry(name, offset, length))

    return Catalog(entries)


# =============================================================================
# LFD
# =============================================================================

def read_lfd(f) -> Catalog:
    """Walk the records of an LFD archive until end of stream."""
    entries = []

    while True:
        start = f.tell()
        kind = f.read(LFD_TYPE_SIZE)
        if len(kind) == 0:
            break
        if len(kind) != LFD_TYPE_SIZE:
            raise TruncatedError(LFD_TYPE_SIZE, len(kind), start)

        name = read_cstr(f, LFD_NAME_SIZE)
        length = read_u32(f)
        try:
            kind = kind.decode('ascii')
        except UnicodeDecodeError:
            raise DecodingError(f"non-ASCII LFD type {kind!r} at 0x{start:X}") from None

        offset = start + LFD_HEADER_SIZE
        entries.append(CatalogEntry(f"{name}.{kind}", offset, length))

        f.seek(offset + length)

    return Catalog(entries)


def open_catalog(path) -> Catalog:
    """Read the catalog of the archive at path, GOB or LFD by suffix."""
    suffix = os.path.splitext(str(path))[1].upper()
    with open(path, 'rb') as f:
        if suffix == '.LFD':
            return read_lfd(f)
        return read_gob(f)


def _fileno(f):
    try:
        return f.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return None
