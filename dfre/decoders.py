"""
dfre: Pick a decoder from a catalog entry name.

Entry names carry the format as their suffix (SECBASE.LEV, STORMFIN.WAX,
PORTRAIT.ANIM inside an LFD). decode_entry hands the payload to the
matching reader and returns the decoded value, or None when no reader
exists for the suffix. Decode errors propagate; callers that browse whole
archives catch ReadError per entry.
"""

from .bm import read_bm
from .fme import read_fme
from .gmd import read_gmd
from .lev import read_lev
from .pal import read_pal
from .voc import read_voc
from .wax import read_wax

DECODERS = {
    'BM': read_bm,
    'FME': read_fme,
    'WAX': read_wax,
    'PAL': read_pal,
    'VOC': read_voc,
    'GMD': read_gmd,
    'LEV': read_lev,
}


def suffix(name: str) -> str:
    return name.rsplit('.', 1)[-1].upper() if '.' in name else ''


def decoder_for(name: str):
    return DECODERS.get(suffix(name))


def decode_entry(name: str, data: bytes):
    decoder = decoder_for(name)
    if decoder is None:
        return None
    return decoder(data)
