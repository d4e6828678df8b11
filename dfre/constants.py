"""
dfre: Format constants and asset classification tables.

Magic numbers and fixed record sizes for every decoded format, plus the
suffix → category table used by the index tool.
"""

# =============================================================================
# ARCHIVES
# =============================================================================

GOB_MAGIC = b'GOB\n'
GOB_NAME_SIZE = 13          # fixed NUL-padded name field per catalog entry

LFD_TYPE_SIZE = 4
LFD_NAME_SIZE = 8
LFD_HEADER_SIZE = LFD_TYPE_SIZE + LFD_NAME_SIZE + 4   # type + name + u32 length


# =============================================================================
# IMAGES
# =============================================================================

BM_MAGIC = b'BM \x1e'
BM_HEADER_SIZE = 32         # column offsets in RLE images are relative to this
BM_RESERVED_SIZE = 12

BM_COMPRESSION_NONE = 0
BM_COMPRESSION_RLE1 = 1     # RLE-B: runs repeat a data byte
BM_COMPRESSION_RLE0 = 2     # RLE-A: runs are transparent zeros

BM_FLAG_OPAQUE = 0x08       # colour 0 is drawn, not transparent

CELL_HEADER_SIZE = 24       # u32 w, h, compressed, payload size, data offset, pad

WAX_MAX_STATES = 32
WAX_ANGLES = 32
WAX_MAX_FRAMES = 32
WAX_SEQUENCE_HEADER_SIZE = 16


# =============================================================================
# PALETTES
# =============================================================================

PAL_ENTRIES = 256
PAL_SIZE = PAL_ENTRIES * 3  # 768 bytes, channels 0..63


# =============================================================================
# AUDIO
# =============================================================================

VOC_MAGIC = b'Creative Voice File\x1a\x1a\x00'
VOC_CHECKSUM_SALT = 0x1234

VOC_CHUNK_END = 0
VOC_CHUNK_SOUND_START = 1
VOC_CHUNK_SOUND_CONTINUE = 2
VOC_CHUNK_SILENCE = 3
VOC_CHUNK_REPEAT = 6
VOC_CHUNK_REPEAT_END = 7

VOC_REPEAT_FOREVER = 0xFFFF
VOC_SILENCE_BYTE = 0x80     # unsigned 8-bit PCM midpoint

GMD_MAGIC = b'MIDI'
SMF_MAGIC = b'MThd'


# =============================================================================
# ASSET CLASSIFICATION
# =============================================================================

# Suffix → (category, description, tool)
CATEGORIES = {
    'LEV': ('level', 'Level geometry (text)', 'df-level'),
    'O':   ('objects', 'Level object placement (text)', None),
    'INF': ('logic', 'Level logic/elevators (text)', None),
    'GOL': ('logic', 'Mission goals (text)', None),
    'BM':  ('image', 'Indexed-colour texture/bitmap', 'df-sprite'),
    'FME': ('sprite', 'Single positioned sprite frame', 'df-sprite'),
    'WAX': ('sprite', 'Multi-state multi-angle sprite', 'df-sprite'),
    'PAL': ('palette', '256-colour 6-bit palette', 'df-sprite'),
    'CMP': ('palette', 'Colour map / light tables', None),
    'VOC': ('sound', 'Creative Voice digitized audio', 'df-sound'),
    'GMD': ('music', 'MIDI music container', None),
    '3DO': ('model', '3D object (text)', None),
    'VUE': ('model', '3D object animation (text)', None),
    'FNT': ('font', 'Bitmap font', None),
    'MSG': ('text', 'Message strings (text)', None),
    'TXT': ('text', 'Plain text', None),
}


def classify_name(name: str) -> str:
    """Classify a catalog entry name into a category by its suffix."""
    suffix = name.rsplit('.', 1)[-1].upper() if '.' in name else ''
    if suffix in CATEGORIES:
        return CATEGORIES[suffix][0]
    return 'unknown'
