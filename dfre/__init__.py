"""dark-forces-re shared library."""
from .errors import ReadError, TruncatedError, SignatureError, DecodingError, LevelParseError  # noqa: F401
from .catalog import Catalog, CatalogEntry, EntryStream, read_gob, read_lfd, open_catalog  # noqa: F401
from .pal import Palette, PaletteEntry, read_pal, expand_channel, indexed_to_rgba  # noqa: F401
from .compression import rle0_decompress, rle1_decompress, columns_to_rows, rows_to_columns  # noqa: F401
from .bm import Bm, Compression, read_bm  # noqa: F401
from .fme import Fme, Frame, Cell, read_fme  # noqa: F401
from .wax import Wax, WaxState, WaxSequence, WaxFrame, read_wax  # noqa: F401
from .voc import Voc, SampleRate, read_voc  # noqa: F401
from .gmd import read_gmd  # noqa: F401
from .lev import Level, Sector, Wall, Texture, parse_lev, read_lev  # noqa: F401
from .geometry import (  # noqa: F401
    walls_to_polygons, stitch_walls, triangulate_polygon, triangulate_sector,
    triangulate_sector_indices, point_in_sector,
)
from .decoders import decode_entry  # noqa: F401

__version__ = '0.1.0'
