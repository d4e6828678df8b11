"""
dfre: LEV level text parser.

LEV files are line oriented. Tokens are separated by whitespace, '#' starts
a comment that runs to the end of the line, and blank or comment-only lines
may appear anywhere. The top level is a fixed sequence of tagged lines:

  LEV 2.1
  LEVELNAME SECBASE
  PALETTE SECBASE.PAL
  MUSIC NATURAL.GMD
  PARALLAX 1024.0000 1024.0000
  TEXTURES <n>
    TEXTURE: <name>              (repeated)
  NUMSECTORS <n>
    <sector block>               (repeated)

Sector block:

  SECTOR <id>
  NAME [<word>]                  (line and value both optional)
  AMBIENT <uint>
  FLOOR TEXTURE <texture>
  FLOOR ALTITUDE <float>
  CEILING TEXTURE <texture>
  CEILING ALTITUDE <float>
  SECOND ALTITUDE <float>
  FLAGS <uint> <uint> <uint>
  LAYER <int>
  VERTICES <n>
    X: <float> Z: <float>        (n lines)
  WALLS <n>
    WALL LEFT: <uint> RIGHT: <uint> MID: <texture> TOP: <texture>
         BOT: <texture> SIGN: <sign texture> ADJOIN: <opt> MIRROR: <opt>
         WALK: <opt> FLAGS: <uint> <uint> <uint> LIGHT: <uint>   (n lines)

A <texture> is `<index or -1> <x offset> <y offset> <legacy flag>`; a
<sign texture> has no trailing flag. <opt> is an index or -1 for none.

Any mismatch fails the whole file with a LevelParseError naming the line.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import DecodingError, LevelParseError

log = logging.getLogger(__name__)

_UINT = re.compile(r'^\d+$')
_SINT = re.compile(r'^-?\d+$')
_FLOAT = re.compile(r'^-?(\d+\.?\d*|\.\d+)$')


@dataclass(frozen=True)
class Texture:
    index: Optional[int]
    offset: Tuple[float, float]


@dataclass(frozen=True)
class Wall:
    left_vertex: int
    right_vertex: int
    middle_texture: Texture
    top_texture: Texture
    bottom_texture: Texture
    sign_texture: Texture
    adjoin_sector: Optional[int]
    mirror_wall: Optional[int]
    walk_sector: Optional[int]
    flags: Tuple[int, int, int]
    light: int

    @property
    def solid(self) -> bool:
        return self.adjoin_sector is None


@dataclass(frozen=True)
class Sector:
    id: int
    name: Optional[str]
    ambient: int
    floor_texture: Texture
    floor_altitude: float
    ceiling_texture: Texture
    ceiling_altitude: float
    second_altitude: float
    flags: Tuple[int, int, int]
    layer: int
    vertices: Tuple[Tuple[float, float], ...]
    walls: Tuple[Wall, ...]


@dataclass(frozen=True)
class Level:
    palette_name: str
    parallax: Tuple[float, float]
    texture_names: Tuple[str, ...]
    sectors: Tuple[Sector, ...]
    version: str = ''
    name: str = ''
    music: str = ''


# =============================================================================
# TOKENIZER
# =============================================================================

class _Line:
    """Tokens of one significant line, consumed left to right."""

    def __init__(self, number: int, text: str, tokens: List[str]):
        self.number = number
        self.text = text
        self.tokens = tokens
        self.pos = 0

    def fail(self, reason: str):
        raise LevelParseError(reason, self.number, self.text)

    def startswith(self, *tags: str) -> bool:
        return tuple(self.tokens[self.pos:self.pos + len(tags)]) == tags

    def expect(self, *tags: str):
        if not self.startswith(*tags):
            self.fail(f"expected {' '.join(tags)!r}")
        self.pos += len(tags)

    def next(self, what: str) -> str:
        if self.pos >= len(self.tokens):
            self.fail(f"missing {what}")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def word(self) -> str:
        return self.next('word')

    def rest(self) -> str:
        """Everything after the current token, as written."""
        value = ' '.join(self.tokens[self.pos:])
        self.pos = len(self.tokens)
        return value

    def uint(self) -> int:
        token = self.next('unsigned integer')
        if not _UINT.match(token):
            self.fail(f"expected unsigned integer, got {token!r}")
        return int(token)

    def sint(self) -> int:
        token = self.next('integer')
        if not _SINT.match(token):
            self.fail(f"expected integer, got {token!r}")
        return int(token)

    def float(self) -> float:
        token = self.next('number')
        if not _FLOAT.match(token):
            self.fail(f"expected number, got {token!r}")
        return float(token)

    def opt_index(self) -> Optional[int]:
        if self.startswith('-1'):
            self.pos += 1
            return None
        return self.uint()

    def uint3(self) -> Tuple[int, int, int]:
        return (self.uint(), self.uint(), self.uint())

    def texture(self, flag: bool = True) -> Texture:
        index = self.opt_index()
        offset = (self.float(), self.float())
        if flag:
            self.uint()  # legacy flag, unused
        return Texture(index, offset)

    def end(self):
        if self.pos != len(self.tokens):
            self.fail(f"unexpected {self.tokens[self.pos]!r}")


class _Lines:
    def __init__(self, text: str):
        self.lines = []
        for number, raw in enumerate(text.splitlines(), 1):
            tokens = raw.split('#', 1)[0].split()
            if tokens:
                self.lines.append(_Line(number, raw, tokens))
        self.index = 0
        self.last_number = len(text.splitlines())

    def peek(self) -> Optional[_Line]:
        if self.index < len(self.lines):
            return self.lines[self.index]
        return None

    def next(self, what: str) -> _Line:
        line = self.peek()
        if line is None:
            raise LevelParseError(f"unexpected end of file, expected {what}",
                                  self.last_number + 1, '')
        self.index += 1
        return line

    def entry(self, *tags: str) -> _Line:
        """Next line, which must start with tags."""
        line = self.next(' '.join(tags))
        line.expect(*tags)
        return line


# =============================================================================
# GRAMMAR
# =============================================================================

def _parse_wall(line: _Line) -> Wall:
    line.expect('WALL')
    line.expect('LEFT:')
    left = line.uint()
    line.expect('RIGHT:')
    right = line.uint()
    line.expect('MID:')
    middle = line.texture()
    line.expect('TOP:')
    top = line.texture()
    line.expect('BOT:')
    bottom = line.texture()
    line.expect('SIGN:')
    sign = line.texture(flag=False)
    line.expect('ADJOIN:')
    adjoin = line.opt_index()
    line.expect('MIRROR:')
    mirror = line.opt_index()
    line.expect('WALK:')
    walk = line.opt_index()
    line.expect('FLAGS:')
    flags = line.uint3()
    line.expect('LIGHT:')
    light = line.uint()
    line.end()

    if left == right:
        line.fail(f"wall starts and ends on vertex {left}")
    return Wall(left, right, middle, top, bottom, sign, adjoin, mirror, walk, flags, light)


def _parse_sector(lines: _Lines) -> Sector:
    line = lines.entry('SECTOR')
    sector_id = line.uint()
    line.end()

    name = None
    peek = lines.peek()
    if peek is not None and peek.startswith('NAME'):
        line = lines.entry('NAME')
        if line.pos < len(line.tokens):
            name = line.word()
        line.end()

    line = lines.entry('AMBIENT')
    ambient = line.uint()
    line.end()
    line = lines.entry('FLOOR', 'TEXTURE')
    floor_texture = line.texture()
    line.end()
    line = lines.entry('FLOOR', 'ALTITUDE')
    floor_altitude = line.float()
    line.end()
    line = lines.entry('CEILING', 'TEXTURE')
    ceiling_texture = line.texture()
    line.end()
    line = lines.entry('CEILING', 'ALTITUDE')
    ceiling_altitude = line.float()
    line.end()
    line = lines.entry('SECOND', 'ALTITUDE')
    second_altitude = line.float()
    line.end()
    line = lines.entry('FLAGS')
    flags = line.uint3()
    line.end()
    line = lines.entry('LAYER')
    layer = line.sint()
    line.end()

    line = lines.entry('VERTICES')
    vertex_count = line.uint()
    line.end()
    vertices = []
    for _ in range(vertex_count):
        line = lines.entry('X:')
        x = line.float()
        line.expect('Z:')
        z = line.float()
        line.end()
        vertices.append((x, z))

    line = lines.entry('WALLS')
    wall_count = line.uint()
    line.end()
    walls = []
    for _ in range(wall_count):
        line = lines.next('WALL')
        wall = _parse_wall(line)
        for vertex in (wall.left_vertex, wall.right_vertex):
            if vertex >= vertex_count:
                line.fail(f"vertex {vertex} out of range ({vertex_count} vertices)")
        walls.append(wall)

    return Sector(
        id=sector_id,
        name=name,
        ambient=ambient,
        floor_texture=floor_texture,
        floor_altitude=floor_altitude,
        ceiling_texture=ceiling_texture,
        ceiling_altitude=ceiling_altitude,
        second_altitude=second_altitude,
        flags=flags,
        layer=layer,
        vertices=tuple(vertices),
        walls=tuple(walls),
    )


def parse_lev(text: str) -> Level:
    """Parse LEV source text."""
    lines = _Lines(text)

    version = lines.entry('LEV').rest()
    name = lines.entry('LEVELNAME').rest()
    line = lines.entry('PALETTE')
    palette_name = line.word()
    line.end()
    music = lines.entry('MUSIC').rest()
    line = lines.entry('PARALLAX')
    parallax = (line.float(), line.float())
    line.end()

    line = lines.entry('TEXTURES')
    texture_count = line.uint()
    line.end()
    texture_names = []
    while lines.peek() is not None and lines.peek().startswith('TEXTURE:'):
        line = lines.entry('TEXTURE:')
        texture_names.append(line.word())
        line.end()
    if len(texture_names) != texture_count:
        log.debug("TEXTURES says %d, found %d", texture_count, len(texture_names))

    line = lines.entry('NUMSECTORS')
    sector_count = line.uint()
    line.end()
    sectors = []
    while lines.peek() is not None:
        sectors.append(_parse_sector(lines))
    if len(sectors) != sector_count:
        log.debug("NUMSECTORS says %d, found %d", sector_count, len(sectors))

    return Level(
        palette_name=palette_name,
        parallax=parallax,
        texture_names=tuple(texture_names),
        sectors=tuple(sectors),
        version=version,
        name=name,
        music=music,
    )


def read_lev(data) -> Level:
    """Parse a LEV from bytes (ASCII/UTF-8) or a binary stream."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        data = data.read()
    try:
        text = bytes(data).decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodingError(f"level text is not UTF-8: {e}") from None
    try:
        return parse_lev(text)
    except LevelParseError as e:
        log.debug("level parse failed at line %d: %s", e.line_number, e.reason)
        raise
