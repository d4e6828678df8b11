"""Tests for the LEV text parser."""

import logging

import pytest

from conftest import LEVEL_TEXT, wall_line
from dfre.errors import DecodingError, LevelParseError
from dfre.lev import Texture, parse_lev, read_lev


def test_header(level_text):
    level = parse_lev(level_text)

    assert level.version == '2.1'
    assert level.name == 'TEST'
    assert level.palette_name == 'SECBASE.PAL'
    assert level.music == 'NATURAL.GMD'
    assert level.parallax == (1024.0, 768.5)
    assert level.texture_names == ('DEFAULT.BM', 'ZWALL1.BM')
    assert len(level.sectors) == 1


def test_sector_fields(level_text):
    sector = parse_lev(level_text).sectors[0]

    assert sector.id == 0
    assert sector.name == 'start'
    assert sector.ambient == 20
    assert sector.floor_texture == Texture(0, (0.0, 0.0))
    assert sector.floor_altitude == 0.0
    assert sector.ceiling_texture == Texture(1, (1.5, -2.0))
    assert sector.ceiling_altitude == -16.0
    assert sector.second_altitude == 0.0
    assert sector.flags == (1, 0, 0)
    assert sector.layer == -1
    assert sector.vertices == ((0.0, 0.0), (10.0, 0.0), (0.0, 10.0))


def test_wall_fields(level_text):
    walls = parse_lev(level_text).sectors[0].walls

    assert [(w.left_vertex, w.right_vertex) for w in walls] == [(0, 1), (1, 2), (2, 0)]
    wall = walls[1]
    assert wall.light == 5
    assert wall.middle_texture == Texture(1, (0.0, 0.0))
    assert wall.top_texture.index is None
    assert wall.sign_texture.index is None
    assert wall.adjoin_sector is None
    assert wall.mirror_wall is None
    assert wall.walk_sector is None
    assert wall.flags == (0, 0, 0)
    assert wall.solid


def test_adjoined_wall():
    text = LEVEL_TEXT.replace(wall_line(2, 0), wall_line(2, 0, adjoin=4))
    wall = parse_lev(text).sectors[0].walls[2]
    assert wall.adjoin_sector == 4
    assert wall.mirror_wall == 4
    assert not wall.solid


def test_name_line_optional():
    assert parse_lev(LEVEL_TEXT.replace('  NAME start\n', '')).sectors[0].name is None
    assert parse_lev(LEVEL_TEXT.replace('  NAME start\n', '  NAME\n')).sectors[0].name is None


@pytest.mark.parametrize('parallax', ['.5 7', '-3. 0', '12 1.25'])
def test_number_forms(parallax):
    text = LEVEL_TEXT.replace('PARALLAX 1024.0000 768.5000', f'PARALLAX {parallax}')
    x, y = parse_lev(text).parallax
    assert (x, y) == tuple(float(v) for v in parallax.split())


def test_bad_number_reports_line():
    text = LEVEL_TEXT.replace('AMBIENT 20', 'AMBIENT bright')
    with pytest.raises(LevelParseError) as excinfo:
        parse_lev(text)
    assert excinfo.value.line_number == 15
    assert 'AMBIENT bright' in excinfo.value.line
    assert 'line 15' in str(excinfo.value)


def test_exponent_not_a_number():
    with pytest.raises(LevelParseError):
        parse_lev(LEVEL_TEXT.replace('FLOOR ALTITUDE 0.00', 'FLOOR ALTITUDE 1e3'))


def test_leftover_tokens():
    with pytest.raises(LevelParseError) as excinfo:
        parse_lev(LEVEL_TEXT.replace('LAYER -1', 'LAYER -1 2'))
    assert excinfo.value.line_number == 22


def test_sign_texture_has_no_flag():
    text = LEVEL_TEXT.replace('SIGN: -1 0.00 0.00 ADJOIN', 'SIGN: -1 0.00 0.00 0 ADJOIN', 1)
    with pytest.raises(LevelParseError) as excinfo:
        parse_lev(text)
    assert excinfo.value.line_number == 28


def test_degenerate_wall():
    with pytest.raises(LevelParseError):
        parse_lev(LEVEL_TEXT.replace(wall_line(0, 1), wall_line(1, 1)))


def test_wall_vertex_out_of_range():
    with pytest.raises(LevelParseError) as excinfo:
        parse_lev(LEVEL_TEXT.replace(wall_line(2, 0), wall_line(2, 3)))
    assert excinfo.value.line_number == 31


def test_vertex_count_is_exact():
    with pytest.raises(LevelParseError) as excinfo:
        parse_lev(LEVEL_TEXT.replace('VERTICES 3', 'VERTICES 4'))
    assert excinfo.value.line_number == 27


def test_missing_walls_is_end_of_file():
    text = LEVEL_TEXT.replace(wall_line(2, 0), '')
    with pytest.raises(LevelParseError) as excinfo:
        parse_lev(text)
    assert 'end of file' in excinfo.value.reason


def test_declared_counts_are_advisory():
    text = LEVEL_TEXT.replace('NUMSECTORS 1', 'NUMSECTORS 5').replace('TEXTURES 2', 'TEXTURES 9')
    level = parse_lev(text)
    assert len(level.sectors) == 1
    assert len(level.texture_names) == 2


def test_missing_header_line():
    with pytest.raises(LevelParseError) as excinfo:
        parse_lev(LEVEL_TEXT.replace('MUSIC NATURAL.GMD\n', ''))
    assert excinfo.value.line_number == 5


def test_read_lev_bytes(level_text):
    level = read_lev(level_text.replace('\n', '\r\n').encode('ascii'))
    assert level.sectors[0].name == 'start'


def test_read_lev_rejects_binary():
    with pytest.raises(DecodingError):
        read_lev(b'LEV 2.1\n\xff\xfe')


def test_read_lev_logs_failure(caplog):
    with caplog.at_level(logging.DEBUG, logger='dfre.lev'):
        with pytest.raises(LevelParseError):
            read_lev(b'LEV 2.1\nPALETTE X.PAL\n')
    assert 'line 2' in caplog.text
