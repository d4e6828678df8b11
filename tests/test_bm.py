"""Tests for BM bitmap decoding."""

import logging

import pytest

from conftest import make_bm
from dfre.bm import Compression, read_bm
from dfre.errors import DecodingError, SignatureError, TruncatedError


@pytest.mark.parametrize('compression', [0, 1, 2])
def test_decodes_to_row_major(gradient, compression):
    width, height, rows = gradient
    bm = read_bm(make_bm(width, height, rows, compression=compression))

    assert bm.size == (width, height)
    assert bm.idem_size == (width, height)
    assert bm.compression == Compression(compression)
    assert bm.pixels == rows
    assert not bm.multiple


def test_top_left_pixel_is_first(gradient):
    width, height, rows = gradient
    bm = read_bm(make_bm(width, height, rows))
    assert bm.pixels[0] == 1
    assert bm.pixels[width * height - 1] == 16 * (height - 1) + width


def test_rle0_transparent_runs():
    rows = bytes([0, 0, 7,
                  0, 9, 0])
    bm = read_bm(make_bm(3, 2, rows, compression=2))
    assert bm.pixels == rows


def test_multi_bm_placeholder(caplog):
    with caplog.at_level(logging.WARNING, logger='dfre.bm'):
        bm = read_bm(make_bm(1, 5, bytes(5)))
    assert bm.multiple
    assert bm.size == (1, 1)
    assert bm.pixels == b'\x01'
    assert 'multi-BM' in caplog.text


def test_single_pixel_is_not_multi():
    bm = read_bm(make_bm(1, 1, b'\x2a'))
    assert not bm.multiple
    assert bm.pixels == b'\x2a'


def test_transparency_flag(gradient):
    width, height, rows = gradient
    assert read_bm(make_bm(width, height, rows)).transparent
    assert not read_bm(make_bm(width, height, rows, flags=0x08)).transparent


def test_bad_signature(gradient):
    width, height, rows = gradient
    data = b'BM \x1f' + make_bm(width, height, rows)[4:]
    with pytest.raises(SignatureError):
        read_bm(data)


def test_invalid_compression(gradient):
    width, height, rows = gradient
    data = bytearray(make_bm(width, height, rows))
    data[14] = 3
    with pytest.raises(DecodingError):
        read_bm(bytes(data))


def test_truncated_pixels(gradient):
    width, height, rows = gradient
    with pytest.raises(TruncatedError):
        read_bm(make_bm(width, height, rows)[:-1])
