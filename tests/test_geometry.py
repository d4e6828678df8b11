"""Tests for wall stitching and sector triangulation."""

import pytest

from conftest import LEVEL_TEXT
from dfre.geometry import (
    Attach, attach, canonical, join, point_in_sector, signed_area, stitch_walls,
    triangulate_polygon, triangulate_sector, triangulate_sector_indices, walls_to_polygons,
)
from dfre.lev import parse_lev


@pytest.mark.parametrize('walls, polygons', [
    ([(0, 1), (1, 2), (2, 0)], [[0, 1, 2]]),
    ([(0, 1), (1, 2), (2, 3), (3, 0)], [[0, 1, 2, 3]]),
    ([(0, 1), (1, 3), (2, 3), (2, 0)], [[0, 1, 3, 2]]),
    ([(1, 2), (0, 1), (2, 0)], [[0, 1, 2]]),
    ([(1, 2), (1, 0), (2, 0)], [[0, 1, 2]]),
    ([(1, 2), (0, 1), (3, 4), (2, 0), (6, 4), (3, 6)], [[0, 1, 2], [3, 4, 6]]),
])
def test_walls_to_polygons(walls, polygons):
    assert walls_to_polygons(walls) == polygons


def test_attach_states():
    assert attach((0, 1), 1, 2) == (Attach.EXTENDED, (0, 1, 2))
    assert attach((0, 1), 2, 0) == (Attach.EXTENDED, (2, 0, 1))
    assert attach((0, 1, 2), 2, 0) == (Attach.CLOSED, (0, 1, 2))
    assert attach((0, 1), 1, 0) == (Attach.ABSORBED, (0, 1))
    assert attach((0, 1), 5, 6) == (Attach.UNMATCHED, (0, 1))


def test_join():
    assert join((0, 1), (1, 2)) == (0, 1, 2)
    assert join((0, 1), (2, 1)) == (0, 1, 2)
    assert join((1, 2), (0, 1)) == (0, 1, 2)
    assert join((1, 2), (1, 0)) == (0, 1, 2)
    assert join((0, 1), (2, 3)) is None


def test_canonical():
    assert canonical([3, 1, 2]) == [1, 2, 3]


def test_separate_contours_merge():
    assert walls_to_polygons([(0, 1), (2, 3), (1, 2), (3, 0)]) == [[0, 1, 2, 3]]
    assert walls_to_polygons([(0, 1), (2, 3), (3, 0), (1, 2)]) == [[0, 1, 2, 3]]


def test_duplicate_walls_are_ignored():
    assert walls_to_polygons([(0, 1), (1, 0), (1, 2), (2, 0)]) == [[0, 1, 2]]
    assert walls_to_polygons([(0, 1), (1, 2), (2, 0), (0, 1)]) == [[0, 1, 2]]


def test_loops_pinched_at_one_vertex_close():
    walls = [(0, 1), (1, 2), (2, 4), (4, 5), (5, 6), (6, 2), (2, 3), (3, 0)]
    polygons, contours = stitch_walls(walls)
    assert polygons == [[0, 1, 2, 4, 5, 6, 2, 3]]
    assert contours == []


def test_pinch_reached_out_of_order():
    walls = [(0, 1), (0, 3), (1, 2), (2, 0), (3, 4), (4, 0)]
    assert walls_to_polygons(walls) == [[0, 1, 2, 0, 4, 3]]


def test_interior_vertex_is_not_a_duplicate():
    assert attach((0, 1, 2), 2, 1) == (Attach.ABSORBED, (0, 1, 2))
    assert attach((0, 1, 2, 3), 3, 1) == (Attach.EXTENDED, (0, 1, 2, 3, 1))


def test_sorted_by_lowest_vertex():
    walls = [(4, 5), (5, 6), (6, 4), (0, 1), (1, 2), (2, 0)]
    assert walls_to_polygons(walls) == [[0, 1, 2], [4, 5, 6]]


def test_open_contours_are_reported():
    polygons, contours = stitch_walls([(0, 1), (1, 2), (3, 3)])
    assert polygons == []
    assert contours == [[0, 1, 2]]


def test_wall_order_does_not_matter():
    walls = [(0, 1), (1, 2), (2, 3), (3, 0), (5, 6), (6, 7), (7, 5)]
    expected = walls_to_polygons(walls)
    assert walls_to_polygons(list(reversed(walls))) == expected
    assert walls_to_polygons(walls[1::2] + walls[::2]) == expected


SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
ELL = [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (1.0, 1.0), (1.0, 2.0), (0.0, 2.0)]


def triangle_area(points, triangle):
    return signed_area([points[i] for i in triangle])


def test_signed_area_orientation():
    assert signed_area(SQUARE) == 1.0
    assert signed_area(SQUARE[::-1]) == -1.0


@pytest.mark.parametrize('points', [SQUARE, SQUARE[::-1], ELL, ELL[::-1]])
def test_triangulation_covers_polygon(points):
    triangles = triangulate_polygon(points)

    assert len(triangles) == len(points) - 2
    for triangle in triangles:
        assert triangle_area(points, triangle) > 0
    assert sum(triangle_area(points, t) for t in triangles) == pytest.approx(abs(signed_area(points)))


def test_degenerate_polygons():
    assert triangulate_polygon([(0.0, 0.0), (1.0, 1.0)]) == []
    assert triangulate_polygon([(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)]) == []


def test_triangulate_sector():
    sector = parse_lev(LEVEL_TEXT).sectors[0]

    assert triangulate_sector_indices(sector) == [(0, 1, 2)]
    assert triangulate_sector(sector) == [((0.0, 0.0), (10.0, 0.0), (0.0, 10.0))]


def test_point_in_sector():
    sector = parse_lev(LEVEL_TEXT).sectors[0]

    assert point_in_sector(sector, (1.0, 1.0))
    assert not point_in_sector(sector, (9.0, 9.0))
    assert not point_in_sector(sector, (-1.0, 5.0))


def test_pinched_polygon_triangulates():
    # two 2x2 squares touching at (2, 2)
    vertices = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0), (4.0, 2.0), (4.0, 4.0), (2.0, 4.0)]
    walls = [(0, 1), (1, 2), (2, 4), (4, 5), (5, 6), (6, 2), (2, 3), (3, 0)]
    [polygon] = walls_to_polygons(walls)
    points = [vertices[i] for i in polygon]

    assert signed_area(points) == 8.0
    assert len(triangulate_polygon(points)) == len(points) - 2
