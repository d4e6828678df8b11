"""
dfre: Sector floor/ceiling geometry.

A sector lists its walls as directed vertex pairs in no useful order.
stitch_walls chains them into closed polygons:

  - every open contour is a tuple of vertex indices with two free ends
  - a wall touching a free end extends that end; if its other vertex is the
    opposite end, the contour closes and becomes a polygon
  - a wall repeating an edge already on the contour is a duplicate and leaves
    it unchanged; a wall reaching back to an interior vertex extends the
    contour through it, so loops pinched at one vertex close as one polygon
  - a wall touching nothing opens a new contour; when an extension makes two
    contours share an end they are joined

Polygons are rotated so the lowest vertex index comes first and the list is
sorted on that index, which makes the output independent of wall order.

triangulate_polygon ear-clips one polygon. Sectors with holes (a polygon
inside another) are triangulated polygon by polygon, so hole interiors get
covered; this matches what the floor renderer expects for the shipped levels.
"""

import enum
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

log = logging.getLogger(__name__)

Contour = Tuple[int, ...]
Point = Tuple[float, float]


class Attach(enum.Enum):
    UNMATCHED = 0   # wall does not touch this contour
    EXTENDED = 1    # wall grew one end
    CLOSED = 2      # wall joined the two ends
    ABSORBED = 3    # duplicate wall, contour unchanged


def attach(contour: Contour, a: int, b: int) -> Tuple[Attach, Contour]:
    """Try to add wall (a, b) to an open contour. Returns state and contour."""
    front, back = contour[0], contour[-1]

    if frozenset((a, b)) in _chain_edges(contour):
        return Attach.ABSORBED, contour
    if len(contour) > 2 and {a, b} == {front, back}:
        return Attach.CLOSED, contour

    # far may already lie inside the contour: two loops pinched at one vertex
    for near, far in ((a, b), (b, a)):
        if near == back:
            return Attach.EXTENDED, contour + (far,)
        if near == front:
            return Attach.EXTENDED, (far,) + contour

    return Attach.UNMATCHED, contour


def _chain_edges(contour: Contour):
    return {frozenset(pair) for pair in zip(contour, contour[1:])}


def join(left: Contour, right: Contour) -> Optional[Contour]:
    """Join two open contours that share an end vertex."""
    if left[-1] == right[0]:
        return left + right[1:]
    if left[-1] == right[-1]:
        return left + right[-2::-1]
    if left[0] == right[-1]:
        return right + left[1:]
    if left[0] == right[0]:
        return right[::-1] + left[1:]
    return None


def canonical(polygon: Sequence[int]) -> List[int]:
    """Rotate polygon so its lowest vertex index is first."""
    start = polygon.index(min(polygon))
    return list(polygon[start:]) + list(polygon[:start])


def _edges(polygon: Sequence[int]):
    return {frozenset((polygon[i - 1], polygon[i])) for i in range(len(polygon))}


def stitch_walls(walls: Iterable[Tuple[int, int]]) -> Tuple[List[List[int]], List[List[int]]]:
    """Chain walls into (closed polygons, leftover open contours)."""
    polygons: List[List[int]] = []
    contours: List[Contour] = []
    closed_edges = set()

    def close(polygon: Contour):
        closed_edges.update(_edges(polygon))
        polygons.append(canonical(polygon))

    for a, b in walls:
        if a == b:
            continue

        for i, contour in enumerate(contours):
            state, grown = attach(contour, a, b)
            if state is Attach.UNMATCHED:
                continue
            if state is Attach.CLOSED:
                close(contours.pop(i))
            elif state is Attach.EXTENDED:
                contours[i] = grown
                _join_into(contours, i, close)
            break
        else:
            if frozenset((a, b)) in closed_edges:
                log.debug("dropping duplicate wall (%d, %d)", a, b)
                continue
            contours.append((a, b))

    polygons.sort(key=lambda p: p[0])
    return polygons, [list(c) for c in contours]


def _join_into(contours: List[Contour], i: int, close):
    grown = contours[i]
    for j, other in enumerate(contours):
        if j == i:
            continue
        joined = join(grown, other)
        if joined is None:
            continue
        for k in sorted((i, j), reverse=True):
            del contours[k]
        if joined[0] == joined[-1] and len(joined) > 3:
            close(joined[:-1])
        else:
            contours.append(joined)
        return


def walls_to_polygons(walls: Iterable[Tuple[int, int]]) -> List[List[int]]:
    """Closed polygons formed by walls, canonical and sorted."""
    polygons, contours = stitch_walls(walls)
    if contours:
        log.debug("%d contour(s) left open: %s", len(contours), contours)
    return polygons


# =============================================================================
# TRIANGULATION
# =============================================================================

def signed_area(points: Sequence[Point]) -> float:
    """Shoelace area; positive for counter-clockwise."""
    area = 0.0
    for i in range(len(points)):
        x0, y0 = points[i - 1]
        x1, y1 = points[i]
        area += x0 * y1 - x1 * y0
    return area / 2.0


def _cross(o: Point, a: Point, b: Point) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _inside_triangle(p: Point, a: Point, b: Point, c: Point) -> bool:
    return _cross(a, b, p) >= 0 and _cross(b, c, p) >= 0 and _cross(c, a, p) >= 0


def _is_ear(points: Sequence[Point], ring: List[int], k: int) -> bool:
    i0, i1, i2 = ring[k - 1], ring[k], ring[(k + 1) % len(ring)]
    a, b, c = points[i0], points[i1], points[i2]
    if _cross(a, b, c) <= 0:
        return False
    for j in ring:
        if j in (i0, i1, i2):
            continue
        p = points[j]
        if p in (a, b, c):
            continue
        if _inside_triangle(p, a, b, c):
            return False
    return True


def triangulate_polygon(points: Sequence[Point]) -> List[Tuple[int, int, int]]:
    """Ear-clip a simple polygon. Returns counter-clockwise index triples."""
    if len(points) < 3 or signed_area(points) == 0:
        return []

    ring = list(range(len(points)))
    if signed_area(points) < 0:
        ring.reverse()

    triangles = []
    while len(ring) > 3:
        for k in range(len(ring)):
            if _is_ear(points, ring, k):
                triangles.append((ring[k - 1], ring[k], ring[(k + 1) % len(ring)]))
                del ring[k]
                break
        else:
            # only collinear or self-touching vertices remain
            triangles.extend((ring[0], ring[j], ring[j + 1]) for j in range(1, len(ring) - 1))
            return triangles
    triangles.append((ring[0], ring[1], ring[2]))
    return triangles


def sector_polygons(sector) -> List[List[int]]:
    return walls_to_polygons((w.left_vertex, w.right_vertex) for w in sector.walls)


def triangulate_sector_indices(sector) -> List[Tuple[int, int, int]]:
    """Triangles of a sector as indices into sector.vertices."""
    triangles = []
    for polygon in sector_polygons(sector):
        points = [sector.vertices[i] for i in polygon]
        triangles.extend(
            (polygon[a], polygon[b], polygon[c]) for a, b, c in triangulate_polygon(points))
    return triangles


def triangulate_sector(sector) -> List[Tuple[Point, Point, Point]]:
    """Triangles of a sector as (x, z) point triples."""
    v = sector.vertices
    return [(v[a], v[b], v[c]) for a, b, c in triangulate_sector_indices(sector)]


def point_in_sector(sector, point: Point) -> bool:
    """Even-odd ray cast over the sector walls."""
    px, py = point
    inside = False
    for wall in sector.walls:
        lx, ly = sector.vertices[wall.left_vertex]
        rx, ry = sector.vertices[wall.right_vertex]
        if (ly < py <= ry) or (ry < py <= ly):
            if lx + (py - ly) / (ry - ly) * (rx - lx) < px:
                inside = not inside
    return inside
