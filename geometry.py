"""Geometry Module

Purpose: Thin geometry kernel over shapely plus the two wrappers the street
and boundary extraction work with:

- SegmentGeometry: the polyline of a single way, with a cached bounding box.
- BoundaryGeometry: a multi-polygon (outer ring + holes per polygon), with a
  cached bounding box.

All coordinates are (lon, lat) tuples in decimal degrees. Distances and
lengths are plain Euclidean values in degrees; nothing here reprojects.
"""
from __future__ import annotations

import math
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import (
    LineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from shapely.geometry.polygon import orient

Coordinate = Tuple[float, float]


class GeometryError(ValueError):
    """Raised when a coordinate sequence cannot yield a bounding rectangle."""


class BoundingBox(NamedTuple):
    sw: Coordinate
    ne: Coordinate

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[Coordinate]) -> "BoundingBox":
        arr = np.asarray(list(coordinates), dtype=float)
        if arr.size == 0:
            raise GeometryError("cannot get bounding box for the given set of coordinates")
        mins = arr.reshape(-1, 2).min(axis=0)
        maxs = arr.reshape(-1, 2).max(axis=0)
        return cls((float(mins[0]), float(mins[1])), (float(maxs[0]), float(maxs[1])))

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(minx, miny, maxx, maxy) as shapely orders them."""
        return (self.sw[0], self.sw[1], self.ne[0], self.ne[1])

    def intersects(self, other: "BoundingBox") -> bool:
        return (
            self.sw[0] <= other.ne[0] and other.sw[0] <= self.ne[0]
            and self.sw[1] <= other.ne[1] and other.sw[1] <= self.ne[1]
        )

    def contains(self, other: "BoundingBox") -> bool:
        return (
            self.sw[0] <= other.sw[0] and self.sw[1] <= other.sw[1]
            and other.ne[0] <= self.ne[0] and other.ne[1] <= self.ne[1]
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        sw = (min(self.sw[0], other.sw[0]), min(self.sw[1], other.sw[1]))
        ne = (max(self.ne[0], other.ne[0]), max(self.ne[1], other.ne[1]))
        return BoundingBox(sw, ne)

    def padded(self, distance: float) -> "BoundingBox":
        sw = (self.sw[0] - distance, self.sw[1] - distance)
        ne = (self.ne[0] + distance, self.ne[1] + distance)
        return BoundingBox(sw, ne)


# -- kernel -----------------------------------------------------------------

def to_shape(coordinates: Sequence[Coordinate]):
    """Point for a single coordinate, LineString otherwise."""
    if len(coordinates) == 1:
        return Point(coordinates[0])
    return LineString(coordinates)


def bounding_box(coordinates: Iterable[Coordinate]) -> BoundingBox:
    return BoundingBox.from_coordinates(coordinates)


def convex_hull(coordinates: Iterable[Coordinate]):
    return MultiPoint(list(coordinates)).convex_hull


def contains_point(polygon, point) -> bool:
    return polygon.contains(point if isinstance(point, Point) else Point(point))


def intersects(a, b) -> bool:
    """Exact test; touching at a single point counts."""
    return a.intersects(b)


def is_closed(coordinates: Sequence[Coordinate]) -> bool:
    return len(coordinates) >= 4 and tuple(coordinates[0]) == tuple(coordinates[-1])


def centroid(coordinates: Sequence[Coordinate]) -> Optional[Coordinate]:
    """Centroid of a line, or of the polygon a closed sequence encloses."""
    if not coordinates:
        return None
    if is_closed(coordinates):
        geom = Polygon(coordinates)
        if geom.area == 0:
            geom = LineString(coordinates)
    else:
        geom = to_shape(coordinates)
    point = geom.centroid
    if point.is_empty:
        return None
    return (point.x, point.y)


def closest_point(points: Sequence[Coordinate], target: Coordinate) -> Optional[Coordinate]:
    if not points:
        return None
    arr = np.asarray(points, dtype=float)
    dists = np.hypot(arr[:, 0] - target[0], arr[:, 1] - target[1])
    x, y = arr[int(np.argmin(dists))]
    return (float(x), float(y))


def get_middle(coordinates: Sequence[Coordinate]) -> Optional[Coordinate]:
    """Return the vertex closest to the centroid of the polyline."""
    if not coordinates:
        return None
    c = to_shape(coordinates).centroid
    if c.is_empty:
        return tuple(coordinates[0])
    return closest_point(coordinates, (c.x, c.y))


def get_compound_coordinates(coordinates: Sequence[Coordinate]) -> List[Coordinate]:
    """Convex hull of a point set as an ordered coordinate list.

    A proper hull comes back as a closed counter-clockwise ring starting at
    its lowest (lon, lat) vertex. Degenerate inputs keep their degenerate
    shape: one point, or the two ends of a collinear set.
    """
    if not coordinates:
        return []
    hull = convex_hull(coordinates)
    if isinstance(hull, Point):
        return [(hull.x, hull.y)]
    if isinstance(hull, LineString):
        return [tuple(c) for c in hull.coords]

    ring = [tuple(c) for c in orient(hull, sign=1.0).exterior.coords][:-1]
    start = ring.index(min(ring))
    ring = ring[start:] + ring[:start]
    return ring + [ring[0]]


def get_geo_info(coordinates: Sequence[Coordinate]):
    """Return (centroid, bounds) for a shape, bounds as {e, n, s, w}.

    Either value is None when the sequence is empty.
    """
    if not coordinates:
        return None, None
    loc = centroid(coordinates)
    bbox = bounding_box(coordinates)
    bounds = {"e": bbox.ne[0], "n": bbox.ne[1], "s": bbox.sw[1], "w": bbox.sw[0]}
    center = {"lat": loc[1], "lon": loc[0]} if loc else None
    return center, bounds


def euclidean_distance(a: Coordinate, b: Coordinate) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


# -- wrappers ---------------------------------------------------------------

class SegmentGeometry:
    """Polyline of one way with its bounding box.

    Immutable after construction; the bounding box is computed once.
    """

    __slots__ = ("_coordinates", "_bbox", "_shape")

    def __init__(self, coordinates: Iterable[Coordinate]):
        coords = tuple((float(x), float(y)) for x, y in coordinates)
        self._bbox = bounding_box(coords)
        self._coordinates = coords
        self._shape = None

    def __len__(self):
        return len(self._coordinates)

    def __repr__(self):
        return f"SegmentGeometry({list(self._coordinates)!r})"

    @property
    def points(self) -> List[Coordinate]:
        return list(self._coordinates)

    @property
    def bbox(self) -> BoundingBox:
        return self._bbox

    def sw_ne(self):
        return self._bbox.sw, self._bbox.ne

    @property
    def shape(self):
        if self._shape is None:
            self._shape = to_shape(self._coordinates)
        return self._shape

    def pad(self, distance: float) -> BoundingBox:
        return self._bbox.padded(distance)

    @property
    def length(self) -> float:
        # diagonal of the bounding box, not the arc length
        return euclidean_distance(self._bbox.sw, self._bbox.ne)

    def intersects(self, other: "SegmentGeometry") -> bool:
        return intersects(self.shape, other.shape)


class BoundaryGeometry:
    """Multi-polygon given as ``[[outer, inner, ...], ...]`` rings."""

    __slots__ = ("_polygons", "_bbox", "_shape")

    def __init__(self, polygons: Iterable[Sequence[Sequence[Coordinate]]]):
        polys = []
        for rings in polygons:
            rings = [[(float(x), float(y)) for x, y in ring] for ring in rings]
            if rings and rings[0]:
                polys.append(rings)
        self._bbox = bounding_box(pt for rings in polys for pt in rings[0])
        self._polygons = polys
        self._shape = MultiPolygon([(rings[0], rings[1:]) for rings in polys])

    @property
    def bbox(self) -> BoundingBox:
        return self._bbox

    def sw_ne(self):
        return self._bbox.sw, self._bbox.ne

    @property
    def shape(self) -> MultiPolygon:
        return self._shape

    def rings(self):
        for rings in self._polygons:
            yield from rings

    def coordinates(self) -> List[List[List[Coordinate]]]:
        return [[list(ring) for ring in rings] for rings in self._polygons]

    def intersects(self, segment: SegmentGeometry) -> bool:
        """True if any ring crosses the segment's line."""
        if not self._bbox.intersects(segment.bbox):
            return False
        return any(intersects(LineString(ring), segment.shape) for ring in self.rings())

    def owns(self, segment: SegmentGeometry) -> bool:
        """True if the segment's centroid lies inside the polygon set."""
        c = segment.shape.centroid
        if c.is_empty:
            return False
        return contains_point(self._shape, c)


def combined_centroid(geometries: Iterable[SegmentGeometry]) -> Optional[Coordinate]:
    """Centroid of every vertex of the geometries, each vertex weighted equally."""
    points = [pt for g in geometries for pt in g.points]
    if not points:
        return None
    c = MultiPoint(points).centroid
    if c.is_empty:
        return None
    return (c.x, c.y)
