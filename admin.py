"""Administrative Boundaries

Purpose: Build boundary polygons from ``boundary=administrative`` relations.

High-level steps (per relation):
1. Require a ``name`` and a numeric ``admin_level`` (0-255).
2. Collect the coordinates of outer and inner member ways.
3. Chain-merge the fragments into closed rings.
4. Attach every inner ring to the outer ring that contains it.
5. Wrap the result in a BoundaryGeometry (cached bounding box).

Relations that miss a tag or whose outer ring does not close are skipped;
extraction is best effort and never fails on a single bad relation.
"""
from __future__ import annotations

from typing import List, Optional, Set

from shapely.geometry import Polygon, box
from shapely.strtree import STRtree

from chain_merge import assemble_rings
from config import INNER_ROLES, MAX_ADMIN_LEVEL, OUTER_ROLES
from geometry import BoundaryGeometry, BoundingBox, GeometryError, contains_point
from osm_model import ObjectMap, Relation, Way
from resolver import way_coordinates


class AdminBoundary:
    __slots__ = ("name", "admin_level", "geometry")

    def __init__(self, name: str, admin_level: int, geometry: BoundaryGeometry):
        self.name = name
        self.admin_level = admin_level
        self.geometry = geometry

    def __repr__(self):
        return f"AdminBoundary(name={self.name!r}, admin_level={self.admin_level})"

    @property
    def bbox(self) -> BoundingBox:
        return self.geometry.bbox

    def sw_ne(self):
        return self.geometry.sw_ne()


def parse_admin_level(value) -> Optional[int]:
    try:
        level = int(value)
    except (TypeError, ValueError):
        return None
    if 0 <= level <= MAX_ADMIN_LEVEL:
        return level
    return None


def _collect_fragments(relation: Relation, objs: ObjectMap, outer, inner, visited: Set[int]):
    """Sort member way coordinates into outer/inner lists (sub-relations too)."""
    if relation.id in visited:
        return
    visited.add(relation.id)
    for member in relation.members:
        obj = objs.get(member.ref)
        if obj is None:
            continue
        role = member.role or ""
        if isinstance(obj, Way):
            coords = way_coordinates(obj, objs)
            if len(coords) < 2:
                continue
            if role in OUTER_ROLES:
                outer.append(coords)
            elif role in INNER_ROLES:
                inner.append(coords)
        elif isinstance(obj, Relation) and (role in OUTER_ROLES or role in INNER_ROLES):
            _collect_fragments(obj, objs, outer, inner, visited)


def build_boundary(relation: Relation, objs: ObjectMap) -> Optional[BoundaryGeometry]:
    outer, inner = [], []
    _collect_fragments(relation, objs, outer, inner, set())

    outer_rings, open_outer = assemble_rings(outer)
    if not outer_rings or open_outer:
        return None
    inner_rings, _ = assemble_rings(inner)

    polygons = [[ring] for ring in outer_rings]
    shells = [Polygon(ring) for ring in outer_rings]
    for ring in inner_rings:
        hole = Polygon(ring)
        for shell, rings in zip(shells, polygons):
            if contains_point(shell, hole.representative_point()):
                rings.append(ring)
                break

    try:
        return BoundaryGeometry(polygons)
    except (GeometryError, ValueError):
        # shapely rejects rings it cannot build a polygon from
        return None


def get_boundary(relation: Relation, objs: ObjectMap) -> Optional[AdminBoundary]:
    tags = relation.tags
    if tags.get("boundary") != "administrative":
        return None
    name = tags.get("name")
    admin_level = parse_admin_level(tags.get("admin_level"))
    if not name or admin_level is None:
        return None
    geometry = build_boundary(relation, objs)
    if geometry is None:
        return None
    return AdminBoundary(name, admin_level, geometry)


def get_boundaries(objs: ObjectMap) -> List[AdminBoundary]:
    """Build an AdminBoundary for every qualifying relation in the map."""
    boundaries = []
    for osm_id in sorted(objs):
        obj = objs[osm_id]
        if not isinstance(obj, Relation):
            continue
        boundary = get_boundary(obj, objs)
        if boundary is not None:
            boundaries.append(boundary)
    return boundaries


class BoundaryIndex:
    """STRtree over boundary envelopes. Built once, then only queried."""

    def __init__(self, boundaries: List[AdminBoundary]):
        self.boundaries = list(boundaries)
        self._tree = None
        if self.boundaries:
            self._tree = STRtree([box(*b.bbox.bounds) for b in self.boundaries])

    def __len__(self):
        return len(self.boundaries)

    def query(self, bbox: BoundingBox) -> List[AdminBoundary]:
        """Boundaries whose envelope intersects ``bbox``, in input order."""
        if self._tree is None:
            return []
        idx = self._tree.query(box(*bbox.bounds))
        return [self.boundaries[i] for i in sorted(int(i) for i in idx)]
