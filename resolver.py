# resolver.py
"""Resolve OSM objects into coordinate lists using the object map.

Missing references are not errors: a loader only guarantees the dependencies
of *selected* objects, so anything absent simply contributes no points.
"""
from __future__ import annotations

from typing import List, Optional, Set

from geometry import Coordinate, get_compound_coordinates
from osm_model import NODE, RELATION, WAY, Node, ObjectMap, OsmId, OsmObject, Relation, Way


def way_coordinates(way: Way, objs: ObjectMap) -> List[Coordinate]:
    coords = []
    for node_id in way.nodes:
        node = objs.get(OsmId(NODE, node_id))
        if node is None:
            continue
        coords.append((node.lon, node.lat))
    return coords


def _member_coordinates(relation: Relation, objs: ObjectMap, visited: Set[int]) -> List[Coordinate]:
    if relation.id in visited:
        return []
    visited.add(relation.id)

    coords: List[Coordinate] = []
    for member in relation.members:
        obj = objs.get(member.ref)
        if obj is None:
            continue
        if isinstance(obj, Node):
            coords.append((obj.lon, obj.lat))
        elif isinstance(obj, Way):
            coords.extend(way_coordinates(obj, objs))
        elif isinstance(obj, Relation):
            coords.extend(relation_coordinates(obj, objs, visited))
    return coords


def relation_coordinates(relation: Relation, objs: ObjectMap,
                         visited: Optional[Set[int]] = None) -> List[Coordinate]:
    """Convex hull of all member coordinates, nested relations included.

    ``visited`` carries the relation ids already on the path so that
    cyclic relation graphs terminate.
    """
    if visited is None:
        visited = set()
    return get_compound_coordinates(_member_coordinates(relation, objs, visited))


def resolve(obj: OsmObject, objs: ObjectMap) -> List[Coordinate]:
    if obj.osm_type == NODE:
        return [(obj.lon, obj.lat)]
    if obj.osm_type == WAY:
        return way_coordinates(obj, objs)
    if obj.osm_type == RELATION:
        return relation_coordinates(obj, objs)
    raise TypeError(f"Not an OSM object: {obj!r}")
