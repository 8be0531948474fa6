"""OSM object model.

Purpose: Typed, immutable records for the three OSM primitives (nodes, ways,
relations) plus the key used in object maps. Loaders produce a
``dict[OsmId, Node | Way | Relation]`` which every extraction step treats as
read-only.

Beginner concepts:
1. Node: a single location (lat/lon) with tags.
2. Way: an ordered list of node ids forming a polyline (or a ring if closed).
3. Relation: an ordered list of members (nodes, ways or other relations),
   each with a role such as "outer" or "inner".
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, NamedTuple, Tuple, Union

NODE = "node"
WAY = "way"
RELATION = "relation"
OSM_TYPES = (NODE, WAY, RELATION)

# overpass / osmium short type names
_SHORT_TYPES = {"n": NODE, "w": WAY, "r": RELATION}


class OsmId(NamedTuple):
    kind: str
    id: int

    @classmethod
    def node(cls, id: int) -> "OsmId":
        return cls(NODE, id)

    @classmethod
    def way(cls, id: int) -> "OsmId":
        return cls(WAY, id)

    @classmethod
    def relation(cls, id: int) -> "OsmId":
        return cls(RELATION, id)

    @classmethod
    def from_type(cls, osm_type: str, id: int) -> "OsmId":
        kind = _SHORT_TYPES.get(osm_type, osm_type)
        if kind not in OSM_TYPES:
            raise ValueError(f"Unknown OSM type: {osm_type}")
        return cls(kind, int(id))


class Member(NamedTuple):
    ref: OsmId
    role: str = ""


class Node(NamedTuple):
    id: int
    lat: float
    lon: float
    tags: Mapping[str, str] = MappingProxyType({})

    osm_type = NODE

    @property
    def osm_id(self) -> OsmId:
        return OsmId(NODE, self.id)


class Way(NamedTuple):
    id: int
    tags: Dict[str, str]
    nodes: Tuple[int, ...]

    osm_type = WAY

    @property
    def osm_id(self) -> OsmId:
        return OsmId(WAY, self.id)


class Relation(NamedTuple):
    id: int
    tags: Dict[str, str]
    members: Tuple[Member, ...]

    osm_type = RELATION

    @property
    def osm_id(self) -> OsmId:
        return OsmId(RELATION, self.id)


OsmObject = Union[Node, Way, Relation]
ObjectMap = Dict[OsmId, OsmObject]


def object_map(objects: Iterable[OsmObject]) -> ObjectMap:
    """Index objects by their OsmId (later duplicates win)."""
    return {obj.osm_id: obj for obj in objects}


def objects_from_elements(elements: Iterable[dict]) -> ObjectMap:
    """Convert Overpass JSON ``elements`` into an object map.

    Elements without a usable type are skipped; nodes without coordinates
    (e.g. ``out ids``) are skipped as well since they carry no geometry.
    """
    objs: ObjectMap = {}
    for el in elements:
        el_type = el.get("type")
        tags = dict(el.get("tags", {}))
        if el_type == NODE:
            if "lat" not in el or "lon" not in el:
                continue
            obj = Node(int(el["id"]), float(el["lat"]), float(el["lon"]), tags)
        elif el_type == WAY:
            obj = Way(int(el["id"]), tags, tuple(int(n) for n in el.get("nodes", [])))
        elif el_type == RELATION:
            members: List[Member] = []
            for m in el.get("members", []):
                members.append(Member(OsmId.from_type(m["type"], m["ref"]), m.get("role", "")))
            obj = Relation(int(el["id"]), tags, tuple(members))
        else:
            continue
        objs[obj.osm_id] = obj
    return objs
