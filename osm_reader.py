"""Read OSM objects and their dependencies from a PBF (or XML) file.

Three passes over the file, each with a pyosmium handler:

1. Relations: keep every relation, then take the matching ones plus the
   relations they (transitively) contain.
2. Ways: keep ways that match or that a kept relation references.
3. Nodes: keep nodes that match or that a kept way/relation references.

Handler callbacks only see short-lived views, so all data is copied into
plain osm_model records.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Set

import osmium

from osm_model import NODE, RELATION, WAY, Member, Node, ObjectMap, OsmId, Relation, Way
from tag_filter import Group, predicate
from utils import log


def _tags(tag_list) -> Dict[str, str]:
    return {t.k: t.v for t in tag_list}


class RelationCollector(osmium.SimpleHandler):
    """First pass: collect relations and which of them match."""

    def __init__(self, matches: Callable):
        osmium.SimpleHandler.__init__(self)
        self.matches = matches
        self.relations: Dict[int, Relation] = {}
        self.matched: List[int] = []

    def relation(self, r):
        members = tuple(Member(OsmId.from_type(m.type, m.ref), m.role) for m in r.members)
        rel = Relation(r.id, _tags(r.tags), members)
        self.relations[r.id] = rel
        if self.matches(rel.tags):
            self.matched.append(r.id)


class WayCollector(osmium.SimpleHandler):
    """Second pass: ways that match or are referenced by kept relations."""

    def __init__(self, matches: Callable, required_way_ids: Set[int]):
        osmium.SimpleHandler.__init__(self)
        self.matches = matches
        self.required_way_ids = required_way_ids
        self.ways: Dict[int, Way] = {}

    def way(self, w):
        tags = _tags(w.tags)
        if w.id in self.required_way_ids or self.matches(tags):
            self.ways[w.id] = Way(w.id, tags, tuple(n.ref for n in w.nodes))


class NodeCollector(osmium.SimpleHandler):
    """Third pass: nodes that match or are referenced."""

    def __init__(self, matches: Callable, required_node_ids: Set[int]):
        osmium.SimpleHandler.__init__(self)
        self.matches = matches
        self.required_node_ids = required_node_ids
        self.nodes: Dict[int, Node] = {}

    def node(self, n):
        tags = _tags(n.tags)
        if n.id in self.required_node_ids or self.matches(tags):
            if not n.location.valid():
                return
            self.nodes[n.id] = Node(n.id, n.location.lat, n.location.lon, tags)


def relation_closure(relations: Dict[int, Relation], roots: List[int]) -> Dict[int, Relation]:
    """Relations reachable from ``roots`` through relation members."""
    kept: Dict[int, Relation] = {}
    stack = list(roots)
    while stack:
        rel_id = stack.pop()
        if rel_id in kept or rel_id not in relations:
            continue
        rel = relations[rel_id]
        kept[rel_id] = rel
        stack.extend(m.ref.id for m in rel.members if m.ref.kind == RELATION)
    return kept


class PbfObjectLoader:
    def __init__(self, path, verbose: bool = False):
        self.path = str(path)
        self.verbose = verbose

    def load(self, groups: Optional[List[Group]] = None) -> ObjectMap:
        matches = predicate(groups)

        rel_handler = RelationCollector(matches)
        rel_handler.apply_file(self.path)
        relations = relation_closure(rel_handler.relations, rel_handler.matched)

        required_ways = {m.ref.id for r in relations.values() for m in r.members if m.ref.kind == WAY}
        way_handler = WayCollector(matches, required_ways)
        way_handler.apply_file(self.path)

        required_nodes = {m.ref.id for r in relations.values() for m in r.members if m.ref.kind == NODE}
        for way in way_handler.ways.values():
            required_nodes.update(way.nodes)
        node_handler = NodeCollector(matches, required_nodes)
        node_handler.apply_file(self.path)

        if self.verbose:
            log(f"  Loaded {len(node_handler.nodes)} nodes, {len(way_handler.ways)} ways, "
                f"{len(relations)} relations from {self.path}")

        objs: ObjectMap = {}
        for node in node_handler.nodes.values():
            objs[node.osm_id] = node
        for way in way_handler.ways.values():
            objs[way.osm_id] = way
        for rel in relations.values():
            objs[rel.osm_id] = rel
        return objs
