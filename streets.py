"""Street Clustering

Purpose: Rebuild logical streets from the many way fragments OSM stores them
as. Fragments share a ``name`` tag but are otherwise independent, so we
group by name and then cluster each group by spatial adjacency.

High-level steps (per name group):
1. One Segment per way (ways without resolvable nodes are skipped).
2. Bulk-load the padded segment envelopes into a shapely STRtree.
3. Broad phase: for each segment, query the tree with its padded envelope.
4. Narrow phase: keep only candidate pairs whose lines really intersect
   (touching at an endpoint counts).
5. Build an undirected networkx graph (one node per way id, one edge per
   confirmed pair) and take its connected components.
6. Emit one Street per component.

Name groups share nothing, so they are processed on a thread pool and the
results are flattened at the end (no ordering across groups).

Beginner note: the padding only widens the candidate search. Two fragments
that are close but do not touch still end up in different streets.
"""
from __future__ import annotations

import operator
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import Dict, List, Optional, Set, Tuple

import networkx as nx
from shapely.geometry import box
from shapely.strtree import STRtree

from config import MAX_WORKERS, RTREE_PADDING
from geometry import (
    BoundingBox,
    Coordinate,
    GeometryError,
    SegmentGeometry,
    bounding_box,
    closest_point,
    combined_centroid,
)
from osm_model import ObjectMap, Way
from resolver import way_coordinates
from utils import log


class Segment:
    """A way's geometry. Two segments are equal iff they share a way id."""

    __slots__ = ("way_id", "geometry")

    def __init__(self, way_id: int, geometry: SegmentGeometry):
        self.way_id = way_id
        self.geometry = geometry

    @classmethod
    def from_way(cls, way: Way, objs: ObjectMap) -> "Segment":
        return cls(way.id, SegmentGeometry(way_coordinates(way, objs)))

    def __eq__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        return self.way_id == other.way_id

    def __hash__(self):
        return hash(self.way_id)

    def __repr__(self):
        return f"Segment(way_id={self.way_id})"


class Street:
    __slots__ = ("name", "segments", "boundary")

    def __init__(self, name: str, segments: List[Segment], boundary: Optional[str] = None):
        self.name = name
        self.segments = segments
        self.boundary = boundary

    def __repr__(self):
        return f"Street(name={self.name!r}, segments={len(self.segments)}, boundary={self.boundary!r})"

    def with_boundary(self, boundary: str) -> "Street":
        # clones share the segment list, segments are never mutated
        return Street(self.name, self.segments, boundary)

    def coordinates(self) -> List[List[Coordinate]]:
        return [segment.geometry.points for segment in self.segments]


# -- metrics ----------------------------------------------------------------

def street_id(street: Street) -> int:
    """XOR of the member way ids, independent of segment order."""
    return reduce(operator.xor, (s.way_id for s in street.segments), 0)


def street_length(street: Street) -> float:
    """Sum of the segments' bounding-box diagonals (approximate length)."""
    return sum(s.geometry.length for s in street.segments)


def street_middle(street: Street) -> Optional[Coordinate]:
    """Segment point closest to the centroid of the whole street."""
    points = [pt for s in street.segments for pt in s.geometry.points]
    target = combined_centroid(s.geometry for s in street.segments)
    if target is None:
        return None
    return closest_point(points, target)


def street_envelope(street: Street) -> BoundingBox:
    return bounding_box(pt for s in street.segments for pt in s.geometry.points)


# -- clustering -------------------------------------------------------------

def get_name_groups(objs: ObjectMap) -> Dict[str, List[Way]]:
    """Group named ways by their name tag (ways sorted by id)."""
    groups: Dict[str, List[Way]] = {}
    for obj in objs.values():
        if not isinstance(obj, Way):
            continue
        name = obj.tags.get("name")
        if name is None:
            continue
        groups.setdefault(name, []).append(obj)
    for ways in groups.values():
        ways.sort(key=lambda w: w.id)
    return groups


def get_segments(ways: List[Way], objs: ObjectMap) -> List[Segment]:
    segments = []
    for way in ways:
        try:
            segments.append(Segment.from_way(way, objs))
        except GeometryError:
            # no node of this way was loaded
            continue
    return segments


def get_intersections(segments: List[Segment],
                      padding: float = RTREE_PADDING) -> Set[Tuple[Segment, Segment]]:
    """Pairs of intersecting segments as (lower way id, higher way id)."""
    if not segments:
        return set()
    envelopes = [box(*s.geometry.pad(padding).bounds) for s in segments]
    tree = STRtree(envelopes)

    intersections = set()
    for segment, envelope in zip(segments, envelopes):
        for idx in tree.query(envelope):
            other = segments[int(idx)]
            if other == segment:
                continue
            if not segment.geometry.intersects(other.geometry):
                continue
            if segment.way_id < other.way_id:
                intersections.add((segment, other))
            else:
                intersections.add((other, segment))
    return intersections


def get_clusters(segments: List[Segment], padding: float = RTREE_PADDING) -> List[List[Segment]]:
    """Connected components of the segment intersection graph."""
    # dedupe by way id, first occurrence wins
    segments = list(dict.fromkeys(segments))

    G = nx.Graph()
    for segment in segments:
        G.add_node(segment.way_id, segment=segment)
    for a, b in get_intersections(segments, padding):
        G.add_edge(a.way_id, b.way_id)

    clusters = []
    for comp in nx.connected_components(G):
        clusters.append([G.nodes[way_id]["segment"] for way_id in sorted(comp)])
    # deterministic order: by lowest way id
    clusters.sort(key=lambda c: c[0].way_id)
    return clusters


def cluster_name_group(name: str, ways: List[Way], objs: ObjectMap,
                       padding: float = RTREE_PADDING) -> List[Street]:
    segments = get_segments(ways, objs)
    return [Street(name, cluster) for cluster in get_clusters(segments, padding)]


def extract_streets(objs: ObjectMap, max_workers: Optional[int] = MAX_WORKERS,
                    padding: float = RTREE_PADDING, verbose: bool = False) -> List[Street]:
    """Cluster every name group into streets, one group per worker task."""
    groups = get_name_groups(objs)
    if verbose:
        log(f"  Clustering {len(groups)} street names...")

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = pool.map(
            lambda item: cluster_name_group(item[0], item[1], objs, padding),
            groups.items(),
        )
        streets = [street for group in results for street in group]

    if verbose:
        log(f"  Found {len(streets)} streets")
    return streets
