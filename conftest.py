# conftest.py
import pytest

from geometry import SegmentGeometry
from osm_model import Member, Node, OsmId, Relation, Way
from streets import Segment
from tag_filter import matches


class ObjectBuilder:
    """Build small object maps by hand."""

    def __init__(self):
        self.objects = {}

    def node(self, id, lon, lat, tags=None):
        node = Node(id, float(lat), float(lon), tags or {})
        self.objects[node.osm_id] = node
        return node

    def way(self, id, node_ids, tags=None):
        way = Way(id, tags or {}, tuple(node_ids))
        self.objects[way.osm_id] = way
        return way

    def relation(self, id, members, tags=None):
        """``members`` is a list of (OsmId, role) tuples."""
        rel = Relation(id, tags or {}, tuple(Member(ref, role) for ref, role in members))
        self.objects[rel.osm_id] = rel
        return rel

    def street(self, way_id, name, coords, first_node_id, tags=None):
        """Add a named way over fresh nodes numbered from ``first_node_id``."""
        node_ids = []
        for i, (lon, lat) in enumerate(coords):
            self.node(first_node_id + i, lon, lat)
            node_ids.append(first_node_id + i)
        tags = dict(tags or {}, name=name)
        return self.way(way_id, node_ids, tags)

    def admin_area(self, rel_id, name, level, ring, first_id):
        """Closed ``ring`` (first point repeated or not) as one outer way."""
        if ring[0] != ring[-1]:
            ring = list(ring) + [ring[0]]
        node_ids = []
        for i, (lon, lat) in enumerate(ring[:-1]):
            self.node(first_id + i, lon, lat)
            node_ids.append(first_id + i)
        node_ids.append(node_ids[0])
        way = self.way(first_id, node_ids)
        tags = {"boundary": "administrative", "name": name, "admin_level": str(level)}
        return self.relation(rel_id, [(OsmId.way(way.id), "outer")], tags)


class FakeLoader:
    """Loader over an in-memory object map; records the requested groups."""

    def __init__(self, objects):
        self.objects = objects
        self.requests = []

    def load(self, groups=None):
        self.requests.append(groups)
        if groups is None:
            return dict(self.objects)
        # selected objects plus everything, as a PBF loader would return deps
        selected = {k: v for k, v in self.objects.items() if matches(v.tags, groups)}
        if not selected:
            return {}
        return dict(self.objects)


@pytest.fixture
def builder():
    return ObjectBuilder()


def make_segment(way_id, coordinates):
    return Segment(way_id, SegmentGeometry(coordinates))
