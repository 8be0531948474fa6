# test_osm_reader.py
import pytest

from osm_model import OsmId
from osm_reader import PbfObjectLoader, relation_closure
from tag_filter import admin_groups, parse

OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <node id="1" lat="52.0" lon="13.0"/>
  <node id="2" lat="52.0" lon="14.0"/>
  <node id="3" lat="53.0" lon="14.0"/>
  <node id="4" lat="53.0" lon="13.0"/>
  <node id="5" lat="52.5" lon="13.2"/>
  <node id="6" lat="52.5" lon="13.4"/>
  <node id="7" lat="52.1" lon="13.1">
    <tag k="amenity" v="bench"/>
  </node>
  <node id="8" lat="40.0" lon="10.0"/>
  <node id="9" lat="40.0" lon="10.1"/>
  <way id="10">
    <nd ref="1"/><nd ref="2"/><nd ref="3"/><nd ref="4"/><nd ref="1"/>
  </way>
  <way id="11">
    <nd ref="5"/><nd ref="6"/>
  </way>
  <way id="12">
    <nd ref="8"/><nd ref="9"/>
    <tag k="highway" v="residential"/>
    <tag k="name" v="Elsewhere"/>
  </way>
  <relation id="100">
    <member type="way" ref="10" role="outer"/>
    <member type="relation" ref="101" role="subarea"/>
    <tag k="boundary" v="administrative"/>
    <tag k="admin_level" v="8"/>
    <tag k="name" v="Mitte"/>
  </relation>
  <relation id="101">
    <member type="way" ref="11" role=""/>
  </relation>
  <relation id="102">
    <member type="way" ref="12" role=""/>
    <tag k="type" v="route"/>
  </relation>
</osm>
"""


@pytest.fixture
def osm_file(tmp_path):
    path = tmp_path / "sample.osm"
    path.write_text(OSM_XML, encoding="utf-8")
    return path


def test_matched_relation_brings_its_dependencies(osm_file):
    objs = PbfObjectLoader(osm_file).load(admin_groups([8]))

    assert set(objs) == {
        OsmId.relation(100), OsmId.relation(101),
        OsmId.way(10), OsmId.way(11),
        OsmId.node(1), OsmId.node(2), OsmId.node(3),
        OsmId.node(4), OsmId.node(5), OsmId.node(6),
    }
    rel = objs[OsmId.relation(100)]
    assert rel.tags["name"] == "Mitte"
    assert [(m.ref, m.role) for m in rel.members] == [
        (OsmId.way(10), "outer"),
        (OsmId.relation(101), "subarea"),
    ]
    assert objs[OsmId.way(10)].nodes == (1, 2, 3, 4, 1)
    node = objs[OsmId.node(2)]
    assert (node.lon, node.lat) == pytest.approx((14.0, 52.0))


def test_matched_way_brings_its_nodes_only(osm_file):
    objs = PbfObjectLoader(osm_file).load(parse("highway"))
    assert set(objs) == {OsmId.way(12), OsmId.node(8), OsmId.node(9)}


def test_matched_node_alone(osm_file):
    objs = PbfObjectLoader(osm_file).load(parse("amenity~bench"))
    assert set(objs) == {OsmId.node(7)}
    assert objs[OsmId.node(7)].tags == {"amenity": "bench"}


def test_no_match_loads_nothing(osm_file):
    assert PbfObjectLoader(osm_file).load(parse("shop")) == {}


def test_relation_closure_survives_cycles(builder):
    a = builder.relation(1, [(OsmId.relation(2), "")])
    b = builder.relation(2, [(OsmId.relation(1), ""), (OsmId.relation(9), "")])
    kept = relation_closure({1: a, 2: b}, [1])
    assert set(kept) == {1, 2}
