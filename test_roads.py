# test_roads.py
from roads import get_roads


def _nodes(builder):
    builder.node(1, 13.0, 52.0)
    builder.node(2, 14.0, 52.0)
    builder.node(3, 14.0, 53.0)
    builder.node(4, 15.0, 53.0)


def test_one_road_with_three_segments(builder):
    _nodes(builder)
    builder.way(42, [1, 2], {"name": "street a"})
    builder.way(41, [2, 3], {"name": "street a"})
    builder.way(43, [3, 4], {"name": "street a"})

    roads = get_roads(builder.objects)
    assert len(roads) == 1
    assert roads[0].name == "street a"
    assert roads[0].coordinates == [(13.0, 52.0), (14.0, 52.0), (14.0, 53.0), (15.0, 53.0)]


def test_connected_ways_with_distinct_names(builder):
    _nodes(builder)
    builder.way(42, [1, 2], {"name": "street a"})
    builder.way(41, [2, 3], {"name": "street b"})

    roads = get_roads(builder.objects)
    assert sorted(r.name for r in roads) == ["street a", "street b"]


def test_disconnected_fragments_stay_separate(builder):
    builder.street(1, "Hauptstraße", [(13.0, 52.0), (13.1, 52.0)], 100)
    builder.street(2, "Hauptstraße", [(13.2, 52.0), (13.3, 52.0)], 200)

    roads = get_roads(builder.objects)
    assert [len(r.coordinates) for r in roads] == [2, 2]


def test_way_without_loaded_nodes_is_ignored(builder):
    builder.way(5, [900, 901], {"name": "ghost"})
    assert get_roads(builder.objects) == []
