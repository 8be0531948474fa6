# roads.py
"""Roads: same-name way fragments chained end to end.

Unlike streets (clusters of intersecting segments) a road is one continuous
polyline. Fragments that do not connect end to end stay separate roads.
"""
from typing import List

from chain_merge import merge
from osm_model import ObjectMap
from resolver import way_coordinates
from streets import get_name_groups


class Road:
    __slots__ = ("name", "coordinates")

    def __init__(self, name, coordinates):
        self.name = name
        self.coordinates = coordinates

    def __repr__(self):
        return f"Road(name={self.name!r}, points={len(self.coordinates)})"


def get_roads(objs: ObjectMap) -> List[Road]:
    roads = []
    for name, ways in get_name_groups(objs).items():
        fragments = [way_coordinates(way, objs) for way in ways]
        for chain in merge([f for f in fragments if f]):
            roads.append(Road(name, chain))
    return roads
