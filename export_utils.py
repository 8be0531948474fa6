"""Export Utilities Module

Purpose: Centralize output formatting for extracted streets, roads,
boundaries and objects. Two formats are supported:

- JSON lines: one compact record per line (the default, easy to stream).
- GeoJSON: a FeatureCollection built with GeoPandas, for viewing on a map.

Key design notes:
- Coordinates are (lon, lat) in EPSG:4326 throughout.
- Street features get a random ``stroke`` colour so neighbouring streets are
  distinguishable in geojson.io and similar viewers.
"""
import json

import geopandas as gpd
import numpy as np
from shapely.geometry import LineString, MultiLineString, MultiPolygon

from config import ROAD_ID_OFFSET
from geometry import get_middle
from streets import street_id, street_length, street_middle
from utils import random_color


def street_record(street):
    loc = street_middle(street)
    if loc is None:
        raise ValueError(f"could not calculate middle of street {street.name!r}")
    return {
        "id": street_id(street),
        "name": street.name,
        "boundary": street.boundary,
        "length": street_length(street),
        "loc": list(loc),
    }


def boundary_record(boundary):
    sw, ne = boundary.sw_ne()
    return {
        "name": boundary.name,
        "admin_level": boundary.admin_level,
        "bbox": {"sw": list(sw), "ne": list(ne)},
    }


def road_record(idx, road):
    loc = get_middle(road.coordinates)
    if loc is None:
        raise ValueError(f"could not calculate middle of road {road.name!r}")
    return {"id": ROAD_ID_OFFSET + idx, "name": road.name, "loc": list(loc)}


def write_json_lines(records, out):
    """Write one JSON document per line to the file object ``out``."""
    for record in records:
        out.write(json.dumps(record, ensure_ascii=False))
        out.write("\n")


def write_streets(streets, out):
    write_json_lines((street_record(s) for s in streets), out)


def write_boundaries(boundaries, out):
    write_json_lines((boundary_record(b) for b in boundaries), out)


def write_roads(roads, out):
    write_json_lines((road_record(i, r) for i, r in enumerate(roads)), out)


def streets_to_geodataframe(streets, seed=None):
    """Build a GeoDataFrame with one MultiLineString feature per street.

    Parameters
    ----------
    streets : list of Street
        Streets to export. Segments with fewer than 2 points are dropped and
        streets left without any segment are skipped.
    seed : int, optional
        Seed for the stroke colours (None gives different colours per run).

    Returns
    -------
    GeoDataFrame
        Columns ``name``, ``boundary``, ``stroke`` and ``geometry`` (EPSG:4326).
    """
    rng = np.random.default_rng(seed)
    records = []
    for street in streets:
        lines = [LineString(s.geometry.points) for s in street.segments if len(s.geometry) >= 2]
        if not lines:
            continue
        records.append({
            "name": street.name,
            "boundary": street.boundary,
            "stroke": random_color(rng),
            "geometry": MultiLineString(lines),
        })
    if not records:
        return gpd.GeoDataFrame(columns=["name", "boundary", "stroke", "geometry"],
                                geometry="geometry", crs="EPSG:4326")
    return gpd.GeoDataFrame(records, geometry="geometry", crs="EPSG:4326")


def boundaries_to_geodataframe(boundaries):
    records = [
        {
            "name": b.name,
            "admin_level": str(b.admin_level),
            "geometry": MultiPolygon([(rings[0], rings[1:]) for rings in b.geometry.coordinates()]),
        }
        for b in boundaries
    ]
    if not records:
        return gpd.GeoDataFrame(columns=["name", "admin_level", "geometry"],
                                geometry="geometry", crs="EPSG:4326")
    return gpd.GeoDataFrame(records, geometry="geometry", crs="EPSG:4326")


def write_geojson(gdf, out):
    out.write(gdf.to_json())
    out.write("\n")
