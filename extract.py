"""Extraction entry points.

Each function takes a loader (anything with ``load(groups) -> object map``,
see osm_reader.PbfObjectLoader and data_fetcher.OverpassObjectLoader) and
returns domain records ready for export_utils.
"""
from __future__ import annotations

from typing import List, Optional

from admin import AdminBoundary, get_boundaries
from config import DEFAULT_ADMIN_LEVELS, MAX_WORKERS
from geometry import get_geo_info
from osm_model import NODE
from overlay import assign_boundaries
from resolver import resolve
from roads import Road, get_roads
from streets import Street, extract_streets
from tag_filter import Group, admin_groups, matches, street_groups
from utils import log


def boundaries(loader, levels: Optional[List[int]] = None, verbose: bool = False) -> List[AdminBoundary]:
    """Administrative boundaries for the given levels (default 4, 6, 8, 9, 10)."""
    levels = DEFAULT_ADMIN_LEVELS if levels is None else levels
    objs = loader.load(admin_groups(levels))
    result = get_boundaries(objs)
    if verbose:
        log(f"  Built {len(result)} boundaries (levels {', '.join(str(l) for l in levels)})")
    return result


def streets(loader, name: Optional[str] = None, boundary: Optional[int] = None,
            max_workers: Optional[int] = MAX_WORKERS, verbose: bool = False) -> List[Street]:
    """Streets, optionally only those called ``name``.

    With ``boundary`` (an admin level) streets are assigned to, or split
    across, the boundaries of that level.
    """
    objs = loader.load(street_groups(name))
    result = extract_streets(objs, max_workers=max_workers, verbose=verbose)
    if boundary is None:
        return result

    admin_objs = loader.load(admin_groups([boundary]))
    return assign_boundaries(result, get_boundaries(admin_objs), verbose=verbose)


def roads(loader, name: Optional[str] = None) -> List[Road]:
    return get_roads(loader.load(street_groups(name)))


def objects(loader, groups: Optional[List[Group]] = None, retain_coordinates: bool = False) -> List[dict]:
    """Matching objects with their centroid and bounds.

    Dependencies are loaded to compute geometry but are not returned
    unless they match the groups themselves.
    """
    objs = loader.load(groups)
    records = []
    for osm_id in sorted(objs):
        obj = objs[osm_id]
        if groups is not None and not matches(obj.tags, groups):
            continue
        record = {"id": obj.id, "type": obj.osm_type, "tags": dict(obj.tags)}
        if obj.osm_type == NODE:
            record["lat"] = obj.lat
            record["lon"] = obj.lon
        else:
            coords = resolve(obj, objs)
            centroid, bounds = get_geo_info(coords)
            record["centroid"] = centroid
            record["bounds"] = bounds
            if retain_coordinates:
                record["coordinates"] = [list(c) for c in coords]
        records.append(record)
    return records
