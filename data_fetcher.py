"""Utilities to fetch OSM objects directly from the Overpass API."""
from __future__ import annotations

import time
from typing import Iterable, List, Optional

import overpass

from config import OVERPASS_MAX_RETRIES, OVERPASS_QUERY, OVERPASS_RETRY_DELAY, OVERPASS_TIMEOUT
from osm_model import ObjectMap, objects_from_elements
from tag_filter import Group, to_overpass_clauses
from utils import format_bbox, log


class OverpassObjectLoader:
    """Wraps the `overpass` client and converts responses to object maps.

    ``load`` returns the objects matching the filter groups inside the bbox
    plus everything they reference (member relations, ways and nodes).
    """

    def __init__(self, bbox: Iterable[float], timeout: int = OVERPASS_TIMEOUT,
                 max_retries: int = OVERPASS_MAX_RETRIES, retry_delay: float = OVERPASS_RETRY_DELAY):
        if not bbox:
            raise ValueError("bbox parameter is required")
        self.bbox = list(bbox)
        self.api = overpass.API(timeout=timeout)
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def build_query(self, groups: Optional[List[Group]]) -> str:
        bbox = format_bbox(self.bbox)
        if groups is None:
            clauses = f"\tnwr({bbox});"
        else:
            clauses = to_overpass_clauses(groups, bbox)
        return OVERPASS_QUERY.format(clauses=clauses)

    def fetch(self, query: str) -> dict:
        response = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.api.get(query, responseformat="json", verbosity="body")
                break
            except overpass.errors.ServerLoadError:
                if attempt == self.max_retries:
                    raise
                delay = self.retry_delay * attempt
                log(f"Overpass server busy, retrying in {delay:.1f}s (attempt {attempt}/{self.max_retries})")
                time.sleep(delay)

        if response is None:
            raise RuntimeError("Overpass request failed with no response")
        return response

    def load(self, groups: Optional[List[Group]] = None) -> ObjectMap:
        response = self.fetch(self.build_query(groups))
        return objects_from_elements(response.get("elements", []))
