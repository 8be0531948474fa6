# overlay.py
"""Split streets along administrative boundaries.

A street whose envelope meets several boundaries is duplicated once per
boundary. The clones share the same segments, so summing lengths over a
name without looking at ``boundary`` counts those segments twice.
"""
from typing import Iterable, List

from admin import AdminBoundary, BoundaryIndex
from streets import Street, street_envelope
from utils import log


def split_by_boundaries(street: Street, index: BoundaryIndex) -> List[Street]:
    matches = index.query(street_envelope(street))
    if not matches:
        return [street]
    if len(matches) == 1:
        street.boundary = matches[0].name
        return [street]
    return [street.with_boundary(boundary.name) for boundary in matches]


def assign_boundaries(streets: Iterable[Street], boundaries: List[AdminBoundary],
                      verbose: bool = False) -> List[Street]:
    index = BoundaryIndex(boundaries)
    result = [s for street in streets for s in split_by_boundaries(street, index)]
    if verbose:
        log(f"  {len(result)} streets after splitting along {len(index)} boundaries")
    return result
