"""Chain Merger

Purpose: Stitch polyline fragments that share an endpoint into maximal
continuous chains. Used to assemble boundary rings from relation member ways
and, in roads mode, to join same-name street fragments.

Points are compared exactly. That holds for OSM data because fragments that
touch share the very same node (and therefore bit-identical coordinates).

One pass (`chain`) walks the fragments in input order. For each fragment the
first existing chain it connects to is extended:

    chain end   == fragment start  -> append fragment          (tail)
    chain start == fragment end    -> prepend fragment         (head)
    chain end   == fragment end    -> append reversed fragment  (reverse tail)
    chain start == fragment start  -> prepend reversed fragment (reverse head)

otherwise the fragment starts a new chain. A later fragment can bridge two
chains that were built separately, so `merge` repeats the pass until the
number of chains stops shrinking.
"""
from __future__ import annotations

from typing import List, Sequence, TypeVar

T = TypeVar("T")

TAIL = "tail"
HEAD = "head"
REVERSE_TAIL = "reverse_tail"
REVERSE_HEAD = "reverse_head"


def find_connection(chain: Sequence[T], fragment: Sequence[T]):
    """Return how ``fragment`` attaches to ``chain`` (or None)."""
    if not chain or not fragment:
        return None
    if chain[-1] == fragment[0]:
        return TAIL
    if chain[0] == fragment[-1]:
        return HEAD
    if chain[-1] == fragment[-1]:
        return REVERSE_TAIL
    if chain[0] == fragment[0]:
        return REVERSE_HEAD
    return None


def _connect(chain: List[T], fragment: Sequence[T], connection: str) -> List[T]:
    if connection == TAIL:
        return chain + list(fragment[1:])
    if connection == HEAD:
        return list(fragment[:-1]) + chain
    if connection == REVERSE_TAIL:
        return chain + list(reversed(fragment[:-1]))
    # REVERSE_HEAD
    return list(reversed(fragment[1:])) + chain


def chain(fragments: Sequence[Sequence[T]]) -> List[List[T]]:
    """Single left-to-right merge pass."""
    chains: List[List[T]] = []
    for fragment in fragments:
        if not fragment:
            continue
        for idx, existing in enumerate(chains):
            connection = find_connection(existing, fragment)
            if connection is not None:
                chains[idx] = _connect(existing, fragment, connection)
                break
        else:
            chains.append(list(fragment))
    return chains


def merge(fragments: Sequence[Sequence[T]]) -> List[List[T]]:
    """Repeat `chain` until the chain count is stable."""
    chains = chain(fragments)
    while True:
        merged = chain(chains)
        if len(merged) >= len(chains):
            return chains
        chains = merged


def is_ring(points: Sequence[T]) -> bool:
    return len(points) >= 4 and points[0] == points[-1]


def assemble_rings(fragments: Sequence[Sequence[T]]):
    """Merge fragments into rings.

    Returns ``(rings, open_chains)``; a chain is only a ring if it is closed
    and has at least four points (a triangle plus the closing point).
    Fragments that are rings already are kept as they are, so two closed
    ways touching at one node stay two rings.
    """
    rings = [list(f) for f in fragments if is_ring(f)]
    open_chains = []
    for merged in merge([f for f in fragments if not is_ring(f)]):
        if is_ring(merged):
            rings.append(merged)
        else:
            open_chains.append(merged)
    return rings, open_chains
