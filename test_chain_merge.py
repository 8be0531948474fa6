# test_chain_merge.py
from chain_merge import assemble_rings, chain, merge


def test_tail():
    assert chain([[1, 2, 3], [3, 4, 5]]) == [[1, 2, 3, 4, 5]]


def test_head():
    assert chain([[3, 4, 5], [1, 2, 3]]) == [[1, 2, 3, 4, 5]]


def test_reverse_tail():
    assert chain([[1, 2, 3], [5, 4, 3]]) == [[1, 2, 3, 4, 5]]


def test_reverse_head():
    assert chain([[3, 4, 5], [3, 2, 1]]) == [[1, 2, 3, 4, 5]]


def test_unrelated():
    assert chain([[1, 2, 3], [4, 5, 6]]) == [[1, 2, 3], [4, 5, 6]]


def test_merge_coordinates():
    a = [(1.0, 1.0), (2.0, 2.0)]
    b = [(2.0, 2.0), (3.0, 3.0)]
    assert merge([a, b]) == [[(1.0, 1.0), (2.0, 2.0), (3.0, 3.0)]]


def test_merge_reversed_fragment():
    a = [(2.0, 2.0), (1.0, 1.0)]
    b = [(2.0, 2.0), (3.0, 3.0)]
    assert merge([a, b]) == [[(3.0, 3.0), (2.0, 2.0), (1.0, 1.0)]]
    assert merge([b, a]) == [[(1.0, 1.0), (2.0, 2.0), (3.0, 3.0)]]


def test_bridging_fragment_needs_second_pass():
    fragments = [
        [(3.0, 3.0), (4.0, 4.0)],
        [(1.0, 1.0), (2.0, 2.0)],
        [(2.0, 2.0), (3.0, 3.0)],
    ]
    # a single pass leaves two chains behind
    assert len(chain(fragments)) == 2
    assert merge(fragments) == [[(1.0, 1.0), (2.0, 2.0), (3.0, 3.0), (4.0, 4.0)]]


def test_first_matching_chain_wins():
    # [2, 5] connects to both chains, only the first one takes it
    result = chain([[1, 2], [5, 6], [2, 5]])
    assert result == [[1, 2, 5], [5, 6]]
    assert merge([[1, 2], [5, 6], [2, 5]]) == [[1, 2, 5, 6]]


def test_empty_fragments_are_ignored():
    assert merge([[], [1, 2], []]) == [[1, 2]]
    assert merge([]) == []


def test_assemble_rings():
    fragments = [[(0, 0), (1, 0)], [(1, 0), (1, 1)], [(0, 0), (0, 1), (1, 1)]]
    rings, open_chains = assemble_rings(fragments)
    assert open_chains == []
    assert len(rings) == 1
    ring = rings[0]
    assert ring[0] == ring[-1]
    assert len(ring) == 5


def test_assemble_rings_reports_open_chains():
    rings, open_chains = assemble_rings([[(0, 0), (1, 0)], [(1, 0), (1, 1)]])
    assert rings == []
    assert open_chains == [[(0, 0), (1, 0), (1, 1)]]


def test_assemble_rings_keeps_closed_fragments_apart():
    first = [(0, 0), (1, 0), (1, 1), (0, 0)]
    second = [(0, 0), (-1, 0), (-1, -1), (0, 0)]
    rings, open_chains = assemble_rings([first, second])
    assert rings == [first, second]
    assert open_chains == []
