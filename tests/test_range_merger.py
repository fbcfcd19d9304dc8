import itertools

from selection.range_merger import merge_positions, merge_ranges


def test_hover_positions_collapse_into_ranges():
    assert merge_positions([("A", 10), ("A", 11), ("A", 13)]) == [("A", 10, 11), ("A", 13, 13)]


def test_adjacent_ranges_merge():
    assert merge_ranges([("A", 5, 8), ("A", 9, 12)]) == [("A", 5, 12)]


def test_gap_of_one_residue_keeps_ranges_apart():
    assert merge_ranges([("A", 5, 8), ("A", 10, 12)]) == [("A", 5, 8), ("A", 10, 12)]


def test_contained_range_is_absorbed():
    assert merge_ranges([("A", 1, 20), ("A", 5, 6)]) == [("A", 1, 20)]


def test_chains_are_never_merged_together():
    result = merge_ranges([("B", 1, 3), ("A", 2, 4), ("A", 4, 6)])
    assert result == [("A", 2, 6), ("B", 1, 3)]


def test_reversed_bounds_are_normalized():
    assert merge_ranges([("A", 9, 3)]) == [("A", 3, 9)]


def test_empty_input():
    assert merge_ranges([]) == []
    assert merge_positions([]) == []


def test_result_does_not_depend_on_input_order():
    ranges = [("A", 20, 25), ("A", 5, 8), ("A", 8, 9), ("B", 1, 1), ("A", 26, 26)]
    expected = merge_ranges(ranges)
    for permutation in itertools.permutations(ranges):
        assert merge_ranges(permutation) == expected
    assert expected == [("A", 5, 9), ("A", 20, 26), ("B", 1, 1)]


def test_output_is_sorted_and_separated():
    ranges = [("A", 3, 4), ("A", 1, 2), ("A", 7, 9), ("A", 8, 15), ("C", 4, 4)]
    result = merge_ranges(ranges)
    assert result == [("A", 1, 4), ("A", 7, 15), ("C", 4, 4)]
    for (chain_a, _, end_a), (chain_b, start_b, _) in zip(result, result[1:]):
        if chain_a == chain_b:
            assert start_b > end_a + 1
