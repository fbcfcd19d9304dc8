from highlighting.coordinate_mapper import CoordinateMapper, NumberingScheme
from highlighting.structure_renderer import HeadlessRenderer
from model.selection_types import Region
from model.sequence_data_model import Residue


def as_tuples(ranges):
    return [(r.chain, r.start, r.end, r.auth) for r in ranges]


def test_hover_positions_become_merged_ranges():
    mapper = CoordinateMapper()
    residues = [Residue("A", 10, "K"), Residue("A", 11, "L"), Residue("A", 13, "M")]
    assert as_tuples(mapper.residues_to_ranges(residues)) == [
        ("A", 10, 11, True),
        ("A", 13, 13, True),
    ]


def test_label_numbering_is_identity():
    mapper = CoordinateMapper(NumberingScheme.LABEL, auth_offsets={"A": 100})
    assert as_tuples(mapper.to_renderer_ranges([Region.create("A", 1, 5)])) == [("A", 1, 5, False)]
    assert mapper.to_renderer_number("A", 7) == 7
    assert mapper.to_sequence_position("A", 7) == 7


def test_auth_offset_shifts_positions():
    mapper = CoordinateMapper(auth_offsets={"A": -3})
    assert as_tuples(mapper.to_renderer_ranges([Region.create("A", 10, 12)])) == [("A", 7, 9, True)]
    assert mapper.to_renderer_number("A", 10) == 7
    assert mapper.to_sequence_position("A", 7) == 10


def test_explicit_auth_map_splits_around_gaps():
    mapper = CoordinateMapper()
    mapper.set_auth_map("A", {1: 20, 2: 21, 3: 25, 4: 26})
    assert as_tuples(mapper.to_renderer_ranges([Region.create("A", 1, 4)])) == [
        ("A", 20, 21, True),
        ("A", 25, 26, True),
    ]
    assert mapper.to_renderer_number("A", 9) is None
    assert mapper.to_sequence_position("A", 25) == 3
    assert mapper.to_sequence_position("A", 22) is None


def test_offset_and_map_replace_each_other():
    mapper = CoordinateMapper()
    mapper.set_auth_map("A", {1: 5})
    mapper.set_auth_offset("A", 10)
    assert mapper.to_renderer_number("A", 1) == 11
    mapper.set_auth_map("A", {1: 5})
    assert mapper.to_renderer_number("A", 1) == 5


def test_chains_missing_from_loaded_structure_are_dropped():
    renderer = HeadlessRenderer()
    renderer.load_structure("1ABC", ["A"])
    mapper = CoordinateMapper(renderer=renderer)
    result = mapper.to_renderer_ranges([Region.create("A", 1, 2), Region.create("B", 1, 2)])
    assert as_tuples(result) == [("A", 1, 2, True)]


def test_try_get_structure():
    mapper = CoordinateMapper()
    assert mapper.try_get_structure() is None

    renderer = HeadlessRenderer()
    mapper.set_renderer(renderer)
    assert mapper.try_get_structure() is None

    renderer.load_structure("1ABC", ["A", "B"])
    info = mapper.try_get_structure()
    assert info.structure_id == "1ABC"
    assert info.chain_ids == frozenset({"A", "B"})
