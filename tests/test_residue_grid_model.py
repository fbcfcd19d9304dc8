import pytest

from features.residue_grid.residue_grid_model import ResidueGridModel, default_visible_chains, unique_chain_ids
from model.sequence_data_model import Residue, build_sequence_data


@pytest.fixture
def grid(sequence_data):
    model = ResidueGridModel(residues_per_row=10, cell_width=20, cell_height=20, cell_gap=0)
    model.set_data(sequence_data)
    return model


def test_chains_wrap_into_rows(grid, sequence_data):
    # chain A has 33 residues -> 4 rows, chain B has 9 -> 1 row
    assert [row.chain_id for row in grid.rows] == ["A"] * 4 + ["B"]
    assert len(grid.rows[3].residues) == 3
    assert [h.chain_id for h in grid.headers] == ["A", "B"]
    assert "Heavy chain" in grid.headers[0].text
    assert grid.width == grid.PADDING * 2 + 10 * 20


def test_cell_hit_testing(grid):
    row = grid.rows[1]
    x, y, w, h = grid.cell_rect(row, 4)
    residue = grid.cell_at(x + w / 2, y + h / 2)
    assert (residue.chain_id, residue.position) == ("A", 15)

    assert grid.cell_at(grid.PADDING - 1, y + 1) is None
    assert grid.cell_at(x, row.labels_y + 1) is None
    assert grid.cell_at(grid.PADDING + 5 * 20 + 1, grid.rows[3].cells_y + 1) is None


def test_relayout_on_row_width_change(grid):
    grid.set_residues_per_row(40)
    assert [row.chain_id for row in grid.rows] == ["A", "B"]


def test_positions_and_labels_can_be_hidden(sequence_data):
    model = ResidueGridModel(residues_per_row=40, show_positions=False, show_chain_labels=False)
    model.set_data(sequence_data)
    assert model.headers == []
    assert all(row.labels_y is None for row in model.rows)


def test_hover_and_provisional_state(grid):
    residue = Residue("A", 3, "T")
    assert grid.set_hovered([residue])
    assert not grid.set_hovered([residue])
    assert grid.is_hovered(residue)

    grid.set_provisional("A", 2, 4)
    assert grid.is_provisional(residue)
    assert not grid.is_provisional(Residue("B", 3, "H"))
    grid.set_provisional()
    assert not grid.is_provisional(residue)


def test_empty_data(grid):
    grid.clear()
    assert grid.rows == []
    assert grid.width == 0
    assert grid.cell_at(20, 20) is None


@pytest.fixture
def assembly():
    # A/C and B/D share sequences, E is unique
    return build_sequence_data(
        "1HHO",
        [("A", "VLSPADK"), ("B", "VHLTPEE"), ("C", "VLSPADK"), ("D", "VHLTPEE"), ("E", "MKV")],
    )


def test_large_assembly_shows_first_chain_by_default(assembly):
    model = ResidueGridModel(residues_per_row=10)
    model.set_data(assembly)
    assert model.visible_chain_ids == ("A",)
    assert {row.chain_id for row in model.rows} == {"A"}
    assert [h.chain_id for h in model.headers] == ["A"]


def test_default_visible_chains_limit(assembly):
    assert default_visible_chains(assembly.chains[:3]) == ("A", "B", "C")
    assert default_visible_chains(assembly.chains[:4]) == ("A",)
    assert default_visible_chains([]) == ()


def test_unique_chain_ids_drop_duplicate_sequences(assembly):
    assert unique_chain_ids(assembly.chains) == ("A", "B", "E")


def test_visible_chains_keep_structure_order(assembly):
    model = ResidueGridModel(residues_per_row=10)
    model.set_data(assembly)
    assert model.set_visible_chains(["E", "B", "X"])
    assert model.visible_chain_ids == ("B", "E")
    assert [row.chain_id for row in model.rows] == ["B", "E"]
    assert not model.set_visible_chains(["B", "E"])


def test_hiding_chain_drops_its_transient_state(grid):
    grid.set_hovered([Residue("B", 2, "S")])
    grid.set_provisional("B", 1, 3)
    grid.set_visible_chains(["A"])
    assert grid.hovered == ()
    assert grid.provisional is None
    assert grid.cell_at(grid.PADDING + 1, grid.rows[-1].cells_y + 1).chain_id == "A"


def test_no_visible_chains_means_empty_layout(grid):
    grid.set_visible_chains([])
    assert grid.rows == []
    assert grid.height == 0
