import pytest

from features.residue_grid.sequence_loader import SequenceLoader
from highlighting.highlight_bridge import HighlightBridge
from model.selection_types import Region, SelectionMode
from repositories.file_based_repository import FileBasedRepository
from repositories.sequence_data_manager import SequenceDataManager
from settings.config import AppConfig
from widgets.workspace import SequenceWorkspaceWidget


@pytest.fixture
def manager(tmp_path):
    path = tmp_path / "seqs.fasta"
    path.write_text(
        ">1CRN_A\nTTCCPSIVARSNFNVCRLPGTPEAICATYTGCIIIPGATCPGDYAN\n"
        ">1HHO_A\nVLSPADK\n>1HHO_B\nVHLTPEE\n>1HHO_C\nVLSPADK\n>1HHO_D\nVHLTPEE\n>1HHO_E\nMKV\n"
    )
    return SequenceDataManager(FileBasedRepository(path))


def test_loader_reports_result(qtbot, manager):
    loader = SequenceLoader(manager, "1crn")
    with qtbot.waitSignal(loader.loaded, timeout=5000) as blocker:
        loader.start()
    assert blocker.args[0].data.chain_ids == ["A"]
    loader.wait()


def test_loader_reports_failure(qtbot, manager):
    loader = SequenceLoader(manager, "9XYZ")
    with qtbot.waitSignal(loader.failed, timeout=5000) as blocker:
        loader.start()
    assert blocker.args[0] == "9XYZ"
    assert "9XYZ" in blocker.args[1]
    loader.wait()


def test_workspace_loads_structure_into_grid(qtbot, tmp_path, manager, renderer, scheduler):
    config = AppConfig(user_config_path=tmp_path / "config.json")
    loaded = []
    bridge = HighlightBridge(renderer, scheduler=scheduler)
    workspace = SequenceWorkspaceWidget(config, manager, bridge=bridge, on_structure_loaded=loaded.append)
    qtbot.addWidget(workspace)

    workspace.load_structure("1crn")
    qtbot.waitUntil(lambda: workspace.grid.data is not None, timeout=5000)

    assert loaded[0].id == "1CRN"
    assert "no selection" in workspace.status_label.text()
    qtbot.waitUntil(lambda: workspace.load_button.isEnabled(), timeout=5000)


def test_mode_picker_switches_store_mode(qtbot, tmp_path, manager):
    config = AppConfig(user_config_path=tmp_path / "config.json")
    workspace = SequenceWorkspaceWidget(config, manager)
    qtbot.addWidget(workspace)

    workspace.mode_combo.setCurrentIndex(workspace.mode_combo.findData(SelectionMode.MULTIPLE.value))
    assert workspace.grid.store.mode is SelectionMode.MULTIPLE


def load(qtbot, workspace, structure_id):
    workspace.load_structure(structure_id)
    qtbot.waitUntil(lambda: workspace.grid.data is not None and workspace.grid.data.id == structure_id.upper(), timeout=5000)
    qtbot.waitUntil(lambda: workspace.load_button.isEnabled(), timeout=5000)


def test_chain_picker_defaults_to_first_chain_of_large_assembly(qtbot, tmp_path, manager):
    workspace = SequenceWorkspaceWidget(AppConfig(user_config_path=tmp_path / "config.json"), manager)
    qtbot.addWidget(workspace)
    load(qtbot, workspace, "1hho")

    assert workspace.grid.visible_chain_ids == ["A"]
    assert workspace.chain_button.text() == "Chains: 1/5"
    assert list(workspace.chain_actions) == ["A", "B", "C", "D", "E"]
    assert [a.isChecked() for a in workspace.chain_actions.values()] == [True, False, False, False, False]

    workspace.chain_actions["C"].setChecked(True)
    assert workspace.grid.visible_chain_ids == ["A", "C"]
    workspace.chain_actions["A"].setChecked(False)
    assert workspace.grid.visible_chain_ids == ["C"]


def test_chain_picker_unique_drops_duplicate_sequences(qtbot, tmp_path, manager):
    workspace = SequenceWorkspaceWidget(AppConfig(user_config_path=tmp_path / "config.json"), manager)
    qtbot.addWidget(workspace)
    load(qtbot, workspace, "1hho")

    quick = {a.text(): a for a in workspace.chain_menu.actions() if a.text()}
    quick["Unique"].trigger()
    assert workspace.grid.visible_chain_ids == ["A", "B", "E"]
    assert workspace.chain_button.text() == "Chains: 3/5"
    assert workspace.chain_actions["E"].isChecked()
    assert not workspace.chain_actions["C"].isChecked()

    quick["None"].trigger()
    assert workspace.grid.visible_chain_ids == []
    quick["All"].trigger()
    assert workspace.grid.visible_chain_ids == ["A", "B", "C", "D", "E"]


def test_clear_button_clears_selection(qtbot, tmp_path, manager):
    workspace = SequenceWorkspaceWidget(AppConfig(user_config_path=tmp_path / "config.json"), manager)
    qtbot.addWidget(workspace)
    load(qtbot, workspace, "1crn")
    assert not workspace.clear_button.isEnabled()

    workspace.grid.store.add_region(Region.create("A", 1, 3, "TTC"))
    assert workspace.clear_button.isEnabled()
    assert "1 region(s)" in workspace.status_label.text()

    workspace.clear_button.click()
    assert workspace.grid.store.regions == ()
    assert not workspace.clear_button.isEnabled()
    assert "no selection" in workspace.status_label.text()
