# sequence_sync/widgets/workspace.py

import logging
from typing import Dict, List, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QAction,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMenu,
    QPushButton,
    QScrollArea,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from features.residue_grid.residue_grid_widget import ResidueGridWidget
from features.residue_grid.sequence_loader import SequenceLoader
from highlighting.highlight_bridge import HighlightBridge
from model.selection_types import Selection, SelectionMode
from repositories.sequence_data_manager import SequenceDataManager, SequenceFetchResult
from settings.config import AppConfig

logger = logging.getLogger(__name__)


class SequenceWorkspaceWidget(QWidget):
    """
    Üst  : yapı id girişi + yükle butonu + zincir seçici + seçim modu
    Orta : scroll area içinde residue grid
    Alt  : seçim / hover özeti + seçimi temizle butonu
    """

    def __init__(
        self,
        config: AppConfig,
        manager: SequenceDataManager,
        parent: Optional[QWidget] = None,
        *,
        bridge: Optional[HighlightBridge] = None,
        on_structure_loaded=None,
    ) -> None:
        super().__init__(parent)
        self._config = config
        self._manager = manager
        self._loader: Optional[SequenceLoader] = None
        self._on_structure_loaded = on_structure_loaded

        # --- Üst bar ---
        self.id_edit = QLineEdit(self)
        self.id_edit.setPlaceholderText("PDB id, e.g. 1CRN")
        self.id_edit.returnPressed.connect(self._on_load_clicked)

        self.load_button = QPushButton("Load", self)
        self.load_button.clicked.connect(self._on_load_clicked)

        self.chain_button = QToolButton(self)
        self.chain_button.setPopupMode(QToolButton.InstantPopup)
        self.chain_menu = QMenu(self.chain_button)
        self.chain_button.setMenu(self.chain_menu)
        self.chain_actions: Dict[str, QAction] = {}

        self.mode_combo = QComboBox(self)
        for mode in SelectionMode:
            self.mode_combo.addItem(mode.value.capitalize(), mode.value)

        top_bar = QHBoxLayout()
        top_bar.setContentsMargins(4, 4, 4, 4)
        top_bar.addWidget(QLabel("Structure:", self))
        top_bar.addWidget(self.id_edit, 1)
        top_bar.addWidget(self.load_button)
        top_bar.addSpacing(12)
        top_bar.addWidget(self.chain_button)
        top_bar.addSpacing(12)
        top_bar.addWidget(QLabel("Mode:", self))
        top_bar.addWidget(self.mode_combo)

        # --- Grid ---
        self.grid = ResidueGridWidget(config, bridge=bridge)
        self.scroll_area = QScrollArea(self)
        self.scroll_area.setWidget(self.grid)
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setAlignment(Qt.AlignLeft | Qt.AlignTop)

        # --- Durum satırı ---
        self.status_label = QLabel(self)
        self.status_label.setTextInteractionFlags(Qt.TextSelectableByMouse)

        self.clear_button = QPushButton("Clear", self)
        self.clear_button.clicked.connect(self.grid.store.clear_selection)

        status_bar = QHBoxLayout()
        status_bar.setContentsMargins(4, 2, 4, 2)
        status_bar.addWidget(self.status_label, 1)
        status_bar.addWidget(self.clear_button)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.addLayout(top_bar)
        main_layout.addWidget(self.scroll_area, 1)
        main_layout.addLayout(status_bar)
        self.setLayout(main_layout)

        index = self.mode_combo.findData(self.grid.store.mode.value)
        self.mode_combo.setCurrentIndex(max(0, index))
        self.mode_combo.currentIndexChanged.connect(self._on_mode_changed)

        self.grid.selectionChanged.connect(self._on_selection_changed)
        self.grid.highlightChanged.connect(self._on_highlight_changed)
        self.grid.visibleChainsChanged.connect(self._on_visible_chains_changed)
        self._on_visible_chains_changed(self.grid.visible_chain_ids)
        self._update_status()

    # ------------------------------------------------------------------
    # Yükleme
    # ------------------------------------------------------------------

    def load_structure(self, structure_id: str) -> None:
        structure_id = structure_id.strip()
        if not structure_id:
            return
        if self._loader is not None and self._loader.isRunning():
            logger.info("Load of %s ignored; another load is running", structure_id)
            return

        self.id_edit.setText(structure_id)
        self.load_button.setEnabled(False)
        self.status_label.setText(f"Loading {structure_id.upper()}...")

        self._loader = SequenceLoader(self._manager, structure_id, parent=self)
        self._loader.loaded.connect(self._on_loaded)
        self._loader.failed.connect(self._on_failed)
        self._loader.finished.connect(lambda: self.load_button.setEnabled(True))
        self._loader.start()

    def _on_load_clicked(self) -> None:
        self.load_structure(self.id_edit.text())

    def _on_loaded(self, result: SequenceFetchResult) -> None:
        if self._on_structure_loaded is not None:
            self._on_structure_loaded(result.data)
        self.grid.set_sequence_data(result.data)
        self._update_status()

    def _on_failed(self, structure_id: str, message: str) -> None:
        logger.error("Could not load %s: %s", structure_id, message)
        self.status_label.setText(message)

    # ------------------------------------------------------------------
    # Zincir seçici
    # ------------------------------------------------------------------

    def _rebuild_chain_menu(self) -> None:
        self.chain_menu.clear()
        self.chain_actions = {}

        data = self.grid.data
        if data is None:
            return

        self.chain_menu.addAction("All", self.grid.show_all_chains)
        self.chain_menu.addAction("None", lambda: self.grid.set_visible_chains([]))
        self.chain_menu.addAction("Unique", self.grid.show_unique_chains)
        self.chain_menu.addSeparator()

        for chain in data.chains:
            text = f"Chain {chain.id}"
            if chain.name:
                text += f" ({chain.name})"
            text += f"  {len(chain)} residues"
            action = self.chain_menu.addAction(text)
            action.setCheckable(True)
            action.toggled.connect(lambda checked, cid=chain.id: self._on_chain_toggled(cid, checked))
            self.chain_actions[chain.id] = action

    def _on_chain_toggled(self, chain_id: str, checked: bool) -> None:
        visible = [c for c in self.grid.visible_chain_ids if c != chain_id]
        if checked:
            visible.append(chain_id)
        self.grid.set_visible_chains(visible)

    def _on_visible_chains_changed(self, visible: List[str]) -> None:
        data = self.grid.data
        chain_ids = data.chain_ids if data is not None else []
        if list(self.chain_actions) != chain_ids:
            self._rebuild_chain_menu()

        for chain_id, action in self.chain_actions.items():
            action.blockSignals(True)
            action.setChecked(chain_id in visible)
            action.blockSignals(False)

        self.chain_button.setText(f"Chains: {len(visible)}/{len(chain_ids)}")
        # Tek zincirli yapılarda seçiciye gerek yok
        self.chain_button.setVisible(len(chain_ids) > 1)
        self._update_status()

    # ------------------------------------------------------------------
    # Seçim
    # ------------------------------------------------------------------

    def _on_mode_changed(self, index: int) -> None:
        mode = self.mode_combo.itemData(index)
        if mode is not None:
            self.grid.store.set_mode(SelectionMode(mode))
            self._update_status()

    def _on_selection_changed(self, selection: Selection) -> None:
        self._update_status()

    def _on_highlight_changed(self, residues) -> None:
        if residues:
            r = residues[0]
            self.status_label.setText(f"{self._selection_summary()}  |  {r.chain_id}:{r.code}{r.position}")
        else:
            self._update_status()

    def _selection_summary(self) -> str:
        data = self.grid.data
        if data is None:
            return "No structure loaded"
        regions = self.grid.store.regions
        if not regions:
            return f"{data.name}: no selection"
        total = sum(r.length for r in regions)
        labels = ", ".join(r.label for r in regions[:5])
        if len(regions) > 5:
            labels += ", ..."
        summary = f"{data.name}: {len(regions)} region(s), {total} residue(s)  [{labels}]"

        visible = set(self.grid.visible_chain_ids)
        hidden = sum(1 for r in regions if r.chain_id not in visible)
        if hidden:
            summary += f"  ({hidden} on hidden chains)"
        return summary

    def _update_status(self) -> None:
        self.status_label.setText(self._selection_summary())
        self.clear_button.setEnabled(bool(self.grid.store.regions))
