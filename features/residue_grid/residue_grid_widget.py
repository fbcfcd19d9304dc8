# sequence_sync/features/residue_grid/residue_grid_widget.py

import logging
from typing import Iterable, List, Optional

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import QApplication

from highlighting.highlight_bridge import HighlightBridge
from model.selection_types import Region, RegionAction, Selection
from model.sequence_data_model import SequenceData
from selection.selection_store import SelectionStore
from settings.color_palette import ColorPalette
from settings.config import AppConfig

from .residue_grid_controller import ResidueGridController
from .residue_grid_model import ResidueGridModel, unique_chain_ids
from .residue_grid_view import ResidueGridView

logger = logging.getLogger(__name__)


def clipboard_text(region: Optional[Region], regions: Iterable[Region]) -> str:
    """
    Kopyala aksiyonunun panoya koyduğu metin: tek bölge için çıplak sekans,
    aksi halde her bölge '>label' / sekans bloğu olarak.
    """
    if region is not None:
        return region.sequence
    return "\n".join(f">{r.label}\n{r.sequence}" for r in regions)


class ResidueGridWidget(ResidueGridView):
    """
    Residue grid'i tek bir widget olarak sunar; içeride
    Model - View - Controller şeklinde organize edilmiştir.

    Her widget, dışarıdan verilmedikçe kendi SelectionStore'unu oluşturur;
    HighlightBridge (varsa) 3-D seçim kanalı için bu store'u takip eder ve
    hover güncellemelerini controller'dan alır.
    """

    selectionChanged = pyqtSignal(object)         # Selection
    highlightChanged = pyqtSignal(list)           # List[Residue]
    regionActionRequested = pyqtSignal(object, str)  # Optional[Region], RegionAction value
    visibleChainsChanged = pyqtSignal(list)       # List[str]

    def __init__(
        self,
        config: AppConfig,
        parent=None,
        *,
        store: Optional[SelectionStore] = None,
        bridge: Optional[HighlightBridge] = None,
        palette: Optional[ColorPalette] = None,
    ) -> None:
        grid = config.grid
        model = ResidueGridModel(
            residues_per_row=grid.residues_per_row,
            cell_width=grid.cell_width,
            cell_height=grid.cell_height,
            cell_gap=grid.cell_gap,
            show_positions=grid.show_positions,
            show_chain_labels=grid.show_chain_labels,
        )
        if store is None:
            store = SelectionStore(
                mode=config.selection.mode,
                constraints=config.selection.to_constraints(),
            )

        super().__init__(
            model,
            store,
            palette or ColorPalette(config),
            parent,
            numbering_interval=grid.numbering_interval,
        )

        self._bridge = bridge
        self._data: Optional[SequenceData] = None

        self._controller = ResidueGridController(
            model,
            self,
            store,
            bridge=bridge,
            on_highlight_changed=self.highlightChanged.emit,
            on_region_action=self._handle_region_action,
        )
        self.set_controller(self._controller)

        self._subscription = store.subscribe(self._on_store_changed)
        if bridge is not None:
            bridge.attach(store)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def store(self) -> SelectionStore:
        return self._store

    @property
    def bridge(self) -> Optional[HighlightBridge]:
        return self._bridge

    @property
    def data(self) -> Optional[SequenceData]:
        return self._data

    @property
    def drag_controller(self):
        return self._controller.drag

    @property
    def visible_chain_ids(self) -> List[str]:
        return list(self._model.visible_chain_ids)

    def set_sequence_data(self, data: Optional[SequenceData]) -> None:
        """
        Yeni bir yapı gösterir. Önceki seçim artık var olmayan residue'lara
        ait olduğu için temizlenir. Görünür zincirler varsayılana döner.
        """
        self._controller.drag.cancel()
        self._controller.set_hover([])
        self._store.clear_selection()

        self._data = data
        lookup = data.sequence_for if data is not None else None
        self._store.set_sequence_lookup(lookup)
        self._controller.drag.set_sequence_lookup(lookup)

        self._model.set_data(data)
        self.refresh_geometry()
        if data is not None:
            logger.info("Grid showing %s: %s", data.id, data.stats())
        self.visibleChainsChanged.emit(self.visible_chain_ids)

    def clear(self) -> None:
        self.set_sequence_data(None)

    def set_visible_chains(self, chain_ids: Iterable[str]) -> None:
        """
        Grid'de çizilecek zincirleri seçer. Sadece görünümü etkiler:
        gizlenen zincirlerdeki bölgeler SelectionStore'da kalır.
        """
        chain_ids = list(chain_ids)
        if self._controller.drag.is_dragging:
            self._controller.drag.cancel()
        self._controller.set_hover([r for r in self._model.hovered if r.chain_id in chain_ids])

        if self._model.set_visible_chains(chain_ids):
            self.refresh_geometry()
            self.visibleChainsChanged.emit(self.visible_chain_ids)

    def show_all_chains(self) -> None:
        self.set_visible_chains(self._data.chain_ids if self._data is not None else [])

    def show_unique_chains(self) -> None:
        self.set_visible_chains(unique_chain_ids(self._data.chains) if self._data is not None else [])

    def request_action(self, region: Optional[Region], action: RegionAction) -> None:
        self._controller.request_action(region, action)

    def detach(self) -> None:
        """Store'u takip etmeyi bırakır; widget atılırken kullanılır."""
        self._subscription.unsubscribe()
        if self._bridge is not None:
            self._bridge.detach()

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def _on_store_changed(self, selection: Selection) -> None:
        self.update()
        self.selectionChanged.emit(selection)

    def _handle_region_action(self, region: Optional[Region], action: RegionAction) -> None:
        if action is RegionAction.COPY:
            text = clipboard_text(region, self._store.regions)
            QApplication.clipboard().setText(text)
        elif action is RegionAction.HIGHLIGHT and self._bridge is not None:
            targets = [region] if region is not None else list(self._store.regions)
            self._bridge.focus_regions(targets)

        # Hide / isolate işlemlerini sinyal üzerinden host uygular
        self.regionActionRequested.emit(region, action.value)
