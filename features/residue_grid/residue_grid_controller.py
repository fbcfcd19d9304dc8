# sequence_sync/features/residue_grid/residue_grid_controller.py

import logging
from typing import Callable, List, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import QMenu

from highlighting.highlight_bridge import HighlightBridge
from model.selection_types import Region, RegionAction
from model.sequence_data_model import Residue
from selection.drag_selection_controller import CellRef, DragSelectionController
from selection.selection_store import SelectionStore

from .residue_grid_model import ResidueGridModel
from .residue_grid_view import ResidueGridView

logger = logging.getLogger(__name__)

_ADDITIVE_MODIFIERS = Qt.ShiftModifier | Qt.ControlModifier

_MENU_ACTIONS = (
    (RegionAction.HIDE, "Hide"),
    (RegionAction.ISOLATE, "Isolate"),
    (RegionAction.HIGHLIGHT, "Highlight"),
    (RegionAction.COPY, "Copy sequence"),
)


class ResidueGridController:
    """
    Residue grid'in Controller katmanı.

    Sorumluluklar:
    - Qt pointer olaylarını DragSelectionController çağrılarına çevirmek
    - Hover edilen residue'yu model'e (çizim) ve bridge'e (3-D) iletmek
    - Klavye kısayolları (Escape sürüklemeyi iptal eder, Ctrl+C seçimi kopyalar)
    - Bölge context menüsü (hide / isolate / highlight / copy)
    """

    def __init__(
        self,
        model: ResidueGridModel,
        view: ResidueGridView,
        store: SelectionStore,
        *,
        bridge: Optional[HighlightBridge] = None,
        on_highlight_changed: Optional[Callable[[List[Residue]], None]] = None,
        on_region_action: Optional[Callable[[Optional[Region], RegionAction], None]] = None,
    ) -> None:
        self._model = model
        self._view = view
        self._store = store
        self._bridge = bridge
        self._on_highlight_changed = on_highlight_changed
        self._on_region_action = on_region_action

        self.drag = DragSelectionController(
            store,
            on_provisional_change=self._on_provisional_change,
        )

    # ------------------------------------------------------------------
    # Hover
    # ------------------------------------------------------------------

    def set_hover(self, residues: List[Residue]) -> None:
        if not self._model.set_hovered(residues):
            return
        self._view.update()
        if self._bridge is not None:
            self._bridge.set_hover(residues)
        if self._on_highlight_changed is not None:
            self._on_highlight_changed(list(residues))

    # ------------------------------------------------------------------
    # Mouse
    # ------------------------------------------------------------------

    def handle_mouse_press(self, event) -> bool:
        if event.button() != Qt.LeftButton:
            return False

        residue = self._model.cell_at(event.pos().x(), event.pos().y())
        additive = bool(event.modifiers() & _ADDITIVE_MODIFIERS)

        if residue is None:
            # Boş alana tıklamak seçimi temizler; kullanıcı seçimi genişletiyorsa temizlemez
            if not additive:
                self.drag.cancel()
                self._store.clear_selection()
            return True

        self.drag.pointer_down(CellRef(residue.chain_id, residue.position), additive=additive)
        self._view.update()
        return True

    def handle_mouse_move(self, event) -> bool:
        residue = self._model.cell_at(event.pos().x(), event.pos().y())

        if self.drag.is_dragging:
            if residue is not None:
                self.drag.pointer_enter(CellRef(residue.chain_id, residue.position))
            self.set_hover([residue] if residue is not None else [])
            return True

        self.set_hover([residue] if residue is not None else [])
        return False

    def handle_mouse_release(self, event) -> bool:
        if event.button() != Qt.LeftButton or not self.drag.is_dragging:
            return False

        # Bırakırken basılı tutulan modifier da sürüklemeyi additive yapar
        additive = True if event.modifiers() & _ADDITIVE_MODIFIERS else None
        self.drag.pointer_up(additive=additive)
        self._view.update()
        return True

    def handle_leave(self, event) -> bool:
        self.drag.pointer_leave(outside_surface=True)
        self.set_hover([])
        return True

    # ------------------------------------------------------------------
    # Klavye
    # ------------------------------------------------------------------

    def handle_key_press(self, event) -> bool:
        if event.key() == Qt.Key_Escape and self.drag.is_dragging:
            self.drag.cancel()
            self._view.update()
            return True

        if event.matches(QKeySequence.Copy):
            if self._store.regions:
                self.request_action(None, RegionAction.COPY)
            return True

        return False

    # ------------------------------------------------------------------
    # Bölge aksiyonları
    # ------------------------------------------------------------------

    def handle_context_menu(self, event) -> bool:
        residue = self._model.cell_at(event.pos().x(), event.pos().y())
        region = self._store.region_containing(residue) if residue is not None else None
        if region is None and not self._store.regions:
            return False

        menu = QMenu(self._view)
        title = region.label if region is not None else f"{len(self._store.regions)} region(s)"
        menu.addSection(title)
        actions = {}
        for action, text in _MENU_ACTIONS:
            actions[menu.addAction(text)] = action

        chosen = menu.exec_(event.globalPos())
        if chosen is not None and chosen in actions:
            self.request_action(region, actions[chosen])
        return True

    def request_action(self, region: Optional[Region], action: RegionAction) -> None:
        """`region` None ise aksiyon tüm seçime uygulanır."""
        logger.debug("Region action %s on %s", action.value, region.label if region else "selection")
        if self._on_region_action is not None:
            self._on_region_action(region, action)

    # ------------------------------------------------------------------
    # Yardımcı fonksiyonlar
    # ------------------------------------------------------------------

    def _on_provisional_change(self, region: Optional[Region]) -> None:
        if region is None:
            self._model.set_provisional()
        else:
            self._model.set_provisional(region.chain_id, region.start, region.end)
        self._view.update()
