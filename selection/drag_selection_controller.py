# sequence_sync/selection/drag_selection_controller.py

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from model.selection_types import Region, SelectionMode

from .selection_store import SelectionStore, SequenceLookup

logger = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class CellRef:
    """Pointer altındaki residue hücresi: chain id + 1-tabanlı pozisyon."""
    chain_id: str
    position: int


class DragSelectionController:
    """
    Residue grid üzerindeki pointer olaylarını kalıcı bölgelere çevirir.

    Durum makinesi:
        IDLE --down--> DRAGGING --up / leave(outside)--> COMMITTING --> IDLE
                               \\--cancel--> CANCELLED --> IDLE

    - single modu: pointer-down tek residue'lık bölgeyi hemen commit eder, sürükleme yok
    - range / multiple: pointer-down anchor'ı kaydeder; aynı zincirdeki
      pointer-enter provisional bölgeyi uzatır; diğer zincirler yok sayılır
    - pointer-up commit eder: additive ise store.add_region, değilse
      store.replace_selection([provisional])
    - sürüklerken grid dışına çıkmak, bilinen son hücrede örtük bir pointer-up'tır
    """

    def __init__(
        self,
        store: SelectionStore,
        *,
        sequence_lookup: Optional[SequenceLookup] = None,
        on_provisional_change: Optional[Callable[[Optional[Region]], None]] = None,
    ) -> None:
        self._store = store
        self._sequence_lookup = sequence_lookup
        self._on_provisional_change = on_provisional_change

        self.state: DragState = DragState.IDLE
        self._anchor: Optional[CellRef] = None
        self._last_cell: Optional[CellRef] = None
        self._additive: bool = False
        self._provisional: Optional[Region] = None

    # ------------------------------------------------------------------
    # Okuma
    # ------------------------------------------------------------------

    @property
    def provisional_region(self) -> Optional[Region]:
        return self._provisional

    @property
    def is_dragging(self) -> bool:
        return self.state is DragState.DRAGGING

    def set_sequence_lookup(self, lookup: Optional[SequenceLookup]) -> None:
        self._sequence_lookup = lookup

    # ------------------------------------------------------------------
    # Pointer olayları
    # ------------------------------------------------------------------

    def pointer_down(self, cell: CellRef, additive: bool = False) -> bool:
        """
        Olay tüketildiyse True döner. single modunda tek residue'lık
        bölge hemen commit edilir.
        """
        if self.state is DragState.DRAGGING:
            # Kaçırılmış pointer-up (ör. pencere dışında bırakıldı): yenisine
            # başlamadan önce eski sürüklemeyi commit et
            self.pointer_up()

        if self._store.mode is SelectionMode.SINGLE:
            region = self._build_region(cell.chain_id, cell.position, cell.position)
            committed = self._store.add_region(region)
            logger.debug("Single-mode click on %s:%d committed=%s", cell.chain_id, cell.position, committed)
            return True

        self._anchor = cell
        self._last_cell = cell
        self._additive = additive
        self.state = DragState.DRAGGING
        self._set_provisional(self._build_region(cell.chain_id, cell.position, cell.position))
        return True

    def pointer_enter(self, cell: CellRef) -> bool:
        if self.state is not DragState.DRAGGING or self._anchor is None:
            return False

        # Sürükleme tek zincirle sınırlı
        if cell.chain_id != self._anchor.chain_id:
            return False

        if cell == self._last_cell:
            return False

        self._last_cell = cell
        start = min(self._anchor.position, cell.position)
        end = max(self._anchor.position, cell.position)
        self._set_provisional(self._build_region(cell.chain_id, start, end))
        return True

    def pointer_up(self, additive: Optional[bool] = None) -> bool:
        """
        Provisional bölgeyi commit eder. `additive`, pointer-down anında
        kaydedilen bayrağı ezer (bırakırken basılı tutulan modifier).
        Store'un kararını döndürür; sürükleme yoksa False.
        """
        if self.state is not DragState.DRAGGING:
            return False

        self.state = DragState.COMMITTING
        region = self._provisional
        use_additive = self._additive if additive is None else additive

        committed = False
        if region is not None:
            if use_additive:
                committed = self._store.add_region(region)
            else:
                committed = self._store.replace_selection([region])
            if not committed:
                logger.debug("Drag selection %s rejected by store", region.label)

        self._reset()
        return committed

    def pointer_leave(self, outside_surface: bool = True) -> bool:
        """
        Sürükleme sırasında yüzeyden çıkmak provisional seçimi atmaz,
        bilinen son hücrede commit eder.
        """
        if self.state is not DragState.DRAGGING or not outside_surface:
            return False
        return self.pointer_up()

    def cancel(self) -> None:
        if self.state is not DragState.DRAGGING:
            return
        self.state = DragState.CANCELLED
        self._reset()

    # ------------------------------------------------------------------
    # Yardımcı fonksiyonlar
    # ------------------------------------------------------------------

    def _build_region(self, chain_id: str, start: int, end: int) -> Region:
        sequence = ""
        if self._sequence_lookup is not None:
            sequence = self._sequence_lookup(chain_id, start, end)
        return Region.create(chain_id, start, end, sequence)

    def _set_provisional(self, region: Optional[Region]) -> None:
        self._provisional = region
        if self._on_provisional_change is not None:
            self._on_provisional_change(region)

    def _reset(self) -> None:
        self._anchor = None
        self._last_cell = None
        self._additive = False
        self._set_provisional(None)
        self.state = DragState.IDLE
