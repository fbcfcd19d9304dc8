# sequence_sync/features/residue_grid/residue_grid_model.py

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from model.sequence_data_model import Chain, Residue, SequenceData

# Bu sayıdan fazla zincir varsa varsayılan olarak yalnızca ilk zincir gösterilir
DEFAULT_VISIBLE_CHAIN_LIMIT = 3


def default_visible_chains(chains: Sequence[Chain], limit: int = DEFAULT_VISIBLE_CHAIN_LIMIT) -> Tuple[str, ...]:
    """
    Yeni yüklenen yapı için varsayılan görünür zincirler:
    zincir sayısı limit'i aşıyorsa sadece ilk zincir, aksi halde ilk `limit` zincir.
    """
    if len(chains) > limit:
        return (chains[0].id,)
    return tuple(chain.id for chain in chains[:limit])


def unique_chain_ids(chains: Iterable[Chain]) -> Tuple[str, ...]:
    """
    Aynı sekansa sahip zincirlerden yalnızca ilkini bırakır (homo-oligomerler için).
    """
    seen = set()
    ids: List[str] = []
    for chain in chains:
        if chain.sequence in seen:
            continue
        seen.add(chain.sequence)
        ids.append(chain.id)
    return tuple(ids)


@dataclass
class GridRow:
    """
    Çizilen tek bir residue hücre satırı.
    y değerleri widget pikselidir; pozisyon etiketleri (varsa) cells_y'nin üstündedir.
    """
    chain_id: str
    residues: Tuple[Residue, ...]
    labels_y: Optional[float]
    cells_y: float


@dataclass
class ChainHeader:
    chain_id: str
    text: str
    y: float


class ResidueGridModel:
    """
    Residue grid Model katmanı.

    Sorumluluklar:
    - Grid'de gösterilen sekans verisini ve görünür zincirleri tutmak
    - Her görünür zinciri `residues_per_row` hücrelik satırlara bölmek
    - Controller için piksel <-> residue dönüşümü (cell_at / cell_rect)
    - Hover edilen residue'ları ve sürüklenen (provisional) bölgeyi
      view'ın çizebilmesi için saklamak; kalıcı seçim burada değil,
      SelectionStore'da durur
    """

    PADDING = 8.0
    HEADER_HEIGHT = 22.0
    LABEL_HEIGHT = 12.0
    ROW_SPACING = 6.0
    CHAIN_SPACING = 16.0

    def __init__(
        self,
        *,
        residues_per_row: int = 40,
        cell_width: float = 24.0,
        cell_height: float = 24.0,
        cell_gap: float = 1.0,
        show_positions: bool = True,
        show_chain_labels: bool = True,
    ) -> None:
        self.residues_per_row = max(1, int(residues_per_row))
        self.cell_width = float(cell_width)
        self.cell_height = float(cell_height)
        self.cell_gap = float(cell_gap)
        self.show_positions = show_positions
        self.show_chain_labels = show_chain_labels

        self.data: Optional[SequenceData] = None
        self.visible_chain_ids: Tuple[str, ...] = ()
        self.rows: List[GridRow] = []
        self.headers: List[ChainHeader] = []
        self.width: float = 0.0
        self.height: float = 0.0

        self.hovered: Tuple[Residue, ...] = ()
        self.provisional: Optional[Tuple[str, int, int]] = None

    # ------------------------------------------------------------------
    # Veri
    # ------------------------------------------------------------------

    def set_data(self, data: Optional[SequenceData]) -> None:
        self.data = data
        self.visible_chain_ids = default_visible_chains(data.chains) if data is not None else ()
        self.hovered = ()
        self.provisional = None
        self.relayout()

    def clear(self) -> None:
        self.set_data(None)

    def set_residues_per_row(self, count: int) -> None:
        count = max(1, int(count))
        if count != self.residues_per_row:
            self.residues_per_row = count
            self.relayout()

    # ------------------------------------------------------------------
    # Görünür zincirler
    # ------------------------------------------------------------------

    def set_visible_chains(self, chain_ids: Iterable[str]) -> bool:
        """
        Gösterilecek zincirleri ayarlar. Bilinmeyen id'ler atlanır; sıra her zaman
        yapıdaki zincir sırasıdır. Değişiklik olduysa True döner.
        """
        if self.data is None:
            return False
        wanted = set(chain_ids)
        visible = tuple(c.id for c in self.data.chains if c.id in wanted)
        if visible == self.visible_chain_ids:
            return False

        self.visible_chain_ids = visible
        # Gizlenen zincirlerdeki hover/sürükleme durumu geçersiz
        self.hovered = tuple(r for r in self.hovered if r.chain_id in wanted)
        if self.provisional is not None and self.provisional[0] not in wanted:
            self.provisional = None
        self.relayout()
        return True

    @property
    def visible_chains(self) -> List[Chain]:
        if self.data is None:
            return []
        return [c for c in self.data.chains if c.id in self.visible_chain_ids]

    def is_chain_visible(self, chain_id: str) -> bool:
        return chain_id in self.visible_chain_ids

    # ------------------------------------------------------------------
    # Yerleşim
    # ------------------------------------------------------------------

    @property
    def pitch(self) -> float:
        return self.cell_width + self.cell_gap

    def relayout(self) -> None:
        self.rows = []
        self.headers = []
        chains = self.visible_chains
        if not chains:
            self.width = 0.0
            self.height = 0.0
            return

        y = self.PADDING
        widest = 0
        for chain in chains:
            if self.show_chain_labels:
                text = f"Chain {chain.id}"
                if chain.name:
                    text += f" ({chain.name})"
                text += f"  {len(chain)} residues"
                self.headers.append(ChainHeader(chain.id, text, y))
                y += self.HEADER_HEIGHT

            residues = chain.residues
            for i in range(0, len(residues), self.residues_per_row):
                row = residues[i:i + self.residues_per_row]
                widest = max(widest, len(row))
                labels_y = None
                if self.show_positions:
                    labels_y = y
                    y += self.LABEL_HEIGHT
                self.rows.append(GridRow(chain.id, row, labels_y, y))
                y += self.cell_height + self.ROW_SPACING

            y += self.CHAIN_SPACING

        self.width = self.PADDING * 2 + widest * self.pitch
        self.height = y + self.PADDING

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------

    def cell_at(self, x: float, y: float) -> Optional[Residue]:
        """
        Noktayı içeren hücrenin residue'su, yoksa None.
        Hücrenin sağındaki boşluk o hücreye sayılır.
        """
        if x < self.PADDING:
            return None
        col = int((x - self.PADDING) // self.pitch)
        for row in self.rows:
            if row.cells_y <= y < row.cells_y + self.cell_height:
                if 0 <= col < len(row.residues):
                    return row.residues[col]
                return None
        return None

    def cell_rect(self, row: GridRow, col: int) -> Tuple[float, float, float, float]:
        return (self.PADDING + col * self.pitch, row.cells_y, self.cell_width, self.cell_height)

    # ------------------------------------------------------------------
    # Geçici durum
    # ------------------------------------------------------------------

    def set_hovered(self, residues) -> bool:
        hovered = tuple(residues)
        if hovered == self.hovered:
            return False
        self.hovered = hovered
        return True

    def is_hovered(self, residue: Residue) -> bool:
        return residue in self.hovered

    def set_provisional(self, chain_id: Optional[str] = None, start: int = 0, end: int = 0) -> None:
        self.provisional = None if chain_id is None else (chain_id, start, end)

    def is_provisional(self, residue: Residue) -> bool:
        if self.provisional is None:
            return False
        chain_id, start, end = self.provisional
        return residue.chain_id == chain_id and start <= residue.position <= end
