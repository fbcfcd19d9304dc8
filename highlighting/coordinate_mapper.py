"""
Sekans uzayı ile renderer residue numaralandırması arasında koordinat çevirisi.

Sekans pozisyonları polimer sekansına 1-tabanlı indekslerdir; bu, renderer'ın
*label* numaralandırmasıdır. Author numaralandırması (yapıyı yükleyenlerin
dosyaya yazdığı) sabit bir offset kadar kaymış ya da tamamen düzensiz
(insertion code, boşluk) olabilir; bu yüzden zincir başına bir offset veya
açık bir ``{position: auth_seq_id}`` eşlemesi verilebilir.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from model.selection_types import Region
from selection.range_merger import ChainRange, merge_positions

from .structure_renderer import ResidueRange, StructureInfo, StructureRenderer


class NumberingScheme(str, Enum):
    AUTH = "auth"
    LABEL = "label"


class CoordinateMapper:
    """Bölge / residue'ları tek bir renderer için :class:`ResidueRange` değerlerine çevirir."""

    def __init__(
        self,
        numbering: NumberingScheme = NumberingScheme.AUTH,
        renderer: Optional[StructureRenderer] = None,
        *,
        auth_offsets: Optional[Mapping[str, int]] = None,
        auth_maps: Optional[Mapping[str, Mapping[int, int]]] = None,
    ):
        self.numbering = NumberingScheme(numbering)
        self._renderer = renderer
        self._auth_offsets: Dict[str, int] = dict(auth_offsets or {})
        self._auth_maps: Dict[str, Dict[int, int]] = {
            chain: dict(mapping) for chain, mapping in (auth_maps or {}).items()
        }

    @property
    def uses_auth(self) -> bool:
        return self.numbering is NumberingScheme.AUTH

    def set_renderer(self, renderer: Optional[StructureRenderer]) -> None:
        self._renderer = renderer

    def set_auth_offset(self, chain_id: str, offset: int) -> None:
        self._auth_offsets[chain_id] = offset
        self._auth_maps.pop(chain_id, None)

    def set_auth_map(self, chain_id: str, mapping: Mapping[int, int]) -> None:
        self._auth_maps[chain_id] = dict(mapping)
        self._auth_offsets.pop(chain_id, None)

    # ------------------------------------------------------------------
    # Renderer sınırı
    # ------------------------------------------------------------------

    def try_get_structure(self) -> Optional[StructureInfo]:
        if self._renderer is None:
            return None
        return self._renderer.try_get_structure()

    # ------------------------------------------------------------------
    # Sequence -> renderer
    # ------------------------------------------------------------------

    def to_renderer_ranges(self, regions: Iterable[Region]) -> List[ResidueRange]:
        return self._translate((r.chain_id, r.start, r.end) for r in regions)

    def residues_to_ranges(self, residues: Iterable) -> List[ResidueRange]:
        """Hover edilen residue'lar (chain_id / position içeren her nesne) önce aralıklara birleştirilir."""
        return self._translate(merge_positions((r.chain_id, r.position) for r in residues))

    def to_renderer_number(self, chain_id: str, position: int) -> Optional[int]:
        if not self.uses_auth:
            return position
        mapping = self._auth_maps.get(chain_id)
        if mapping is not None:
            return mapping.get(position)
        return position + self._auth_offsets.get(chain_id, 0)

    # ------------------------------------------------------------------
    # Renderer -> sequence
    # ------------------------------------------------------------------

    def to_sequence_position(self, chain_id: str, renderer_number: int) -> Optional[int]:
        if not self.uses_auth:
            return renderer_number
        mapping = self._auth_maps.get(chain_id)
        if mapping is not None:
            for position, auth in mapping.items():
                if auth == renderer_number:
                    return position
            return None
        return renderer_number - self._auth_offsets.get(chain_id, 0)

    # ------------------------------------------------------------------
    # Yardımcı fonksiyonlar
    # ------------------------------------------------------------------

    def _translate(self, spans: Iterable[ChainRange]) -> List[ResidueRange]:
        translated: List[ChainRange] = []
        for chain_id, start, end in spans:
            translated.extend(self._translate_span(chain_id, start, end))

        structure = self.try_get_structure()
        if structure is not None:
            # Yeniden yüklemeden sonra kaybolan zincirler adreslenemez
            translated = [s for s in translated if s[0] in structure.chain_ids]

        return [
            ResidueRange(chain=chain, start=start, end=end, auth=self.uses_auth)
            for chain, start, end in translated
        ]

    def _translate_span(self, chain_id: str, start: int, end: int) -> List[ChainRange]:
        if not self.uses_auth:
            return [(chain_id, start, end)]

        mapping = self._auth_maps.get(chain_id)
        if mapping is None:
            offset = self._auth_offsets.get(chain_id, 0)
            return [(chain_id, start + offset, end + offset)]

        # Açık eşleme: kesintisiz bir label aralığı birden fazla auth aralığına bölünebilir
        numbers: List[Tuple[str, int]] = [
            (chain_id, mapping[pos]) for pos in range(start, end + 1) if pos in mapping
        ]
        return merge_positions(numbers)
