"""
Harici 3-D yapı renderer'ı ile sınır.

Renderer host uygulamaya aittir; seçim katmanı onunla sadece
:class:`StructureRenderer` üzerinden konuşur. Locus'lar, renderer'ın residue
aralıklarından ürettiği opak handle'lardır. :class:`HeadlessRenderer`, 3-D
motor bağlı değilken kullanılan süreç içi implementasyondur: güncel
highlight / selection locus'larını tutar ve her çağrıyı loglar.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class RendererUnavailableError(RuntimeError):
    """Yüklü yapı yoksa veya motor hazır değilse renderer tarafından fırlatılır."""


@dataclass(frozen=True)
class ResidueRange:
    """Renderer uzayında residue aralığı (zincir + residue numaraları, uçlar dahil)."""
    chain: str
    start: int
    end: int
    auth: bool = True


@dataclass(frozen=True)
class StructureInfo:
    """Renderer'da şu an yüklü olan yapı."""
    structure_id: str
    chain_ids: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Locus:
    """Opak renderer handle'ı; headless renderer üretildiği aralıkları saklar."""
    ranges: Tuple[ResidueRange, ...]
    structure_id: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.ranges


class StructureRenderer(ABC):
    """Highlight bridge ve coordinate mapper'ın kullandığı sözleşme."""

    @abstractmethod
    def try_get_structure(self) -> Optional[StructureInfo]:
        """Yüklü yapıyı döndürür; hiçbir şey yüklü değilse None."""

    @abstractmethod
    def build_locus(self, ranges: Sequence[ResidueRange]) -> Optional[Locus]:
        """Aralıklar için locus üretir; eşleşen yapı verisi yoksa None."""

    @abstractmethod
    def highlight_only(self, locus: Locus) -> None:
        """Geçici highlight'ı locus ile değiştirir."""

    @abstractmethod
    def select_only(self, locus: Locus) -> None:
        """Kalıcı seçimi temizler, ardından locus'u seçer."""

    @abstractmethod
    def clear_highlights(self) -> None:
        """Geçici highlight'ı kaldırır."""

    @abstractmethod
    def clear_selections(self) -> None:
        """Kalıcı seçimi kaldırır."""

    @abstractmethod
    def focus(self, locus: Locus) -> None:
        """Kamerayı locus'a taşır."""


class HeadlessRenderer(StructureRenderer):
    """3-D görünümü olmayan renderer; durum inceleme ve loglama için saklanır."""

    def __init__(self) -> None:
        self._structure: Optional[StructureInfo] = None
        self.highlighted: Optional[Locus] = None
        self.selected: Optional[Locus] = None
        self.focused: Optional[Locus] = None

    def load_structure(self, structure_id: str, chain_ids: Iterable[str]) -> None:
        self._structure = StructureInfo(structure_id=structure_id, chain_ids=frozenset(chain_ids))
        self.highlighted = None
        self.selected = None
        self.focused = None
        logger.info("Headless renderer loaded %s (%d chains)", structure_id, len(self._structure.chain_ids))

    def unload_structure(self) -> None:
        self._structure = None
        self.highlighted = None
        self.selected = None
        self.focused = None

    def try_get_structure(self) -> Optional[StructureInfo]:
        return self._structure

    def build_locus(self, ranges: Sequence[ResidueRange]) -> Optional[Locus]:
        structure = self._structure
        if structure is None or not ranges:
            return None
        matching: List[ResidueRange] = [r for r in ranges if r.chain in structure.chain_ids]
        if not matching:
            return None
        return Locus(ranges=tuple(matching), structure_id=structure.structure_id)

    def highlight_only(self, locus: Locus) -> None:
        self._require_structure()
        self.highlighted = locus
        logger.debug("highlight_only %s", _describe(locus))

    def select_only(self, locus: Locus) -> None:
        self._require_structure()
        self.selected = locus
        logger.debug("select_only %s", _describe(locus))

    def clear_highlights(self) -> None:
        self.highlighted = None
        logger.debug("clear_highlights")

    def clear_selections(self) -> None:
        self.selected = None
        logger.debug("clear_selections")

    def focus(self, locus: Locus) -> None:
        self._require_structure()
        self.focused = locus
        logger.debug("focus %s", _describe(locus))

    def _require_structure(self) -> None:
        if self._structure is None:
            raise RendererUnavailableError("No structure loaded")


def _describe(locus: Locus) -> str:
    return ", ".join(f"{r.chain}:{r.start}-{r.end}" for r in locus.ranges)
