# sequence_sync/selection/selection_store.py

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from model.selection_types import Constraints, Region, Selection, SelectionMode

from .range_merger import merge_ranges

logger = logging.getLogger(__name__)

SelectionListener = Callable[[Selection], None]
SequenceLookup = Callable[[str, int, int], str]


class Subscription:
    """
    SelectionStore.subscribe() tarafından döndürülen handle.
    unsubscribe() birden fazla kez çağrılabilir.
    """

    def __init__(self, listeners: List[SelectionListener], listener: SelectionListener) -> None:
        self._listeners = listeners
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        try:
            self._listeners.remove(self._listener)
        except ValueError:
            pass


class SelectionStore:
    """
    Tek bir sekans görünümü için asıl (authoritative) seçim durumu.

    Sorumluluklar:
    - Bölge listesini, seçim modunu ve kısıtları tutmak
    - Her değişikliği uygulamadan önce doğrulamak:
        (a) yapı: chain id dolu, start >= 1, end >= start
        (b) kısıtlar: allowed_chains, max_range_size
        (c) kardinalite: *sonuçtaki* seçim üzerinde max_selections
    - Mod semantiğini uygulamak (single / range / multiple)
    - Her etkili değişiklikten sonra abonelere haber vermek

    Doğrulamadan geçemeyen değişiklik False döner ve durumu değiştirmez;
    hiçbir şey kısmen uygulanmaz, exception da fırlatılmaz.
    """

    def __init__(
        self,
        mode: SelectionMode = SelectionMode.RANGE,
        constraints: Optional[Constraints] = None,
        *,
        sequence_lookup: Optional[SequenceLookup] = None,
    ) -> None:
        self._mode: SelectionMode = SelectionMode(mode)
        self._constraints: Constraints = constraints or Constraints()
        self._regions: Tuple[Region, ...] = ()

        # Birleştirilen bölgelerin Region.sequence alanını doldurmak için
        self._sequence_lookup = sequence_lookup

        self._listeners: List[SelectionListener] = []

    # ------------------------------------------------------------------
    # Okuma
    # ------------------------------------------------------------------

    @property
    def mode(self) -> SelectionMode:
        return self._mode

    @property
    def constraints(self) -> Constraints:
        return self._constraints

    @property
    def regions(self) -> Tuple[Region, ...]:
        return self._regions

    @property
    def selection(self) -> Selection:
        return Selection(regions=self._regions, mode=self._mode, constraints=self._constraints)

    def set_sequence_lookup(self, lookup: Optional[SequenceLookup]) -> None:
        self._sequence_lookup = lookup

    def is_residue_selected(self, residue) -> bool:
        return self.region_containing(residue) is not None

    def region_containing(self, residue) -> Optional[Region]:
        """
        Residue'yu kapsayan bölgeyi döndürür, yoksa None.
        chain_id / position attribute'u olan her nesneyi kabul eder.
        """
        for region in self._regions:
            if region.contains(residue.chain_id, residue.position):
                return region
        return None

    def selected_positions(self) -> List[Tuple[str, int]]:
        return [
            (region.chain_id, pos)
            for region in self._regions
            for pos in range(region.start, region.end + 1)
        ]

    # ------------------------------------------------------------------
    # Observer arayüzü
    # ------------------------------------------------------------------

    def subscribe(self, listener: SelectionListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self._listeners, listener)

    # ------------------------------------------------------------------
    # Değişiklikler
    # ------------------------------------------------------------------

    def add_region(self, region: Region) -> bool:
        if not self._is_region_valid(region, self._constraints):
            return False

        if self._mode is SelectionMode.SINGLE:
            resulting: Tuple[Region, ...] = (region,)
        elif self._mode is SelectionMode.RANGE:
            resulting = self._replace_same_chain(region)
        else:
            resulting = self._merge_regions(self._regions + (region,))

        if not self._is_selection_valid(resulting, self._constraints):
            return False

        self._apply(resulting)
        return True

    def remove_region(self, region_id: str) -> bool:
        remaining = tuple(r for r in self._regions if r.id != region_id)
        if len(remaining) == len(self._regions):
            return False
        self._apply(remaining)
        return True

    def replace_selection(self, regions: Iterable[Region]) -> bool:
        proposed = tuple(regions)
        if not all(self._is_region_valid(r, self._constraints) for r in proposed):
            return False

        if self._mode is SelectionMode.SINGLE and len(proposed) > 1:
            return False
        if self._mode is SelectionMode.RANGE:
            chains = [r.chain_id for r in proposed]
            if len(set(chains)) != len(chains):
                return False
        if self._mode is SelectionMode.MULTIPLE:
            proposed = self._merge_regions(proposed)

        if not self._is_selection_valid(proposed, self._constraints):
            return False

        self._apply(proposed)
        return True

    def clear_selection(self) -> None:
        if self._regions:
            self._apply(())

    def set_mode(self, mode: SelectionMode) -> None:
        """
        Modu değiştirir ve mevcut bölgeleri yeni modun kuralına uyacak
        şekilde kırpar. Abonelere yalnızca bölge düşürüldüyse veya
        birleştirildiyse haber verilir.
        """
        mode = SelectionMode(mode)
        if mode is self._mode:
            return

        self._mode = mode
        if mode is SelectionMode.SINGLE:
            truncated = self._regions[:1]
        elif mode is SelectionMode.RANGE:
            truncated = self._first_per_chain(self._regions)
        else:
            truncated = self._merge_regions(self._regions)

        if truncated != self._regions:
            self._apply(truncated)

    def set_constraints(self, constraints: Constraints) -> None:
        self._constraints = constraints

        kept = tuple(r for r in self._regions if self._is_region_valid(r, constraints))
        if constraints.max_selections is not None:
            kept = kept[: max(constraints.max_selections, 0)]

        if kept != self._regions:
            self._apply(kept)

    # ------------------------------------------------------------------
    # Doğrulama
    # ------------------------------------------------------------------

    @staticmethod
    def _is_region_valid(region: Region, constraints: Constraints) -> bool:
        # (a) yapı
        if not region.chain_id or region.start < 1 or region.end < region.start:
            return False

        # (b) bölge bazlı kısıtlar
        if constraints.allowed_chains is not None and region.chain_id not in constraints.allowed_chains:
            return False
        if constraints.max_range_size is not None and region.length > constraints.max_range_size:
            return False
        return True

    @staticmethod
    def _is_selection_valid(regions: Sequence[Region], constraints: Constraints) -> bool:
        ids = [r.id for r in regions]
        if len(set(ids)) != len(ids):
            return False

        # (c) sonuçtaki seçimin kardinalitesi
        if constraints.max_selections is not None and len(regions) > constraints.max_selections:
            return False

        # Birleşen bölgeler max_range_size sınırını aşmış olabilir
        if constraints.max_range_size is not None:
            if any(r.length > constraints.max_range_size for r in regions):
                return False
        return True

    # ------------------------------------------------------------------
    # Yardımcı fonksiyonlar
    # ------------------------------------------------------------------

    def _replace_same_chain(self, region: Region) -> Tuple[Region, ...]:
        replaced = False
        resulting: List[Region] = []
        for existing in self._regions:
            if existing.chain_id == region.chain_id:
                if not replaced:
                    resulting.append(region)
                    replaced = True
                continue
            resulting.append(existing)
        if not replaced:
            resulting.append(region)
        return tuple(resulting)

    @staticmethod
    def _first_per_chain(regions: Sequence[Region]) -> Tuple[Region, ...]:
        seen = set()
        kept: List[Region] = []
        for region in regions:
            if region.chain_id in seen:
                continue
            seen.add(region.chain_id)
            kept.append(region)
        return tuple(kept)

    def _merge_regions(self, regions: Sequence[Region]) -> Tuple[Region, ...]:
        """
        Zincir bazında çakışan / bitişik bölgeleri birleştirir. Hiçbir şeyle
        birleşmeyen bölge kimliğini korur; birleşen aralıklar yeni id ve
        label alır.
        """
        if not regions:
            return ()

        merged_spans = merge_ranges((r.chain_id, r.start, r.end) for r in regions)

        result: List[Region] = []
        for chain_id, start, end in merged_spans:
            members = [
                r for r in regions
                if r.chain_id == chain_id and start <= r.start and r.end <= end
            ]
            if len(members) == 1:
                result.append(members[0])
                continue
            result.append(
                Region.create(chain_id, start, end, self._merged_sequence(chain_id, start, end, members))
            )
        return tuple(result)

    def _merged_sequence(self, chain_id: str, start: int, end: int, members: Sequence[Region]) -> str:
        if self._sequence_lookup is not None:
            return self._sequence_lookup(chain_id, start, end)

        # Üye bölgelerin sekansları aralığı kapsıyorsa onlardan birleştir
        codes: Dict[int, str] = {}
        for region in members:
            if len(region.sequence) != region.length:
                continue
            for offset, code in enumerate(region.sequence):
                codes[region.start + offset] = code
        if len(codes) != end - start + 1:
            return ""
        return "".join(codes[pos] for pos in range(start, end + 1))

    def _apply(self, regions: Tuple[Region, ...]) -> None:
        self._regions = regions
        self._notify()

    def _notify(self) -> None:
        selection = self.selection
        for listener in list(self._listeners):
            try:
                listener(selection)
            except Exception:
                logger.exception("Selection listener %r failed", listener)
