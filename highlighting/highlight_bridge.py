"""
Sekans seçimi ile 3-D yapı renderer'ı arasındaki köprü.

Renderer'ı birbirinden bağımsız iki kanal sürer:

* kalıcı: :class:`selection.selection_store.SelectionStore` durumunu yansıtır.
  Store'daki her değişiklik renderer aralıklarına çevrilip ``select_only``
  ile yerine konur (boş seçim bunun yerine kanalı temizler).
* geçici: hover edilen residue'ları yansıtır. Hover ayarlamak debounce
  edilir, hızlı pointer hareketi renderer'ı boğmaz; temizleme anında olur.
  En fazla bir hover görevi bekler; yeni hover her zaman eskisinin yerini alır.

Köprü iş mantığı durumu tutmaz. Renderer hataları (yüklü yapı yok, yeniden
yüklemeden sonra zincir yok) loglanan no-op'lara dönüşür ve çağırana ulaşmaz.

Ters yön (3-D görünümde tıklayıp sekans residue'su seçmek) bağlı değildir;
bunu isteyen bir renderer kendi numaralarını
:meth:`highlighting.coordinate_mapper.CoordinateMapper.to_sequence_position`
ile çevirip store'u doğrudan çağırabilir.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from model.selection_types import Region, Selection
from selection.selection_store import SelectionStore, Subscription

from .coordinate_mapper import CoordinateMapper
from .scheduler import QtTimerScheduler, ScheduledTask, TaskScheduler
from .structure_renderer import Locus, RendererUnavailableError, ResidueRange, StructureRenderer

logger = logging.getLogger(__name__)

DEFAULT_HOVER_DEBOUNCE_MS = 150
DEFAULT_MAX_REGIONS = 50

HighlightListener = Callable[[List[object]], None]


class HighlightBridge:
    """Tek bir görünüm için renderer'ın highlight / select kanallarını sürer."""

    def __init__(
        self,
        renderer: StructureRenderer,
        mapper: Optional[CoordinateMapper] = None,
        scheduler: Optional[TaskScheduler] = None,
        *,
        hover_debounce_ms: int = DEFAULT_HOVER_DEBOUNCE_MS,
        auto_focus: bool = False,
        max_regions: Optional[int] = DEFAULT_MAX_REGIONS,
    ):
        self._renderer = renderer
        self._mapper = mapper or CoordinateMapper(renderer=renderer)
        self._scheduler = scheduler or QtTimerScheduler()
        self.hover_debounce_ms = hover_debounce_ms
        self.auto_focus = auto_focus
        self.max_regions = max_regions

        self._pending_hover: Optional[ScheduledTask] = None
        self._hover: Tuple[object, ...] = ()

        self._store_subscription: Optional[Subscription] = None
        self._highlight_listeners: List[HighlightListener] = []

    @property
    def mapper(self) -> CoordinateMapper:
        return self._mapper

    @property
    def hovered(self) -> Tuple[object, ...]:
        return self._hover

    @property
    def has_pending_hover(self) -> bool:
        return self._pending_hover is not None and self._pending_hover.active

    # ------------------------------------------------------------------
    # Store bağlantısı
    # ------------------------------------------------------------------

    def attach(self, store: SelectionStore) -> None:
        """`store`'u takip eder ve mevcut seçimini hemen renderer'a iter."""
        self.detach()
        self._store_subscription = store.subscribe(self.on_selection_changed)
        self.on_selection_changed(store.selection)

    def detach(self) -> None:
        if self._store_subscription is not None:
            self._store_subscription.unsubscribe()
            self._store_subscription = None
        self._cancel_pending_hover()

    def subscribe_highlight(self, listener: HighlightListener) -> Subscription:
        """Listener'lar hover kümesi değişir değişmez hover edilen residue'ları alır."""
        self._highlight_listeners.append(listener)
        return Subscription(self._highlight_listeners, listener)

    # ------------------------------------------------------------------
    # Kalıcı kanal
    # ------------------------------------------------------------------

    def on_selection_changed(self, selection: Selection) -> None:
        self.show_selection(selection.regions)

    def show_selection(self, regions: Sequence[Region]) -> None:
        if not regions:
            self._call_renderer("clear_selections", self._renderer.clear_selections)
            return

        locus = self._build_locus(self._mapper.to_renderer_ranges(regions))
        if locus is None:
            return

        self._call_renderer("select_only", self._renderer.select_only, locus)
        if self.auto_focus:
            self._call_renderer("focus", self._renderer.focus, locus)

    def focus_regions(self, regions: Sequence[Region]) -> None:
        if not regions:
            return
        locus = self._build_locus(self._mapper.to_renderer_ranges(regions))
        if locus is not None:
            self._call_renderer("focus", self._renderer.focus, locus)

    # ------------------------------------------------------------------
    # Geçici kanal
    # ------------------------------------------------------------------

    def set_hover(self, residues: Iterable[object]) -> None:
        hovered = tuple(residues)
        self._cancel_pending_hover()

        changed = hovered != self._hover
        self._hover = hovered
        if changed:
            self._notify_highlight(hovered)

        if not hovered:
            # Temizleme hiçbir zaman debounce edilmez
            self._call_renderer("clear_highlights", self._renderer.clear_highlights)
            return

        self._pending_hover = self._scheduler.schedule(
            self.hover_debounce_ms,
            lambda: self._flush_hover(hovered),
        )

    def clear_hover(self) -> None:
        self.set_hover(())

    def clear(self) -> None:
        """Bekleyen işi iptal eder ve iki renderer kanalını da temizler."""
        self._cancel_pending_hover()
        if self._hover:
            self._hover = ()
            self._notify_highlight(())
        self._call_renderer("clear_highlights", self._renderer.clear_highlights)
        self._call_renderer("clear_selections", self._renderer.clear_selections)

    def _flush_hover(self, hovered: Tuple[object, ...]) -> None:
        self._pending_hover = None
        locus = self._build_locus(self._mapper.residues_to_ranges(hovered))
        if locus is None:
            return
        self._call_renderer("highlight_only", self._renderer.highlight_only, locus)

    def _cancel_pending_hover(self) -> None:
        if self._pending_hover is not None:
            self._pending_hover.cancel()
            self._pending_hover = None

    # ------------------------------------------------------------------
    # Yardımcı fonksiyonlar
    # ------------------------------------------------------------------

    def _build_locus(self, ranges: List[ResidueRange]) -> Optional[Locus]:
        if not ranges:
            logger.warning("No renderer ranges to highlight; structure reloaded or chains missing?")
            return None

        if self.max_regions is not None and len(ranges) > self.max_regions:
            logger.warning("Highlighting only the first %d of %d ranges", self.max_regions, len(ranges))
            ranges = ranges[: self.max_regions]

        try:
            locus = self._renderer.build_locus(ranges)
        except RendererUnavailableError as exc:
            logger.warning("Renderer unavailable while building locus: %s", exc)
            return None

        if locus is None or getattr(locus, "is_empty", False):
            logger.warning("Renderer has no structure data for %d range(s)", len(ranges))
            return None
        return locus

    @staticmethod
    def _call_renderer(name: str, func: Callable, *args) -> None:
        try:
            func(*args)
        except RendererUnavailableError as exc:
            logger.warning("Renderer call %s skipped: %s", name, exc)

    def _notify_highlight(self, hovered: Tuple[object, ...]) -> None:
        for listener in list(self._highlight_listeners):
            try:
                listener(list(hovered))
            except Exception:
                logger.exception("Highlight listener %r failed", listener)
