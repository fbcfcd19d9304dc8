# sequence_sync/features/residue_grid/residue_grid_view.py

from typing import Any, Optional

from Bio.SeqUtils import seq3
from PyQt5.QtCore import QEvent, QRectF, Qt
from PyQt5.QtGui import QColor, QFont, QPainter, QPen
from PyQt5.QtWidgets import QToolTip, QWidget

from selection.selection_store import SelectionStore
from settings.color_palette import ColorPalette

from .residue_grid_model import ResidueGridModel


class ResidueGridView(QWidget):
    """
    Residue grid'i çizen düşük seviyeli QWidget.

    MVC ayrımı:
    - Model     : ResidueGridModel (yerleşim, hover kümesi, provisional bölge)
    - View      : bu sınıf (QPainter çizimi, tooltip'ler)
    - Controller: ResidueGridController (pointer / klavye yönetimi)

    Kalıcı seçim her paint'te SelectionStore'dan okunur; grid her zaman asıl
    durumu gösterir. Mouse, klavye, leave ve context-menu olayları önce
    controller'a sunulur.
    """

    def __init__(
        self,
        model: ResidueGridModel,
        store: SelectionStore,
        palette: ColorPalette,
        parent: Optional[QWidget] = None,
        *,
        numbering_interval: int = 5,
    ) -> None:
        super().__init__(parent)
        self._model = model
        self._store = store
        self._palette = palette
        self.numbering_interval = max(1, numbering_interval)

        self.cell_font = QFont("Courier New", 9)
        self.cell_font.setBold(True)
        self.label_font = QFont("Arial", 7)
        self.header_font = QFont("Arial", 9)
        self.header_font.setBold(True)

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.ClickFocus)
        self.setContextMenuPolicy(Qt.DefaultContextMenu)

        self._controller: Optional[Any] = None
        self.refresh_geometry()

    # ---------------------------------------------------------------------
    # Controller
    # ---------------------------------------------------------------------

    def set_controller(self, controller: Any) -> None:
        self._controller = controller

    # ---------------------------------------------------------------------
    # Geometri
    # ---------------------------------------------------------------------

    def refresh_geometry(self) -> None:
        """Model yerleşimine göre boyutlanır; dıştaki QScrollArea kaydırabilsin."""
        self.setMinimumSize(int(self._model.width), int(self._model.height))
        self.updateGeometry()
        self.update()

    # ---------------------------------------------------------------------
    # Çizim
    # ---------------------------------------------------------------------

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, False)
        painter.setRenderHint(QPainter.TextAntialiasing, True)

        painter.fillRect(self.rect(), QColor(self._palette.get_background_color()))

        model = self._model
        visible = QRectF(event.rect())
        foreground = QColor(self._palette.get_foreground_color())

        painter.setFont(self.header_font)
        painter.setPen(QPen(foreground))
        for header in model.headers:
            painter.drawText(
                QRectF(model.PADDING, header.y, max(model.width, 200.0), model.HEADER_HEIGHT),
                Qt.AlignLeft | Qt.AlignVCenter,
                header.text,
            )

        selection_color = QColor(self._palette.get_selection_color())
        provisional_color = QColor(self._palette.get_provisional_color())
        hover_color = QColor(self._palette.get_hover_color())

        for row in model.rows:
            top = row.labels_y if row.labels_y is not None else row.cells_y
            bottom = row.cells_y + model.cell_height
            if bottom < visible.top() or top > visible.bottom():
                continue

            for col, residue in enumerate(row.residues):
                x, y, w, h = model.cell_rect(row, col)

                if row.labels_y is not None and (
                    residue.position == 1 or residue.position % self.numbering_interval == 0
                ):
                    painter.setFont(self.label_font)
                    painter.setPen(QPen(QColor(120, 120, 120)))
                    painter.drawText(
                        QRectF(x - w / 2, row.labels_y, w * 2, model.LABEL_HEIGHT),
                        Qt.AlignCenter,
                        str(residue.position),
                    )

                if model.is_provisional(residue):
                    fill = provisional_color
                    text_color = foreground
                elif self._store.is_residue_selected(residue):
                    fill = selection_color
                    text_color = foreground
                elif model.is_hovered(residue):
                    fill = hover_color
                    text_color = QColor(Qt.white)
                else:
                    fill = QColor(self._palette.get_residue_color(residue.code))
                    text_color = QColor(Qt.white)

                cell = QRectF(x, y, w, h)
                painter.fillRect(cell, fill)
                painter.setFont(self.cell_font)
                painter.setPen(QPen(text_color))
                painter.drawText(cell, Qt.AlignCenter, residue.code)

        painter.end()

    # ---------------------------------------------------------------------
    # Tooltips
    # ---------------------------------------------------------------------

    def event(self, event) -> bool:
        if event.type() == QEvent.ToolTip:
            residue = self._model.cell_at(event.pos().x(), event.pos().y())
            if residue is None:
                QToolTip.hideText()
                event.ignore()
                return True
            text = f"{seq3(residue.code)} ({residue.code}{residue.position}) - Chain {residue.chain_id}"
            region = self._store.region_containing(residue)
            if region is not None:
                text += f" - Region: {region.label}"
            QToolTip.showText(event.globalPos(), text, self)
            return True
        return super().event(event)

    # ---------------------------------------------------------------------
    # Olay yönlendirme
    # ---------------------------------------------------------------------

    def _delegate(self, name: str, event) -> bool:
        if self._controller is None:
            return False
        handler = getattr(self._controller, name, None)
        return bool(callable(handler) and handler(event))

    def mousePressEvent(self, event) -> None:
        if not self._delegate("handle_mouse_press", event):
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        if not self._delegate("handle_mouse_move", event):
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if not self._delegate("handle_mouse_release", event):
            super().mouseReleaseEvent(event)

    def leaveEvent(self, event) -> None:
        self._delegate("handle_leave", event)
        super().leaveEvent(event)

    def keyPressEvent(self, event) -> None:
        if not self._delegate("handle_key_press", event):
            super().keyPressEvent(event)

    def contextMenuEvent(self, event) -> None:
        if not self._delegate("handle_context_menu", event):
            super().contextMenuEvent(event)
