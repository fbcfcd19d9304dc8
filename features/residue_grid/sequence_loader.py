# sequence_sync/features/residue_grid/sequence_loader.py

import logging

from PyQt5.QtCore import QThread, pyqtSignal

from repositories.sequence_data_manager import SequenceDataManager

logger = logging.getLogger(__name__)


class SequenceLoader(QThread):
    """
    Tek bir yapının sekans verisini GUI thread'i dışında getirir.

    Sinyaller alıcının thread'ine kuyruklanır; widget'lardan bağlanan
    slot'lar GUI thread'inde çalışır.
    """

    loaded = pyqtSignal(object)     # SequenceFetchResult
    failed = pyqtSignal(str, str)   # structure id, error message

    def __init__(self, manager: SequenceDataManager, structure_id: str, parent=None) -> None:
        super().__init__(parent)
        self.manager = manager
        self.structure_id = structure_id

    def run(self) -> None:
        try:
            result = self.manager.load(self.structure_id)
        except Exception as e:
            logger.exception("Unexpected error loading %s", self.structure_id)
            self.failed.emit(self.structure_id, str(e))
            return

        if result.ok:
            logger.info(
                "Loaded %s (%s)",
                result.structure_id,
                "cache" if result.from_cache else type(self.manager.repository).__name__,
            )
            self.loaded.emit(result)
        else:
            self.failed.emit(result.structure_id, result.error or "unknown error")
