# sequence_sync/highlighting/scheduler.py

from abc import ABC, abstractmethod
from typing import Callable, Optional

from PyQt5.QtCore import QObject, QTimer


class ScheduledTask(ABC):
    """
    Gecikmeli tek bir callback için handle.
    cancel() idempotent'tir; görev çalıştıktan sonra etkisizdir.
    """

    @abstractmethod
    def cancel(self) -> None:
        ...

    @property
    @abstractmethod
    def active(self) -> bool:
        """Görev çalışmayı beklediği sürece True."""


class TaskScheduler(ABC):
    @abstractmethod
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        ...


class QtScheduledTask(ScheduledTask):
    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer
        self._cancelled = False
        self._fired = False

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._fired)

    def cancel(self) -> None:
        if not self.active:
            return
        self._cancelled = True
        self._release_timer()

    def _fire(self, callback: Callable[[], None]) -> None:
        if not self.active:
            return
        self._fired = True
        self._release_timer()
        callback()

    def _release_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class QtTimerScheduler(TaskScheduler):
    """
    Callback'leri single-shot QTimer'larla Qt event loop'una zamanlar.
    Her görevin kendi timer'ı vardır; birini iptal etmek diğerini etkilemez.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        task = QtScheduledTask(timer)
        timer.timeout.connect(lambda: task._fire(callback))
        timer.start(max(0, int(delay_ms)))
        return task
