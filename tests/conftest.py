import os
from typing import Callable, List, Optional, Tuple

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from highlighting.scheduler import ScheduledTask, TaskScheduler  # noqa: E402
from highlighting.structure_renderer import HeadlessRenderer, Locus  # noqa: E402
from model.sequence_data_model import SequenceData, build_sequence_data  # noqa: E402


class FakeTask(ScheduledTask):
    def __init__(self, due: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler(TaskScheduler):
    """Manual clock: nothing fires until advance() moves time past a task's due time."""

    def __init__(self) -> None:
        self.now = 0
        self.tasks: List[FakeTask] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        task = FakeTask(self.now + delay_ms, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> List[FakeTask]:
        return [t for t in self.tasks if t.active]

    def advance(self, ms: int) -> None:
        self.now += ms
        for task in sorted(self.pending, key=lambda t: t.due):
            if task.active and task.due <= self.now:
                task.fired = True
                task.callback()


class RecordingRenderer(HeadlessRenderer):
    """HeadlessRenderer that also keeps the order of every call."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[Tuple[str, Optional[Locus]]] = []

    def highlight_only(self, locus: Locus) -> None:
        super().highlight_only(locus)
        self.calls.append(("highlight_only", locus))

    def select_only(self, locus: Locus) -> None:
        super().select_only(locus)
        self.calls.append(("select_only", locus))

    def clear_highlights(self) -> None:
        super().clear_highlights()
        self.calls.append(("clear_highlights", None))

    def clear_selections(self) -> None:
        super().clear_selections()
        self.calls.append(("clear_selections", None))

    def focus(self, locus: Locus) -> None:
        super().focus(locus)
        self.calls.append(("focus", locus))

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def renderer() -> RecordingRenderer:
    r = RecordingRenderer()
    r.load_structure("1ABC", ["A", "B"])
    return r


@pytest.fixture
def sequence_data() -> SequenceData:
    return build_sequence_data(
        "1ABC",
        [("A", "MKTAYIAKQRQISFVKSHFSRQLEERLGLIEVQ"), ("B", "GSHMLEDPV")],
        chain_names={"A": "Heavy chain"},
    )


@pytest.fixture(autouse=True)
def _isolated_user_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.sequence_sync/config.json and env overrides."""
    for key in list(os.environ):
        if key.startswith("SEQUENCE_SYNC_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("settings.config.DEFAULT_USER_CONFIG_PATH", tmp_path / "user_config.json")
