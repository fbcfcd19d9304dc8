from highlighting.scheduler import QtTimerScheduler


def test_task_fires_once(qtbot):
    scheduler = QtTimerScheduler()
    fired = []
    task = scheduler.schedule(10, lambda: fired.append("x"))
    assert task.active

    qtbot.waitUntil(lambda: fired == ["x"], timeout=1000)
    assert not task.active
    qtbot.wait(50)
    assert fired == ["x"]


def test_cancelled_task_never_fires(qtbot):
    scheduler = QtTimerScheduler()
    fired = []
    task = scheduler.schedule(20, lambda: fired.append("x"))
    task.cancel()
    task.cancel()
    assert not task.active

    qtbot.wait(100)
    assert fired == []


def test_tasks_are_independent(qtbot):
    scheduler = QtTimerScheduler()
    fired = []
    first = scheduler.schedule(20, lambda: fired.append("first"))
    scheduler.schedule(20, lambda: fired.append("second"))
    first.cancel()

    qtbot.waitUntil(lambda: fired == ["second"], timeout=1000)
