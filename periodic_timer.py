"""
Repeating timers on the Qt event loop.

Callbacks run on the thread that owns the event loop, so the scheduler
and engine never see concurrent ticks.
"""

from typing import Callable, Optional, Protocol

from PyQt6.QtCore import Qt, QTimer


class PeriodicTask(Protocol):
    """Handle for a repeating callback."""
    interval_s: float

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], PeriodicTask]


def interval_to_ms(interval_s: float) -> int:
    """Timer period in whole milliseconds, never zero."""
    return max(1, int(round(interval_s * 1000.0)))


class QtPeriodicTask:
    """A started QTimer firing `callback` every `interval_s` seconds.

    Needs a QCoreApplication (or QApplication) on the calling thread.
    """

    def __init__(self, interval_s: float, callback: Callable[[], None]):
        self.interval_s = interval_s
        self._timer: Optional[QTimer] = QTimer()
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(callback)
        self._timer.start(interval_to_ms(interval_s))

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        """Stop the timer. Safe to call repeatedly and from inside the callback."""
        if self._timer is None:
            return
        timer = self._timer
        self._timer = None
        timer.stop()
        timer.timeout.disconnect()
        timer.deleteLater()
