"""
Playback scheduler: one repeating timer per playback session.

Holds at most one PeriodicTask at any time. Every reschedule cancels the
current task before creating the next one. Ticks carry the generation of
the task that produced them, so a callback left over from a cancelled
task is ignored.

Requests to reschedule that arrive while a tick is being processed (for
example a listener changing tempo from inside its beat notification) are
recorded and applied once the tick has finished advancing the cycle.
"""

from typing import Callable, Optional

from beat_cycle import BeatCycle
from logging_utils import log_event
from periodic_timer import PeriodicTask, QtPeriodicTask, TimerFactory
from time_signature import COMMON, TimeSignature


class PlaybackScheduler:
    def __init__(
        self,
        play_click: Callable[[bool], object],
        timer_factory: TimerFactory = QtPeriodicTask,
        on_beat: Optional[Callable[[int, bool], None]] = None,
        on_running_changed: Optional[Callable[[bool], None]] = None,
    ):
        self._play_click = play_click
        self._timer_factory = timer_factory
        self._on_beat = on_beat
        self._on_running_changed = on_running_changed

        self.beat_cycle = BeatCycle()
        self._signature: TimeSignature = COMMON
        self._interval_s: float = 0.5
        self._running = False

        self._task: Optional[PeriodicTask] = None
        self._generation = 0
        self._tick_depth = 0
        self._reschedule_pending = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval_s(self) -> float:
        return self._interval_s

    @property
    def signature(self) -> TimeSignature:
        return self._signature

    @property
    def task(self) -> Optional[PeriodicTask]:
        return self._task

    def start(self, interval_s: float, signature: TimeSignature) -> bool:
        """Click immediately, then every `interval_s`. Returns False if already running."""
        if self._running:
            return False

        self._interval_s = interval_s
        self._signature = signature
        self.beat_cycle.reset()
        self._running = True
        self._reschedule_pending = False
        log_event("INFO", "Scheduler", "Started",
                  interval=f"{interval_s:.3f}s", signature=signature.description)
        self._notify_running(True)

        if self._running:
            self._tick()
        # The first tick may have stopped us, or already rescheduled on our behalf
        if self._running and self._task is None:
            self._schedule()
        return True

    def stop(self) -> bool:
        """Cancel the timer and rewind the cycle. Returns False if already stopped."""
        if not self._running:
            return False

        self._running = False
        self._reschedule_pending = False
        self._cancel()
        self.beat_cycle.reset()
        log_event("INFO", "Scheduler", "Stopped")
        self._notify_running(False)
        return True

    def set_interval(self, interval_s: float) -> None:
        """Change the tick period, keeping the position within the measure."""
        if interval_s == self._interval_s:
            return
        self._interval_s = interval_s
        if self._running:
            log_event("DEBUG", "Scheduler", "Interval changed", interval=f"{interval_s:.3f}s")
            self._reschedule()

    def set_signature(self, signature: TimeSignature) -> bool:
        """Switch signature and restart from beat zero. Returns False if unchanged."""
        if signature == self._signature:
            return False
        self._signature = signature
        self.beat_cycle.reset()
        if self._running:
            log_event("DEBUG", "Scheduler", "Signature changed", signature=signature.description)
            self._reschedule()
        return True

    def _reschedule(self) -> None:
        if self._tick_depth:
            self._reschedule_pending = True
            return
        self._schedule()

    def _schedule(self) -> None:
        self._cancel()
        self._generation += 1
        generation = self._generation
        self._task = self._timer_factory(self._interval_s, lambda: self._on_timer(generation))

    def _cancel(self) -> None:
        task = self._task
        self._task = None
        if task is not None:
            task.cancel()

    def _on_timer(self, generation: int) -> None:
        if not self._running or generation != self._generation:
            log_event("DEBUG", "Scheduler", "Dropped stale tick", generation=generation)
            return
        self._tick()

    def _tick(self) -> None:
        self._tick_depth += 1
        try:
            signature = self._signature
            beat = self.beat_cycle.current_beat
            accent = self.beat_cycle.is_accent_beat()
            try:
                self._play_click(accent)
            except Exception as e:
                log_event("ERROR", "Scheduler", "Click request failed", beat=beat, error=e)
            self.beat_cycle.advance(signature)

            if self._on_beat is not None:
                try:
                    self._on_beat(beat, accent)
                except Exception as e:
                    log_event("ERROR", "Scheduler", "Beat listener failed", beat=beat, error=e)
        finally:
            self._tick_depth -= 1

        if self._tick_depth == 0 and self._reschedule_pending:
            self._reschedule_pending = False
            if self._running:
                self._schedule()

    def _notify_running(self, running: bool) -> None:
        if self._on_running_changed is None:
            return
        try:
            self._on_running_changed(running)
        except Exception as e:
            log_event("ERROR", "Scheduler", "State listener failed", error=e)
