"""
Metronome Engine - the state and command surface seen by a front end.

Published state: bpm, is_playing, time_signature, current_beat. Listeners
registered with subscribe() are called as listener(field, value) whenever
one of those changes, plus ("beat", index) for every click with the index
of the beat just played.

All commands and ticks run on the thread that owns the event loop; the
engine does no locking of its own.
"""

from typing import Any, Callable, Optional

from asset_cache import AssetCache
from audio_output import AudioOutput, ClickPlayer
from config import MAX_BPM, MIN_BPM, Config, clamp_bpm
from logging_utils import log_event
from periodic_timer import QtPeriodicTask, TimerFactory
from scheduler import PlaybackScheduler
from time_signature import COMMON, TimeSignature, all_signatures, find_time_signature

Listener = Callable[[str, Any], None]


class MetronomeEngine:
    min_bpm = MIN_BPM
    max_bpm = MAX_BPM

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        cache: Optional[AssetCache] = None,
        output: Optional[AudioOutput] = None,
        timer_factory: TimerFactory = QtPeriodicTask,
    ):
        self.config = config or Config()
        self.cache = cache or AssetCache(dir_name=self.config.cache.dir_name)
        self._player = ClickPlayer(output or AudioOutput(), self.cache, self.config.click)
        self._scheduler = PlaybackScheduler(
            self._player.play,
            timer_factory=timer_factory,
            on_beat=self._on_beat,
            on_running_changed=self._on_running_changed,
        )
        self._listeners: list[Listener] = []

        self._bpm = clamp_bpm(self.config.tempo.default_bpm)
        self._time_signature = self._initial_signature()
        self._scheduler.set_signature(self._time_signature)
        self._published_beat = 0

    def _initial_signature(self) -> TimeSignature:
        try:
            return find_time_signature(self.config.default_time_signature)
        except ValueError as e:
            log_event("WARN", "Engine", "Bad default time signature, using 4/4", error=e)
            return COMMON

    # ---- published state ----

    @property
    def bpm(self) -> int:
        return self._bpm

    @property
    def is_playing(self) -> bool:
        return self._scheduler.running

    @property
    def time_signature(self) -> TimeSignature:
        return self._time_signature

    @property
    def current_beat(self) -> int:
        return self._scheduler.beat_cycle.current_beat

    @property
    def tick_interval(self) -> float:
        """Seconds between clicks at the current tempo."""
        return 60.0 / self._bpm

    @staticmethod
    def time_signatures() -> list[TimeSignature]:
        return all_signatures()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, field: str, value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(field, value)
            except Exception as e:
                log_event("ERROR", "Engine", "Listener failed", field=field, error=e)

    def _sync_current_beat(self) -> None:
        beat = self.current_beat
        if beat != self._published_beat:
            self._published_beat = beat
            self._publish("current_beat", beat)

    def _on_beat(self, beat: int, accent: bool) -> None:
        log_event("DEBUG", "Engine", "Beat", beat=beat, accent=accent)
        self._publish("beat", beat)
        self._sync_current_beat()

    def _on_running_changed(self, running: bool) -> None:
        self._publish("is_playing", running)
        self._sync_current_beat()

    # ---- transport ----

    def prepare_audio(self) -> None:
        """Open audio output and load both clicks, generating them on first run."""
        self._player.prepare()

    def start(self) -> None:
        if self.is_playing:
            return
        self.prepare_audio()
        self._scheduler.start(self.tick_interval, self._time_signature)

    def stop(self) -> None:
        self._scheduler.stop()
        self._sync_current_beat()

    def toggle(self) -> None:
        if self.is_playing:
            self.stop()
        else:
            self.start()

    def shutdown(self) -> None:
        """Stop and release the audio device."""
        self.stop()
        self._player.close()

    # ---- tempo ----

    def set_bpm(self, value: int) -> None:
        bpm = clamp_bpm(value)
        if bpm == self._bpm:
            return
        self._bpm = bpm
        self._publish("bpm", bpm)
        self._scheduler.set_interval(self.tick_interval)

    def increase_bpm(self, amount: Optional[int] = None) -> None:
        step = self.config.tempo.nudge_step if amount is None else amount
        self.set_bpm(self._bpm + step)

    def decrease_bpm(self, amount: Optional[int] = None) -> None:
        step = self.config.tempo.nudge_step if amount is None else amount
        self.set_bpm(self._bpm - step)

    # ---- time signature ----

    def set_time_signature(self, signature: TimeSignature) -> None:
        if signature == self._time_signature:
            return
        self._time_signature = signature
        self._publish("time_signature", signature)
        self._scheduler.set_signature(signature)
        self._sync_current_beat()
        log_event("INFO", "Engine", "Time signature", signature=signature.description, name=signature.name)

    # ---- cache ----

    def clear_audio_cache(self) -> bool:
        return self.cache.clear()

    def get_cache_size(self) -> int:
        return self.cache.size()
