"""
Audio output for click playback.

AudioOutput wraps the default PortAudio output device via sounddevice.
ClickPlayer owns the two click assets (normal and accent), builds them
lazily through the asset cache and plays the right one per beat. Every
failure here is logged and turned into silence.
"""

from typing import Optional

from asset_cache import AssetCache, ClickAsset
from click_synth import generate_click_samples
from config import ClickConfig
from errors import AudioSessionConfigurationFailed, PlaybackFailed
from logging_utils import log_event
from wav_codec import encode_wav


class AudioOutput:
    """Non-blocking playback on the default output device."""

    def __init__(self):
        self._sd = None
        self.device_name: Optional[str] = None

    @property
    def active(self) -> bool:
        return self._sd is not None

    def activate(self) -> None:
        """Open the host audio subsystem. Raises AudioSessionConfigurationFailed."""
        if self._sd is not None:
            return
        # Imported here: PortAudio may be missing on headless machines
        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            raise AudioSessionConfigurationFailed(f"sounddevice unavailable: {e}") from e

        try:
            device = sd.query_devices(kind='output')
        except (sd.PortAudioError, ValueError) as e:
            raise AudioSessionConfigurationFailed(f"no output device: {e}") from e

        self._sd = sd
        self.device_name = device['name'] if device else None
        log_event("INFO", "AudioSession", "Output ready", device=self.device_name)

    def play(self, asset: ClickAsset) -> None:
        """Start playing an asset from its beginning. Raises PlaybackFailed."""
        if self._sd is None:
            raise PlaybackFailed("audio session is not active")
        try:
            # sd.play() interrupts whatever is still sounding, like rewinding a player
            self._sd.play(asset.samples, samplerate=asset.sample_rate, blocking=False)
        except (self._sd.PortAudioError, ValueError, TypeError) as e:
            raise PlaybackFailed(f"{asset.name}: {e}") from e

    def close(self) -> None:
        if self._sd is None:
            return
        try:
            self._sd.stop()
        except self._sd.PortAudioError as e:
            log_event("WARN", "AudioSession", "Stop failed", error=e)
        self._sd = None
        log_event("INFO", "AudioSession", "Closed")


class ClickPlayer:
    """Plays the accent or normal click for a beat."""

    def __init__(self, output: AudioOutput, cache: AssetCache, click_config: Optional[ClickConfig] = None):
        self.output = output
        self.cache = cache
        self.click_config = click_config or ClickConfig()
        self._assets: dict[bool, Optional[ClickAsset]] = {False: None, True: None}
        self._reported_missing: set[bool] = set()

    def asset(self, accent: bool) -> Optional[ClickAsset]:
        return self._assets[accent]

    def _asset_params(self, accent: bool) -> tuple[str, float]:
        cfg = self.click_config
        if accent:
            return cfg.accent_asset, cfg.accent_frequency
        return cfg.normal_asset, cfg.normal_frequency

    def _make_generator(self, frequency: float):
        cfg = self.click_config

        def generate() -> bytes:
            samples = generate_click_samples(
                frequency,
                sample_rate=cfg.sample_rate,
                duration_s=cfg.duration_s,
                decay_rate=cfg.decay_rate,
            )
            return encode_wav(samples, cfg.sample_rate)

        return generate

    def prepare(self) -> None:
        """Activate output and resolve any asset not loaded yet.

        Does file I/O on first use only; loaded assets are kept for the
        lifetime of the player.
        """
        if not self.output.active:
            try:
                self.output.activate()
            except AudioSessionConfigurationFailed as e:
                log_event("WARN", "AudioSession", "Audio unavailable, running silent", error=e)

        for accent in (False, True):
            if self._assets[accent] is not None:
                continue
            name, frequency = self._asset_params(accent)
            asset = self.cache.resolve(name, self._make_generator(frequency))
            self._assets[accent] = asset
            if asset is not None:
                self._reported_missing.discard(accent)

    def play(self, accent: bool) -> bool:
        """Play one click. Returns False when the click was skipped."""
        asset = self._assets[accent]
        if asset is None:
            if accent not in self._reported_missing:
                self._reported_missing.add(accent)
                log_event("WARN", "Playback", "Asset unavailable, skipping clicks",
                          asset=self._asset_params(accent)[0])
            return False

        if not self.output.active:
            return False

        try:
            self.output.play(asset)
        except PlaybackFailed as e:
            log_event("WARN", "Playback", "Click failed", error=e)
            return False
        return True

    def close(self) -> None:
        self.output.close()
