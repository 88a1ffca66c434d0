# Metronome Engine Configuration
# All default values and constants

from dataclasses import dataclass, field, is_dataclass

from logging_utils import log_event


CURRENT_CONFIG_VERSION = 1

# Tempo range is fixed; a settings file may move the default but not the bounds
MIN_BPM = 40
MAX_BPM = 240


@dataclass
class TempoConfig:
    """Tempo defaults"""
    default_bpm: int = 120            # Initial tempo on every launch
    nudge_step: int = 1               # Step used by increase/decrease without an explicit amount


@dataclass
class ClickConfig:
    """Synthesized click parameters"""
    sample_rate: int = 44100          # Hz
    duration_s: float = 0.05          # 50 ms click
    decay_rate: float = 50.0          # Envelope e^(-decay_rate * t), ~20 ms time constant
    normal_frequency: float = 1000.0  # Hz, beats 2..n
    accent_frequency: float = 1500.0  # Hz, beat 1
    normal_asset: str = "click"       # Cache file stem for the normal click
    accent_asset: str = "accent"      # Cache file stem for the accent click


@dataclass
class CacheConfig:
    """On-disk asset cache"""
    dir_name: str = "audio_cache"     # Dedicated subdirectory, the only thing clear() removes


@dataclass
class Config:
    """Master configuration"""
    version: int = CURRENT_CONFIG_VERSION
    tempo: TempoConfig = field(default_factory=TempoConfig)
    click: ClickConfig = field(default_factory=ClickConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    # Global
    default_time_signature: str = "4/4"  # Catalog name or "beats/note" description
    log_level: str = "INFO"              # Logging level (DEBUG/INFO/WARNING/ERROR)


def clamp_bpm(value: int) -> int:
    """Clamp a tempo into [MIN_BPM, MAX_BPM]."""
    return max(MIN_BPM, min(MAX_BPM, int(value)))


def apply_dict_to_dataclass(target, data) -> None:
    """Recursively apply values from a dict onto a dataclass instance.
    Unknown keys are ignored; values are coerced to the type of the default."""
    if not isinstance(data, dict):
        return

    for key, value in data.items():
        if not hasattr(target, key):
            continue

        current = getattr(target, key)

        if is_dataclass(current):
            if isinstance(value, dict):
                apply_dict_to_dataclass(current, value)
            else:
                log_event("WARN", "Config", "Expected a section, keeping defaults", key=key)
            continue

        if current is not None and not isinstance(value, type(current)):
            try:
                value = type(current)(value)
            except (TypeError, ValueError, OverflowError):
                log_event("WARN", "Config", "Could not convert value, keeping default",
                          key=key, value=value, expected=type(current).__name__)
                continue

        setattr(target, key, value)


def _is_plain_name(name: str) -> bool:
    """True for a single path component that is not "." or ".."."""
    name = name.strip()
    return bool(name) and "/" not in name and "\\" not in name and name not in (".", "..")


def sanitize_config(config: Config) -> None:
    """Clamp loaded values back into their valid ranges."""
    defaults = Config()

    config.tempo.default_bpm = clamp_bpm(config.tempo.default_bpm)
    if config.tempo.nudge_step < 1:
        config.tempo.nudge_step = defaults.tempo.nudge_step

    click = config.click
    if click.sample_rate <= 0:
        click.sample_rate = defaults.click.sample_rate
    if click.duration_s <= 0:
        click.duration_s = defaults.click.duration_s
    if click.decay_rate < 0:
        click.decay_rate = defaults.click.decay_rate
    if click.normal_frequency <= 0:
        click.normal_frequency = defaults.click.normal_frequency
    if click.accent_frequency <= 0:
        click.accent_frequency = defaults.click.accent_frequency

    # Asset names become file names inside the cache directory
    if not _is_plain_name(click.normal_asset):
        log_event("WARN", "Config", "Invalid asset name, using default", name=click.normal_asset)
        click.normal_asset = defaults.click.normal_asset
    if not _is_plain_name(click.accent_asset):
        log_event("WARN", "Config", "Invalid asset name, using default", name=click.accent_asset)
        click.accent_asset = defaults.click.accent_asset
    if click.normal_asset == click.accent_asset:
        log_event("WARN", "Config", "Asset names must differ, using defaults",
                  name=click.normal_asset)
        click.normal_asset = defaults.click.normal_asset
        click.accent_asset = defaults.click.accent_asset

    # Path separators would let clear() reach outside the cache root
    if not _is_plain_name(config.cache.dir_name):
        config.cache.dir_name = defaults.cache.dir_name

    config.version = CURRENT_CONFIG_VERSION


# Default config instance
DEFAULT_CONFIG = Config()
