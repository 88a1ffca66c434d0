import json
from dataclasses import asdict
from pathlib import Path

from config import Config, apply_dict_to_dataclass, sanitize_config
from logging_utils import log_event


def get_config_dir() -> Path:
    """Get the per-user application directory (~/.metronome_engine)."""
    config_dir = Path.home() / '.metronome_engine'
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get config file path."""
    return get_config_dir() / 'config.json'


def get_cache_root() -> Path:
    """Default storage location for cached assets.

    The asset cache appends its own dedicated subdirectory to this path.
    """
    return get_config_dir()


def save_config(config: Config) -> bool:
    """Save config to JSON file."""
    try:
        config_file = get_config_file()
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(asdict(config), f, indent=2)
        log_event("INFO", "Config", "Saved", path=config_file)
        return True
    except (OSError, TypeError) as e:
        log_event("ERROR", "Config", "Failed to save", error=e)
        return False


def load_config() -> Config:
    """Load config from JSON file, returns default if not found or invalid."""
    try:
        config_file = get_config_file()
        if not config_file.exists():
            log_event("DEBUG", "Config", "No saved config found, using defaults")
            return Config()

        with open(config_file, 'r', encoding='utf-8') as f:
            data = json.load(f)

        config = Config()
        apply_dict_to_dataclass(config, data)
        sanitize_config(config)
        log_event("INFO", "Config", "Loaded", path=config_file, version=config.version)
        return config
    except (OSError, ValueError) as e:
        log_event("WARN", "Config", "Failed to load, using defaults", error=e)
        return Config()
