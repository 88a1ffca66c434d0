"""
On-disk cache for generated click sounds.

Assets live as WAVE files named after their logical role inside a
dedicated subdirectory of the storage location, so clearing the cache
never touches anything else.
"""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from config_persistence import get_cache_root
from errors import AssetGenerationFailed, CacheIOFailed
from logging_utils import log_event
from wav_codec import decode_wav

ASSET_SUFFIX = ".wav"


@dataclass
class ClickAsset:
    """A decoded, ready-to-play click."""
    name: str
    samples: np.ndarray       # int16 mono PCM
    sample_rate: int
    path: Optional[Path]      # None when the asset only exists in memory (cache write failed)

    @property
    def duration_s(self) -> float:
        return len(self.samples) / float(self.sample_rate) if self.sample_rate else 0.0


class AssetCache:
    """Maps logical asset names to durable WAVE files, generating lazily."""

    def __init__(
        self,
        location_provider: Callable[[], Path] = get_cache_root,
        dir_name: str = "audio_cache",
    ):
        self._location_provider = location_provider
        self.dir_name = dir_name

    @property
    def cache_dir(self) -> Path:
        return Path(self._location_provider()) / self.dir_name

    def asset_path(self, name: str) -> Path:
        if not name or Path(name).name != name or name in (".", ".."):
            raise ValueError(f"invalid asset name: {name!r}")
        return self.cache_dir / f"{name}{ASSET_SUFFIX}"

    def resolve(self, name: str, generator: Callable[[], bytes]) -> Optional[ClickAsset]:
        """Load `name` from the cache, generating and storing it on a miss.

        Returns None when the asset cannot be produced at all.
        """
        try:
            path = self.asset_path(name)
        except (OSError, ValueError) as e:
            # Storage location unavailable or name not usable as a file; keep going in memory only
            log_event("WARN", "AssetCache", str(CacheIOFailed("lookup", name, str(e))))
            path = None

        if path is not None and path.is_file():
            asset = self._load(name, path)
            if asset is not None:
                log_event("DEBUG", "AssetCache", "Cache hit", name=name, path=path)
                return asset

        try:
            data = self._generate(name, generator)
            samples, sample_rate = decode_wav(data)
        except ValueError as e:
            log_event("ERROR", "AssetCache", str(AssetGenerationFailed(name, f"invalid audio: {e}")))
            return None
        except AssetGenerationFailed as e:
            log_event("ERROR", "AssetCache", str(e))
            return None

        if path is not None:
            try:
                self._write(path, data)
                log_event("INFO", "AssetCache", "Generated", name=name, path=path, bytes=len(data))
            except CacheIOFailed as e:
                log_event("WARN", "AssetCache", f"{e}, keeping asset in memory only")
                path = None

        return ClickAsset(name=name, samples=samples, sample_rate=sample_rate, path=path)

    def clear(self) -> bool:
        """Remove the cache directory. Returns False (and logs) on failure."""
        try:
            cache_dir = self.cache_dir
            if cache_dir.exists():
                shutil.rmtree(cache_dir)
                log_event("INFO", "AssetCache", "Cleared", path=cache_dir)
            return True
        except OSError as e:
            log_event("ERROR", "AssetCache", str(CacheIOFailed("clear", self.dir_name, str(e))))
            return False

    def size(self) -> int:
        """Total bytes of all files in the cache directory, 0 if absent or unreadable."""
        try:
            cache_dir = self.cache_dir
            if not cache_dir.is_dir():
                return 0
            return sum(p.stat().st_size for p in cache_dir.rglob("*") if p.is_file())
        except OSError as e:
            log_event("WARN", "AssetCache", "Could not measure cache", error=e)
            return 0

    def _generate(self, name: str, generator: Callable[[], bytes]) -> bytes:
        try:
            data = generator()
        except Exception as e:
            raise AssetGenerationFailed(name, str(e)) from e
        if not isinstance(data, (bytes, bytearray)) or not data:
            raise AssetGenerationFailed(name, "generator returned no bytes")
        return bytes(data)

    def _load(self, name: str, path: Path) -> Optional[ClickAsset]:
        try:
            data = path.read_bytes()
        except OSError as e:
            log_event("WARN", "AssetCache", str(CacheIOFailed("read", path, str(e))))
            return None
        try:
            samples, sample_rate = decode_wav(data)
        except ValueError as e:
            log_event("WARN", "AssetCache", "Cached asset is corrupt, regenerating", name=name, error=e)
            return None
        return ClickAsset(name=name, samples=samples, sample_rate=sample_rate, path=path)

    def _write(self, path: Path, data: bytes) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                pass
            raise CacheIOFailed("write", path, str(e)) from e
