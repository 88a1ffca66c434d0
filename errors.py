"""Failure conditions of the audio path.

All of these are non-fatal: they are raised where the failure happens and
caught by the component that can degrade gracefully (silence, a skipped
click, regeneration of a cached asset).
"""


class MetronomeAudioError(Exception):
    """Base class for recoverable audio-path failures."""


class AudioSessionConfigurationFailed(MetronomeAudioError):
    """The host audio subsystem could not be activated."""


class AssetGenerationFailed(MetronomeAudioError):
    """Synthesis or encoding of a click asset failed."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        detail = f": {reason}" if reason else ""
        super().__init__(f"could not generate asset '{name}'{detail}")


class CacheIOFailed(MetronomeAudioError):
    """A cache directory or file operation failed."""

    def __init__(self, operation: str, path, reason: str = ""):
        self.operation = operation
        self.path = path
        detail = f": {reason}" if reason else ""
        super().__init__(f"cache {operation} failed for {path}{detail}")


class PlaybackFailed(MetronomeAudioError):
    """A loaded asset could not be played."""
