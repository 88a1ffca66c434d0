from time_signature import TimeSignature


class BeatCycle:
    """Position of the next click within the measure."""
    __slots__ = ('current_beat',)

    def __init__(self):
        self.current_beat: int = 0

    def reset(self) -> None:
        self.current_beat = 0

    def is_accent_beat(self) -> bool:
        return self.current_beat == 0

    def advance(self, signature: TimeSignature) -> int:
        """Move to the next beat, wrapping at the end of the measure."""
        self.current_beat = (self.current_beat + 1) % signature.beats
        return self.current_beat
