from dataclasses import dataclass


@dataclass(frozen=True)
class TimeSignature:
    """Beats per measure plus a descriptive note value.

    Equality is by value. Only `beats` affects timing: it sets the length
    of the beat cycle. `note_value` and `name` are for display.
    """
    beats: int
    note_value: int
    name: str

    def __post_init__(self):
        if self.beats < 1:
            raise ValueError(f"time signature needs at least one beat, got {self.beats}")
        if self.note_value < 1:
            raise ValueError(f"note value must be positive, got {self.note_value}")

    @property
    def description(self) -> str:
        return f"{self.beats}/{self.note_value}"

    def __str__(self) -> str:
        return f"{self.description} - {self.name}"


COMMON = TimeSignature(beats=4, note_value=4, name="Common")
WALTZ = TimeSignature(beats=3, note_value=4, name="Waltz")
MARCH = TimeSignature(beats=2, note_value=4, name="March")
COMPOUND = TimeSignature(beats=6, note_value=8, name="Compound")
FIVE_FOUR = TimeSignature(beats=5, note_value=4, name="Five Four")
SEVEN_EIGHT = TimeSignature(beats=7, note_value=8, name="Seven Eight")

# Presentation order
ALL_SIGNATURES = (
    COMMON,
    WALTZ,
    MARCH,
    COMPOUND,
    FIVE_FOUR,
    SEVEN_EIGHT,
)


def all_signatures() -> list[TimeSignature]:
    """Return the predefined catalog in presentation order."""
    return list(ALL_SIGNATURES)


def find_time_signature(text: str) -> TimeSignature:
    """Resolve a catalog entry by description ("6/8") or name ("waltz").

    Anything else of the form "N/D" becomes an ad-hoc signature named after
    its description. Raises ValueError for unparseable input.
    """
    key = (text or "").strip()
    lowered = key.lower()
    for signature in ALL_SIGNATURES:
        if lowered in (signature.description, signature.name.lower()):
            return signature

    beats_text, sep, note_text = key.partition("/")
    if not sep:
        raise ValueError(f"unknown time signature: {text!r}")
    try:
        beats = int(beats_text.strip())
        note_value = int(note_text.strip())
    except ValueError:
        raise ValueError(f"unknown time signature: {text!r}") from None
    return TimeSignature(beats=beats, note_value=note_value, name=f"{beats}/{note_value}")
