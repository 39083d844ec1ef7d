"""
Measure and measure-header models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from gptab.models.beat import Beat, Duration
from gptab.utils.scaling import round_half_away


@dataclass
class Color:
    r: int = 0
    g: int = 0
    b: int = 0

    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


@dataclass
class Marker:
    """Rehearsal marker shown above a measure."""

    title: str = ""
    color: Color = field(default_factory=Color)


@dataclass
class TimeSignature:
    """
    Time signature of a measure.

    Attributes:
        numerator: Beats per measure
        denominator: Beat length, including its tuplet division
    """

    numerator: int = 4
    denominator: Duration = field(default_factory=Duration)

    def __str__(self) -> str:
        return f"{self.numerator}/{int(self.denominator.value)}"


class Clef(Enum):
    TREBLE = "treble"
    BASS = "bass"


@dataclass
class MeasureHeader:
    """
    Measure data shared by all tracks at one measure index.

    Attributes:
        number: 1-based measure number
        start: Absolute start in ticks
        tempo: Tempo in BPM, updated by mix-table changes
        repeat_open: Measure opens a repeat
        repeat_close: Repeat count when the measure closes a repeat, else 0
        repeat_alternative: Alternate-ending bitmask
        marker: Rehearsal marker, if any
        time_signature: Time signature
        key_signature: Key signature (offset by +7)
        triplet_feel: Raw triplet-feel byte
    """

    number: int = 1
    start: int = 0
    tempo: int = 120
    repeat_open: bool = False
    repeat_close: int = 0
    repeat_alternative: int = 0
    marker: Optional[Marker] = None
    time_signature: TimeSignature = field(default_factory=TimeSignature)
    key_signature: int = 0
    triplet_feel: int = 0

    @property
    def length(self) -> int:
        """Measure length in ticks."""
        return round_half_away(
            self.time_signature.numerator * self.time_signature.denominator.time()
        )


@dataclass
class Measure:
    """
    One track's content for one measure.

    Only beats that hold at least one note are kept.
    """

    header: MeasureHeader = field(default_factory=MeasureHeader)
    start: int = 0
    clef: Clef = Clef.TREBLE
    key_signature: int = 0
    beats: List[Beat] = field(default_factory=list)

    @property
    def number(self) -> int:
        return self.header.number

    def get_beat(self, start: int) -> Beat:
        """
        Return the beat at ``start``, creating it on first use.

        Args:
            start: Offset from the measure start in ticks

        Returns:
            The existing or newly appended Beat
        """
        for beat in self.beats:
            if beat.start == start:
                return beat
        beat = Beat(start=start)
        self.beats.append(beat)
        return beat

    def prune_empty_beats(self) -> None:
        """Drop beats whose voices hold no notes."""
        self.beats = [beat for beat in self.beats if not beat.is_empty]
