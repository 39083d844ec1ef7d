"""
Beat, voice and duration models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from gptab.models.note import Note, NoteEffect

# Internal ticks per quarter note
QUARTER_TIME = 960


@dataclass
class Division:
    """
    Tuplet ratio: ``enters`` notes in the time of ``times``.

    A plain (non-tuplet) duration is 1:1.
    """

    enters: int = 1
    times: int = 1

    @property
    def is_tuplet(self) -> bool:
        return (self.enters, self.times) != (1, 1)


@dataclass
class Duration:
    """
    Rhythmic length of a voice.

    Attributes:
        value: Reciprocal note length (1 = whole, 4 = quarter, 16 = sixteenth)
        dotted: Length increased by half
        double_dotted: Length increased by three quarters
        division: Tuplet ratio
    """

    value: float = 4
    dotted: bool = False
    double_dotted: bool = False
    division: Division = field(default_factory=Division)

    def time(self) -> float:
        """
        Length in internal ticks.

        Returns:
            ``960 * 4 / value``, extended for dots and scaled by the tuplet
        """
        time = QUARTER_TIME * 4.0 / self.value
        if self.dotted:
            time += time / 2
        elif self.double_dotted:
            time += (time / 4) * 3
        return time * self.division.times / self.division.enters


class StrokeDirection(Enum):
    UP = "up"
    DOWN = "down"


@dataclass
class Stroke:
    """Strum stroke of a beat; ``value`` is the raw stroke speed byte."""

    direction: StrokeDirection = StrokeDirection.DOWN
    value: int = 0


@dataclass
class Chord:
    """
    Chord diagram attached to a beat.

    Attributes:
        name: Chord name
        first_fret: Fret shown at the top of the diagram
        frets: One fret per track string (-1 = not played)
    """

    name: str = ""
    first_fret: int = 0
    frets: List[int] = field(default_factory=list)


@dataclass
class MixTableChange:
    """
    Mixer change embedded in a beat.

    Only the values are kept; the transition durations that follow them in
    the file are skipped.
    """

    instrument: int = 0
    volume: int = 0
    pan: int = 0
    chorus: int = 0
    reverb: int = 0
    phaser: int = 0
    tremolo: int = 0
    tempo_name: str = ""
    tempo: int = -1


@dataclass
class Voice:
    """
    One of the two voices of a beat.

    A voice that was never decoded stays empty.
    """

    empty: bool = True
    duration: Duration = field(default_factory=Duration)
    notes: List[Note] = field(default_factory=list)


def _two_voices() -> List[Voice]:
    return [Voice(), Voice()]


@dataclass
class Beat:
    """
    A rhythmic slot in a measure holding two voices.

    Attributes:
        start: Offset from the measure start in ticks
        voices: Primary and secondary voice
        stroke: Strum direction, if any
        chord: Chord diagram, if any
        text: Free text, if any
        effect: Beat-level effects of the last record with an effects block
        mix_change: Mixer change, if any
    """

    start: int = 0
    voices: List[Voice] = field(default_factory=_two_voices)
    stroke: Optional[Stroke] = None
    chord: Optional[Chord] = None
    text: Optional[str] = None
    effect: NoteEffect = field(default_factory=NoteEffect)
    mix_change: Optional[MixTableChange] = None

    @property
    def is_empty(self) -> bool:
        """True when no voice holds a note."""
        return all(not voice.notes for voice in self.voices)

    @property
    def notes(self) -> List[Note]:
        """All notes of both voices."""
        return [note for voice in self.voices for note in voice.notes]
