"""
Track, string and channel models.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from gptab.models.measure import Color, Measure

PERCUSSION_CHANNEL_INDEX = 9
DEFAULT_BANK = "default bank"
DEFAULT_PERCUSSION_BANK = "default percussion bank"


@dataclass
class ChannelParameter:
    key: str = ""
    value: str = ""


@dataclass
class Channel:
    """
    A mixer channel from the 64-entry channel table.

    Attributes:
        id: 1-based identity assigned when a track binds to it, 0 = unbound
        name: Name of the first track bound to it
        program: Instrument program number
        volume, balance, chorus, reverb, pan, phaser, tremolo: Mix bytes
        bank: Bank label
        is_percussion_channel: True for the fixed percussion slot
        parameters: GM channel indices recorded at binding time
    """

    id: int = 0
    name: str = ""
    program: int = 0
    volume: int = 0
    balance: int = 0
    chorus: int = 0
    reverb: int = 0
    pan: int = 0
    phaser: int = 0
    tremolo: int = 0
    bank: str = DEFAULT_BANK
    is_percussion_channel: bool = False
    parameters: List[ChannelParameter] = field(default_factory=list)

    @property
    def is_bound(self) -> bool:
        return self.id != 0

    def get_parameter(self, key: str) -> Optional[str]:
        for parameter in self.parameters:
            if parameter.key == key:
                return parameter.value
        return None


@dataclass
class GuitarString:
    """
    A physical string of a track.

    Attributes:
        number: String number (1 = highest)
        value: MIDI pitch of the open string
    """

    number: int = 1
    value: int = 0


@dataclass
class Track:
    """
    A single instrument track.

    Attributes:
        number: 1-based track number
        name: Display name
        strings: Open-string tuning, highest string first
        channel_id: Bound channel id, 0 = unbound
        measures: One Measure per measure header
        port: MIDI port
        fret_count: Number of frets
        offset: Capo fret
        color: Display colour
        is_percussion_track: Track flag bit for drum tracks
    """

    number: int = 1
    name: str = ""
    strings: List[GuitarString] = field(default_factory=list)
    channel_id: int = 0
    measures: List[Measure] = field(default_factory=list)
    port: int = 0
    fret_count: int = 24
    offset: int = 0
    color: Color = field(default_factory=Color)
    is_percussion_track: bool = False

    @property
    def tuning(self) -> List[int]:
        """Open-string pitches, highest string first."""
        return [string.value for string in self.strings]

    @property
    def note_count(self) -> int:
        return sum(len(beat.notes) for measure in self.measures for beat in measure.beats)
