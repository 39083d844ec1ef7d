"""
Note and articulation models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class GraceTransition(Enum):
    """How a grace note connects to its main note."""

    NONE = "none"
    SLIDE = "slide"
    BEND = "bend"
    HAMMER = "hammer"

    @classmethod
    def from_code(cls, code: int) -> Optional["GraceTransition"]:
        """Map the transition byte to a transition, or None for unknown codes."""
        mapping = {0: cls.NONE, 1: cls.SLIDE, 2: cls.BEND, 3: cls.HAMMER}
        return mapping.get(code)


class HarmonicType(Enum):
    """Harmonic kinds stored in the note-effect record."""

    NATURAL = "natural"
    ARTIFICIAL = "artificial"
    TAPPED = "tapped"
    PINCH = "pinch"
    SEMI = "semi"

    @classmethod
    def from_code(cls, code: int) -> Optional["HarmonicType"]:
        mapping = {
            1: cls.NATURAL,
            2: cls.ARTIFICIAL,
            3: cls.TAPPED,
            4: cls.PINCH,
            5: cls.SEMI,
        }
        return mapping.get(code)


@dataclass
class EffectPoint:
    """
    One point on a bend or tremolo-bar curve.

    Attributes:
        position: Position along the note (scaled)
        value: Pitch offset at this position (scaled)
    """

    position: int = 0
    value: int = 0


@dataclass
class Bend:
    """Bend curve of a note."""

    points: List[EffectPoint] = field(default_factory=list)


@dataclass
class TremoloBar:
    """Whammy-bar curve of a beat."""

    points: List[EffectPoint] = field(default_factory=list)


@dataclass
class Grace:
    """
    Grace note played before the main note.

    Attributes:
        fret: Fret of the grace note
        dynamic: Velocity derived from the dynamic byte
        transition: Connection to the main note
        duration: Raw duration byte
        dead: Grace note is muted
        on_beat: Grace note is played on the beat instead of before it
    """

    fret: int = 0
    dynamic: int = 0
    transition: Optional[GraceTransition] = None
    duration: int = 0
    dead: bool = False
    on_beat: bool = False


@dataclass
class TremoloPicking:
    """Tremolo picking at a given note length ("eighth", "sixteenth", "thirty_second")."""

    duration: str = ""


@dataclass
class Harmonic:
    harmonic_type: HarmonicType = HarmonicType.NATURAL


@dataclass
class Trill:
    """
    Trill between the note and a second fret.

    Attributes:
        fret: Fret alternated with the main note
        duration: Trill speed ("sixteenth", "thirty_second", "sixty_fourth")
    """

    fret: int = 0
    duration: str = ""


@dataclass
class NoteEffect:
    """
    Flat bag of articulation flags plus optional structured sub-effects.

    A beat carries one NoteEffect for its beat-level effects; each note
    starts from a copy of it and adds its own flags.
    """

    hammer: bool = False
    let_ring: bool = False
    palm_mute: bool = False
    staccato: bool = False
    vibrato: bool = False
    ghost_note: bool = False
    dead_note: bool = False
    accentuated_note: bool = False
    heavy_accentuated_note: bool = False
    fade_in: bool = False
    slide: bool = False
    tapping: bool = False
    slapping: bool = False
    popping: bool = False

    bend: Optional[Bend] = None
    grace: Optional[Grace] = None
    tremolo_picking: Optional[TremoloPicking] = None
    harmonic: Optional[Harmonic] = None
    trill: Optional[Trill] = None
    tremolo_bar: Optional[TremoloBar] = None

    @property
    def flags(self) -> List[str]:
        """Names of the boolean effects that are set."""
        names = [
            "hammer",
            "let_ring",
            "palm_mute",
            "staccato",
            "vibrato",
            "ghost_note",
            "dead_note",
            "accentuated_note",
            "heavy_accentuated_note",
            "fade_in",
            "slide",
            "tapping",
            "slapping",
            "popping",
        ]
        return [name for name in names if getattr(self, name)]


@dataclass
class Note:
    """
    A single fretted note.

    Attributes:
        string: Physical string number (1 = highest)
        value: Fret number (0-99)
        velocity: MIDI-style velocity, 0 when the file does not set one
        tied: Note continues the previous note on the same string
        effect: Articulations applied to this note
    """

    string: int = 0
    value: int = 0
    velocity: int = 0
    tied: bool = False
    effect: NoteEffect = field(default_factory=NoteEffect)
