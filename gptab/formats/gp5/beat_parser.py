"""
Beat, voice and note decoding for Guitar Pro 5 measures.

Each measure holds two voices. Each voice is a beat count followed by
that many beat records:

    beat flags (1 byte)
      0x01 dotted duration
      0x02 chord diagram
      0x04 free text
      0x08 beat effects
      0x10 mix-table change
      0x20 tuplet code follows the duration byte
      0x40 beat status byte follows
    [status] duration [tuplet] [chord] [text] [effects] [mix change]
    string mask (bit 6 = first string ... bit 0 = seventh string)
    one note record per present string
    reserved byte, trailing flags (0x02 = one more reserved byte)

Every record-level reader catches OutOfBoundsError, logs it and returns a
zero-valued result, so a damaged measure degrades without stopping the
decode of the rest of the score.
"""

import copy
import logging
from typing import List, Optional

from gptab.models.beat import (
    Beat,
    Chord,
    Division,
    Duration,
    MixTableChange,
    Stroke,
    StrokeDirection,
)
from gptab.models.measure import Measure, MeasureHeader
from gptab.models.note import (
    Bend,
    EffectPoint,
    Grace,
    GraceTransition,
    Harmonic,
    HarmonicType,
    Note,
    NoteEffect,
    TremoloBar,
    TremoloPicking,
    Trill,
)
from gptab.models.track import GuitarString, Track
from gptab.utils.byte_cursor import ByteCursor
from gptab.utils.strings import read_byte_size_string, read_fixed_byte_string
from gptab.utils.scaling import (
    scale_bend_position,
    scale_bend_value,
    scale_tremolo_bar_position,
    scale_tremolo_bar_value,
    velocity_from_dynamic,
)
from gptab.utils.validation import OutOfBoundsError

logger = logging.getLogger(__name__)

VOICE_COUNT = 2
MAX_STRINGS = 7
MAX_FRET = 100

# Tuplet code -> (enters, times)
TUPLET_DIVISIONS = {
    3: (3, 2),
    5: (5, 5),
    6: (6, 4),
    7: (7, 4),
    9: (9, 8),
    10: (10, 8),
    11: (11, 8),
    12: (12, 8),
    13: (13, 8),
}

TREMOLO_PICKING_DURATIONS = {1: "eighth", 2: "sixteenth", 3: "thirty_second"}
TRILL_DURATIONS = {1: "sixteenth", 2: "thirty_second", 3: "sixty_fourth"}

NOTE_TYPE_TIED = 0x02
NOTE_TYPE_DEAD = 0x03


def division_from_code(code: int) -> Division:
    """
    Map a tuplet code to a Division.

    Unknown codes give the plain 1:1 division.
    """
    enters, times = TUPLET_DIVISIONS.get(code, (1, 1))
    return Division(enters=enters, times=times)


def duration_from_byte(raw: int, dotted: bool = False) -> Duration:
    """
    Build a Duration from the signed duration byte.

    The byte is an exponent centred on the quarter note:
    -2 whole, -1 half, 0 quarter, 1 eighth, 2 sixteenth.

    Example:
        duration_from_byte(2).time() -> 240.0
    """
    return Duration(value=2 ** (raw + 4) / 4, dotted=dotted)


class BeatParser:
    """
    Decoder for the measure/beat/note grammar.

    Example:
        parser = BeatParser(cursor, version_index=1)
        parser.read_measure(measure, track)
    """

    def __init__(self, cursor: ByteCursor, version_index: int = 0):
        self.cursor = cursor
        self.version_index = version_index
        self.tempo_changes: List[int] = []

    # ------------------------------------------------------------------
    # Measures and beats
    # ------------------------------------------------------------------

    def read_measure(self, measure: Measure, track: Track) -> None:
        """
        Decode both voices of one measure into ``measure``.

        The measure must already be attached to ``track`` so that tied
        notes inside it can resolve against earlier beats.
        """
        for voice_index in range(VOICE_COUNT):
            start = 0.0
            try:
                beat_count = self.cursor.read_int()
            except OutOfBoundsError as e:
                logger.warning(
                    f"Measure {measure.number}, track {track.number}: "
                    f"cannot read beat count of voice {voice_index}: {e}"
                )
                break

            for _ in range(max(beat_count, 0)):
                if self.cursor.exhausted:
                    logger.warning(
                        f"Measure {measure.number}, track {track.number}: "
                        f"buffer exhausted after {len(measure.beats)} beat(s)"
                    )
                    break
                start += self.read_beat(int(start), measure, track, voice_index)

        measure.prune_empty_beats()

    def read_beat(self, start: int, measure: Measure, track: Track, voice_index: int) -> float:
        """
        Decode one beat record into the voice slot of the beat at ``start``.

        Args:
            start: Offset from the measure start in ticks
            measure: Measure being decoded
            track: Track owning the measure
            voice_index: 0 for the primary voice, 1 for the secondary

        Returns:
            Duration of the beat in ticks, or 0 when it produced no notes
        """
        cursor = self.cursor
        try:
            flags = cursor.read_byte()
        except OutOfBoundsError as e:
            logger.warning(f"Cannot read beat flags at offset {cursor.position}: {e}")
            return 0.0

        beat = measure.get_beat(start)
        # Effects apply to the notes of this record only, not to the shared beat
        effect = NoteEffect()
        voice = beat.voices[voice_index]
        voice.empty = False

        try:
            if flags & 0x40:
                status = cursor.read_byte()
                voice.empty = (status & 0x02) == 0

            duration = self.read_duration(flags)
            voice.duration = duration

            if flags & 0x02:
                beat.chord = self.read_chord(track.strings)
            if flags & 0x04:
                beat.text = self.read_text()
            if flags & 0x08:
                self.read_beat_effects(beat, effect)
                beat.effect = effect
            if flags & 0x10:
                beat.mix_change = self.read_mix_change(measure.header)

            string_flags = cursor.read_byte()
            for string in self._present_strings(string_flags, track.strings):
                note = self.read_note(string, track, effect)
                if note is not None:
                    voice.notes.append(note)

            cursor.skip(1)
            trailing = cursor.read_byte()
            if trailing & 0x02:
                cursor.skip(1)
        except OutOfBoundsError as e:
            logger.warning(f"Beat at {start} in measure {measure.number} is truncated: {e}")
            return 0.0

        if voice.notes:
            return duration.time()
        return 0.0

    @staticmethod
    def _present_strings(string_flags: int, strings: List[GuitarString]) -> List[GuitarString]:
        present = []
        for bit in range(MAX_STRINGS - 1, -1, -1):
            index = MAX_STRINGS - 1 - bit
            if string_flags & (1 << bit) and index < len(strings):
                present.append(strings[index])
        return present

    def read_duration(self, flags: int) -> Duration:
        """
        Read a duration byte and, when flag 0x20 is set, its tuplet code.

        Args:
            flags: Beat flags byte

        Returns:
            Duration with a 1:1 division when no known tuplet is present
        """
        raw = self.cursor.read_signed_byte()
        duration = duration_from_byte(raw, dotted=bool(flags & 0x01))
        if flags & 0x20:
            duration.division = division_from_code(self.cursor.read_int())
        return duration

    # ------------------------------------------------------------------
    # Beat-level records
    # ------------------------------------------------------------------

    def read_chord(self, strings: List[GuitarString]) -> Optional[Chord]:
        """
        Read a chord diagram.

        Returns:
            The chord, or None when the track has no strings or the record
            is truncated
        """
        cursor = self.cursor
        chord = Chord()
        try:
            cursor.skip(17)
            chord.name = read_fixed_byte_string(cursor, 21)
            cursor.skip(4)
            chord.first_fret = cursor.read_int()
            for index in range(MAX_STRINGS):
                fret = cursor.read_int()
                if index < len(strings):
                    chord.frets.append(fret)
            cursor.skip(32)
        except OutOfBoundsError as e:
            logger.warning(f"Chord diagram is truncated: {e}")
            return None

        if not strings:
            return None
        return chord

    def read_text(self) -> Optional[str]:
        try:
            return read_byte_size_string(self.cursor)
        except OutOfBoundsError as e:
            logger.warning(f"Beat text is truncated: {e}")
            return None

    def read_beat_effects(self, beat: Beat, effect: NoteEffect) -> None:
        """
        Read beat-level effects into ``effect`` and the stroke into ``beat``.

        Layout: two flag bytes, then the tap/slap/pop byte (flags1 0x20),
        the tremolo bar (flags2 0x04), the stroke bytes (flags1 0x40) and
        the pick-stroke byte (flags2 0x02).
        """
        cursor = self.cursor
        try:
            flags1 = cursor.read_byte()
            flags2 = cursor.read_byte()
            effect.fade_in = bool(flags1 & 0x10)
            effect.vibrato = bool(flags1 & 0x02)

            if flags1 & 0x20:
                slap = cursor.read_byte()
                effect.tapping = slap == 1
                effect.slapping = slap == 2
                effect.popping = slap == 3

            if flags2 & 0x04:
                effect.tremolo_bar = self.read_tremolo_bar()

            if flags1 & 0x40:
                stroke_up = cursor.read_byte()
                stroke_down = cursor.read_byte()
                if stroke_up > 0:
                    beat.stroke = Stroke(direction=StrokeDirection.UP, value=stroke_up)
                elif stroke_down > 0:
                    beat.stroke = Stroke(direction=StrokeDirection.DOWN, value=stroke_down)

            if flags2 & 0x02:
                cursor.read_byte()
        except OutOfBoundsError as e:
            logger.warning(f"Beat effects are truncated: {e}")

    def read_tremolo_bar(self) -> Optional[TremoloBar]:
        """
        Read a tremolo-bar curve.

        Positions are kept as stored; values are divided by 0x2F.
        """
        cursor = self.cursor
        bar = TremoloBar()
        try:
            cursor.skip(5)
            point_count = cursor.read_int()
            for _ in range(max(point_count, 0)):
                position = cursor.read_int()
                value = cursor.read_int()
                cursor.read_byte()
                bar.points.append(
                    EffectPoint(
                        position=scale_tremolo_bar_position(position),
                        value=scale_tremolo_bar_value(value),
                    )
                )
        except OutOfBoundsError as e:
            logger.warning(f"Tremolo bar is truncated: {e}")
            return None
        return bar if bar.points else None

    def read_mix_change(self, header: MeasureHeader) -> Optional[MixTableChange]:
        """
        Read a mix-table change.

        A non-negative tempo updates the tempo of ``header``.
        """
        cursor = self.cursor
        change = MixTableChange()
        try:
            change.instrument = cursor.read_byte()
            cursor.skip(16)
            change.volume = cursor.read_byte()
            change.pan = cursor.read_byte()
            change.chorus = cursor.read_byte()
            change.reverb = cursor.read_byte()
            change.phaser = cursor.read_byte()
            change.tremolo = cursor.read_byte()
            change.tempo_name = read_byte_size_string(cursor)
            change.tempo = cursor.read_int()

            # One transition byte per mix value
            cursor.read_bytes(6)

            if change.tempo >= 0:
                header.tempo = change.tempo
                self.tempo_changes.append(change.tempo)
                cursor.skip(1)
                if self.version_index > 0:
                    cursor.skip(1)

            cursor.read_byte()
            cursor.skip(1)
            if self.version_index > 0:
                read_byte_size_string(cursor)
                read_byte_size_string(cursor)
        except OutOfBoundsError as e:
            logger.warning(f"Mix table change is truncated: {e}")
            return None
        return change

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def read_note(
        self, string: GuitarString, track: Track, beat_effect: NoteEffect
    ) -> Optional[Note]:
        """
        Read one note record.

        Note flags:
            0x01 eight reserved bytes
            0x02 heavy accent
            0x04 ghost note
            0x08 note effects follow
            0x10 velocity byte
            0x20 note type byte, and later the fret byte
            0x40 accent
            0x80 two reserved bytes

        A tied note takes its fret from the track history and has no fret
        byte in the stream.

        Args:
            string: String the note is played on
            track: Track owning the note, used for tied-note lookup
            beat_effect: Beat-level effects copied into the note

        Returns:
            The note, or None if its flags byte is missing
        """
        cursor = self.cursor
        try:
            flags = cursor.read_byte()
        except OutOfBoundsError as e:
            logger.warning(f"Cannot read note flags on string {string.number}: {e}")
            return None

        note = Note(string=string.number, effect=copy.deepcopy(beat_effect))
        note.effect.accentuated_note = bool(flags & 0x40)
        note.effect.heavy_accentuated_note = bool(flags & 0x02)
        note.effect.ghost_note = bool(flags & 0x04)

        try:
            if flags & 0x20:
                note_type = cursor.read_byte()
                note.tied = note_type == NOTE_TYPE_TIED
                note.effect.dead_note = note_type == NOTE_TYPE_DEAD

            if flags & 0x10:
                note.velocity = velocity_from_dynamic(cursor.read_byte())

            # The type flag also gates the fret byte
            if flags & 0x20:
                if note.tied:
                    value = self.get_tied_note_value(string.number, track)
                else:
                    value = cursor.read_byte()
                note.value = value if 0 <= value < MAX_FRET else 0

            if flags & 0x80:
                cursor.skip(2)
            if flags & 0x01:
                cursor.skip(8)
            cursor.skip(1)
        except OutOfBoundsError as e:
            logger.warning(f"Note on string {string.number} is truncated: {e}")
            return note

        if flags & 0x08:
            self.read_note_effects(note.effect)

        return note

    @staticmethod
    def get_tied_note_value(string_number: int, track: Track) -> int:
        """
        Find the fret of the latest note on a string.

        Measures are searched latest first, beats latest first within a
        measure, skipping empty voices.

        Returns:
            The fret value, or 0 if the string has no earlier note
        """
        for measure in reversed(track.measures):
            for beat in reversed(measure.beats):
                for voice in beat.voices:
                    if voice.empty:
                        continue
                    for note in reversed(voice.notes):
                        if note.string == string_number:
                            return note.value
        return 0

    def read_note_effects(self, effect: NoteEffect) -> None:
        """
        Read the note-effect record into ``effect``.

        flags1: 0x01 bend, 0x02 hammer, 0x08 let ring, 0x10 grace.
        flags2: 0x01 staccato, 0x02 palm mute, 0x04 tremolo picking,
        0x08 slide, 0x10 harmonic, 0x20 trill, 0x40 vibrato.
        """
        cursor = self.cursor
        try:
            flags1 = cursor.read_byte()
            flags2 = cursor.read_byte()
        except OutOfBoundsError as e:
            logger.warning(f"Cannot read note effect flags: {e}")
            return

        if flags1 & 0x01:
            effect.bend = self.read_bend()
        if flags1 & 0x10:
            effect.grace = self.read_grace()
        if flags2 & 0x04:
            effect.tremolo_picking = self.read_tremolo_picking()
        if flags2 & 0x08:
            effect.slide = True
            try:
                cursor.read_byte()
            except OutOfBoundsError as e:
                logger.warning(f"Slide type is truncated: {e}")
        if flags2 & 0x10:
            effect.harmonic = self.read_harmonic()
        if flags2 & 0x20:
            effect.trill = self.read_trill()

        effect.hammer = bool(flags1 & 0x02)
        effect.let_ring = bool(flags1 & 0x08)
        effect.vibrato = bool(flags2 & 0x40)
        effect.palm_mute = bool(flags2 & 0x02)
        effect.staccato = bool(flags2 & 0x01)

    def read_bend(self) -> Optional[Bend]:
        cursor = self.cursor
        bend = Bend()
        try:
            cursor.skip(5)
            point_count = cursor.read_int()
            for _ in range(max(point_count, 0)):
                position = cursor.read_int()
                value = cursor.read_int()
                cursor.read_byte()
                bend.points.append(
                    EffectPoint(
                        position=scale_bend_position(position),
                        value=scale_bend_value(value),
                    )
                )
        except OutOfBoundsError as e:
            logger.warning(f"Bend is truncated: {e}")
            return None
        return bend if bend.points else None

    def read_grace(self) -> Optional[Grace]:
        """Read a grace note: fret, dynamic, transition, duration and flags bytes."""
        cursor = self.cursor
        try:
            fret = cursor.read_byte()
            dynamic = cursor.read_byte()
            transition = cursor.read_byte()
            duration = cursor.read_byte()
            flags = cursor.read_byte()
        except OutOfBoundsError as e:
            logger.warning(f"Grace note is truncated: {e}")
            return None

        return Grace(
            fret=fret,
            dynamic=velocity_from_dynamic(dynamic),
            transition=GraceTransition.from_code(transition),
            duration=duration,
            dead=bool(flags & 0x01),
            on_beat=bool(flags & 0x02),
        )

    def read_tremolo_picking(self) -> Optional[TremoloPicking]:
        try:
            value = self.cursor.read_byte()
        except OutOfBoundsError as e:
            logger.warning(f"Tremolo picking is truncated: {e}")
            return None

        duration = TREMOLO_PICKING_DURATIONS.get(value)
        if duration is None:
            return None
        return TremoloPicking(duration=duration)

    def read_harmonic(self) -> Optional[Harmonic]:
        """
        Read a harmonic record.

        Artificial harmonics carry 3 more bytes, tapped harmonics 1.
        """
        cursor = self.cursor
        try:
            harmonic_type = HarmonicType.from_code(cursor.read_byte())
        except OutOfBoundsError as e:
            logger.warning(f"Harmonic is truncated: {e}")
            return None

        if harmonic_type is HarmonicType.ARTIFICIAL:
            cursor.skip(3)
        elif harmonic_type is HarmonicType.TAPPED:
            cursor.skip(1)

        if harmonic_type is None:
            return None
        return Harmonic(harmonic_type=harmonic_type)

    def read_trill(self) -> Optional[Trill]:
        cursor = self.cursor
        try:
            fret = cursor.read_byte()
            period = cursor.read_byte()
        except OutOfBoundsError as e:
            logger.warning(f"Trill is truncated: {e}")
            return None

        duration = TRILL_DURATIONS.get(period)
        if duration is None:
            return None
        return Trill(fret=fret, duration=duration)
