"""Tests for score models and value scaling."""

import pytest

from gptab.models.beat import Beat, Division, Duration, Voice
from gptab.models.measure import Measure, MeasureHeader, TimeSignature
from gptab.models.note import Note
from gptab.models.score import Score
from gptab.models.track import Channel, GuitarString, Track
from gptab.utils.scaling import (
    key_signature_from_byte,
    round_half_away,
    scale_bend_position,
    scale_bend_value,
    scale_tremolo_bar_value,
    velocity_from_dynamic,
)


class TestScaling:
    """Test cases for scaled values."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.5, 1), (1.5, 2), (2.49, 2), (-0.5, -1), (-2.5, -3), (0.0, 0)],
    )
    def test_round_half_away(self, value, expected):
        """Test halves round away from zero."""
        assert round_half_away(value) == expected

    def test_bend(self):
        """Test bend position and value scaling."""
        assert scale_bend_position(60) == 12
        assert scale_bend_position(15) == 3
        assert scale_bend_value(100) == 4
        assert scale_bend_value(-25) == -1

    def test_tremolo_bar_value(self):
        """Test tremolo bar values use 0x2F steps."""
        assert scale_tremolo_bar_value(94) == 2
        assert scale_tremolo_bar_value(-47) == -1

    def test_velocity(self):
        """Test dynamic bytes map to velocities."""
        assert velocity_from_dynamic(1) == 15
        assert velocity_from_dynamic(6) == 95
        assert velocity_from_dynamic(8) == 127

    def test_key_signature(self):
        """Test the +7 offset wraps at 8 bits."""
        assert key_signature_from_byte(0) == 7
        assert key_signature_from_byte(250) == 1
        assert key_signature_from_byte(0xF9) == 0


class TestDuration:
    """Test cases for Duration.time."""

    def test_plain(self):
        """Test plain note lengths."""
        assert Duration(value=1).time() == 3840
        assert Duration(value=8).time() == 480

    def test_dots(self):
        """Test dotted and double-dotted lengths."""
        assert Duration(value=4, dotted=True).time() == 1440
        assert Duration(value=4, double_dotted=True).time() == 1680

    def test_tuplet(self):
        """Test tuplet scaling."""
        quintuplet = Duration(value=16, division=Division(enters=5, times=4))

        assert quintuplet.time() == 192


class TestMeasure:
    """Test cases for Measure helpers."""

    def test_get_beat_creates_once(self):
        """Test beats are looked up by start before being created."""
        measure = Measure()

        first = measure.get_beat(0)
        again = measure.get_beat(0)
        other = measure.get_beat(480)

        assert first is again
        assert other is not first
        assert [b.start for b in measure.beats] == [0, 480]

    def test_prune_empty_beats(self):
        """Test only beats holding notes survive pruning."""
        measure = Measure()
        measure.get_beat(0)
        kept = measure.get_beat(960)
        kept.voices[1].notes.append(Note(string=1, value=3))
        measure.get_beat(1920)

        measure.prune_empty_beats()

        assert measure.beats == [kept]

    def test_header_length(self):
        """Test measure length from the time signature."""
        header = MeasureHeader(time_signature=TimeSignature(numerator=7, denominator=Duration(value=8)))

        assert header.length == 3360
        assert Measure(header=header).number == 1


class TestBeat:
    """Test cases for Beat and Voice defaults."""

    def test_two_empty_voices(self):
        """Test a new beat has two independent empty voices."""
        beat = Beat()

        assert len(beat.voices) == 2
        assert all(voice.empty for voice in beat.voices)
        assert beat.voices[0] is not beat.voices[1]
        assert beat.is_empty

    def test_notes_across_voices(self):
        """Test notes of both voices are collected."""
        beat = Beat(voices=[Voice(notes=[Note(string=1)]), Voice(notes=[Note(string=2)])])

        assert [n.string for n in beat.notes] == [1, 2]


class TestScore:
    """Test cases for Score lookups."""

    def test_get_channel(self):
        """Test channel lookup by id; id 0 is never bound."""
        channel = Channel(id=65, name="Lead")
        score = Score(channels=(channel,))

        assert score.get_channel(65) is channel
        assert score.get_channel(0) is None
        assert score.get_channel(66) is None

    def test_counts(self):
        """Test measure and track counts."""
        track = Track(strings=[GuitarString(number=1, value=64)])
        score = Score(measure_headers=(MeasureHeader(), MeasureHeader()), tracks=(track,))

        assert score.measure_count == 2
        assert score.track_count == 1
        assert track.tuning == [64]
        assert track.note_count == 0
