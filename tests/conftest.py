"""Test configuration and fixtures."""

import struct
from typing import Dict, Iterable, List, Optional, Sequence

import pytest

V500 = "FICHIER GUITAR PRO v5.00"
V510 = "FICHIER GUITAR PRO v5.10"

STANDARD_TUNING = [64, 59, 55, 50, 45, 40]
BASS_TUNING = [43, 38, 33, 28]


class TabBuilder:
    """
    Emits synthetic Guitar Pro byte records.

    Every method appends to the buffer and returns the builder, so records
    can be chained:

        data = TabBuilder().u8(3).i32(-1).byte_size_string("Song").build()
    """

    def __init__(self):
        self.buffer = bytearray()

    def __len__(self) -> int:
        return len(self.buffer)

    def build(self) -> bytes:
        return bytes(self.buffer)

    # Primitives

    def u8(self, value: int) -> "TabBuilder":
        self.buffer.append(value & 0xFF)
        return self

    def i32(self, value: int) -> "TabBuilder":
        self.buffer += struct.pack("<i", value)
        return self

    def raw(self, data: bytes) -> "TabBuilder":
        self.buffer += data
        return self

    def zeros(self, count: int) -> "TabBuilder":
        self.buffer += bytes(count)
        return self

    # Strings

    def fixed_byte_string(self, text: str, size: int) -> "TabBuilder":
        encoded = text.encode("latin-1")
        self.u8(len(encoded))
        if size > 0:
            self.raw(encoded[:size].ljust(size, b"\x00"))
        else:
            self.raw(encoded)
        return self

    def byte_size_string(self, text: str) -> "TabBuilder":
        encoded = text.encode("latin-1")
        self.u8(len(encoded) + 1)
        return self.fixed_byte_string(text, len(encoded))

    def int_size_string(self, text: str) -> "TabBuilder":
        encoded = text.encode("latin-1")
        return self.i32(len(encoded)).raw(encoded)

    def long_string(self, text: str) -> "TabBuilder":
        encoded = text.encode("latin-1")
        return self.i32(len(encoded) + 1).u8(len(encoded)).raw(encoded)

    # GP5 records

    def header(
        self,
        version: str = V510,
        title: str = "",
        subtitle: str = "",
        artist: str = "",
        album: str = "",
        lyricist: str = "",
        composer: str = "",
        copyright: str = "",
        transcriber: str = "",
        instructions: str = "",
        notices: Sequence[str] = (),
    ) -> "TabBuilder":
        self.fixed_byte_string(version, 30)
        for text in (
            title,
            subtitle,
            artist,
            album,
            lyricist,
            composer,
            copyright,
            transcriber,
            instructions,
        ):
            self.byte_size_string(text)
        self.i32(len(notices))
        for notice in notices:
            self.byte_size_string(notice)
        return self

    def song_preamble(
        self,
        version_index: int = 1,
        lyrics_track: int = 0,
        lyrics: str = "",
        tempo_name: str = "",
        tempo: int = 120,
        key: int = 0,
    ) -> "TabBuilder":
        self.i32(lyrics_track).int_size_string(lyrics)
        for _ in range(4):
            self.i32(0).int_size_string("")
        self.zeros(49 if version_index > 0 else 30)
        for _ in range(11):
            self.zeros(4).fixed_byte_string("", 0)
        self.byte_size_string(tempo_name).i32(tempo)
        if version_index > 0:
            self.zeros(1)
        return self.u8(key).zeros(3).u8(0)

    def channel_table(self, programs: Optional[Dict[int, int]] = None) -> "TabBuilder":
        programs = programs or {}
        for index in range(64):
            self.i32(programs.get(index, 0))
            self.raw(bytes([100, 0, 8, 4, 64, 0, 0]))
            self.zeros(2)
        return self

    def counts(self, measures: int, tracks: int) -> "TabBuilder":
        return self.zeros(42).i32(measures).i32(tracks)

    def measure_header(
        self,
        first: bool = False,
        numerator: Optional[int] = None,
        denominator: Optional[int] = None,
        tuplet: int = 0,
        repeat_open: bool = False,
        repeat_close: Optional[int] = None,
        alternative: Optional[int] = None,
        marker: Optional[str] = None,
        key: Optional[int] = None,
        triplet_feel: int = 0,
    ) -> "TabBuilder":
        flags = 0
        if numerator is not None:
            flags |= 0x01
        if denominator is not None:
            flags |= 0x02
        if repeat_open:
            flags |= 0x04
        if repeat_close is not None:
            flags |= 0x08
        if alternative is not None:
            flags |= 0x10
        if marker is not None:
            flags |= 0x20
        if key is not None:
            flags |= 0x40

        if not first:
            self.zeros(1)
        self.u8(flags)
        if numerator is not None:
            self.i32(numerator)
        if denominator is not None:
            self.u8(denominator).i32(tuplet)
        if repeat_close is not None:
            self.u8(repeat_close)
        if marker is not None:
            self.byte_size_string(marker).raw(bytes([255, 0, 0, 0]))
        if alternative is not None:
            self.u8(alternative)
        if key is not None:
            self.u8(key).zeros(1)
        if flags & 0x03:
            self.zeros(4)
        if not flags & 0x10:
            self.zeros(1)
        return self.u8(triplet_feel)

    def track(
        self,
        number: int,
        name: str,
        tuning: Sequence[int] = STANDARD_TUNING,
        gm1: int = 1,
        gm2: int = 2,
        version_index: int = 1,
        flags: int = 0,
        port: int = 1,
        fret_count: int = 24,
        offset: int = 0,
    ) -> "TabBuilder":
        if number == 1 or version_index == 0:
            self.zeros(1)
        self.u8(flags).fixed_byte_string(name, 40)
        self.i32(len(tuning))
        for index in range(7):
            self.i32(tuning[index] if index < len(tuning) else 0)
        self.i32(port).i32(gm1).i32(gm2)
        self.i32(fret_count).i32(offset)
        self.raw(bytes([255, 0, 0, 0]))
        self.zeros(49 if version_index > 0 else 44)
        if version_index > 0:
            self.byte_size_string("").byte_size_string("")
        return self

    def end_tracks(self, version_index: int = 1) -> "TabBuilder":
        return self.zeros(2 if version_index == 0 else 1)

    def measure(
        self, voice1: Iterable[bytes] = (), voice2: Iterable[bytes] = ()
    ) -> "TabBuilder":
        for beats in (list(voice1), list(voice2)):
            self.i32(len(beats))
            for beat in beats:
                self.raw(beat)
        return self.zeros(1)


def note_record(
    fret: Optional[int] = None,
    note_type: int = 1,
    velocity: Optional[int] = None,
    accent: bool = False,
    heavy_accent: bool = False,
    ghost: bool = False,
    effects: Optional[bytes] = None,
) -> bytes:
    """
    Encode a note record.

    With ``note_type=2`` (tied) no fret byte is written.
    """
    flags = 0
    if fret is not None or note_type != 1:
        flags |= 0x20
    if velocity is not None:
        flags |= 0x10
    if accent:
        flags |= 0x40
    if heavy_accent:
        flags |= 0x02
    if ghost:
        flags |= 0x04
    if effects is not None:
        flags |= 0x08

    out = TabBuilder().u8(flags)
    if flags & 0x20:
        out.u8(note_type)
    if velocity is not None:
        out.u8(velocity)
    if flags & 0x20 and note_type != 2:
        out.u8(fret or 0)
    out.zeros(1)
    if effects is not None:
        out.raw(effects)
    return out.build()


def beat_record(
    notes: Optional[Dict[int, bytes]] = None,
    duration: int = 0,
    dotted: bool = False,
    tuplet: Optional[int] = None,
    status: Optional[int] = None,
    chord: Optional[bytes] = None,
    text: Optional[str] = None,
    effects: Optional[bytes] = None,
    mix_change: Optional[bytes] = None,
    mask: Optional[int] = None,
) -> bytes:
    """
    Encode a beat record.

    Args:
        notes: Note records keyed by 0-based string index
        duration: Signed duration exponent (0 = quarter)
        mask: String mask override; derived from ``notes`` when omitted
    """
    notes = notes or {}
    flags = 0
    if dotted:
        flags |= 0x01
    if chord is not None:
        flags |= 0x02
    if text is not None:
        flags |= 0x04
    if effects is not None:
        flags |= 0x08
    if mix_change is not None:
        flags |= 0x10
    if tuplet is not None:
        flags |= 0x20
    if status is not None:
        flags |= 0x40

    out = TabBuilder().u8(flags)
    if status is not None:
        out.u8(status)
    out.u8(duration)
    if tuplet is not None:
        out.i32(tuplet)
    if chord is not None:
        out.raw(chord)
    if text is not None:
        out.byte_size_string(text)
    if effects is not None:
        out.raw(effects)
    if mix_change is not None:
        out.raw(mix_change)

    if mask is None:
        mask = 0
        for index in notes:
            mask |= 1 << (6 - index)
    out.u8(mask)
    for index in sorted(notes):
        out.raw(notes[index])
    return out.zeros(1).u8(0).build()


def build_song(
    version: str = V510,
    tracks: Optional[List[dict]] = None,
    headers: Optional[List[dict]] = None,
    measures: Optional[List[List[bytes]]] = None,
    programs: Optional[Dict[int, int]] = None,
    tempo: int = 120,
    key: int = 0,
    **text,
) -> bytes:
    """
    Build a complete GP5 file.

    Args:
        tracks: Keyword arguments for TabBuilder.track, one dict per track
        headers: Keyword arguments for TabBuilder.measure_header
        measures: Per measure, one encoded measure body per track
    """
    version_index = 0 if version == V500 else 1
    tracks = tracks if tracks is not None else [{"name": "Guitar"}]
    headers = headers if headers is not None else [{"numerator": 4, "denominator": 4}]

    builder = TabBuilder().header(version=version, **text)
    builder.song_preamble(version_index=version_index, tempo=tempo, key=key)
    builder.channel_table(programs)
    builder.counts(len(headers), len(tracks))

    for index, header in enumerate(headers):
        builder.measure_header(first=index == 0, **header)
    for index, track in enumerate(tracks):
        builder.track(index + 1, version_index=version_index, **track)
    builder.end_tracks(version_index)

    if measures is None:
        empty = TabBuilder().measure().build()
        measures = [[empty] * len(tracks) for _ in headers]
    for row in measures:
        for body in row:
            builder.raw(body)
    return builder.build()


def measure_body(voice1: Iterable[bytes] = (), voice2: Iterable[bytes] = ()) -> bytes:
    return TabBuilder().measure(voice1, voice2).build()


@pytest.fixture
def builder():
    """Return an empty TabBuilder."""
    return TabBuilder()


@pytest.fixture
def song_data():
    """
    Return a v5.10 file with three tracks and two measures.

    Track 1 (guitar, GM 1/2): measure 1 has a fret-5 note on string 3 and
    a fret-3 note on string 1; measure 2 has a tied note on string 3.
    Track 2 (bass, GM 2/3): one half note with hammer and vibrato.
    Track 3 (drums, GM 10/10): only an empty beat.
    """
    guitar_m1 = measure_body(
        [
            beat_record({2: note_record(fret=5)}),
            beat_record({0: note_record(fret=3, velocity=6)}),
        ]
    )
    bass_m1 = measure_body(
        [beat_record({3: note_record(fret=0, effects=bytes([0x02, 0x40]))}, duration=-1)]
    )
    drums_m1 = measure_body([beat_record({})])
    guitar_m2 = measure_body([beat_record({2: note_record(note_type=2)})])
    empty = measure_body()

    return build_song(
        title="Test Song",
        subtitle="Sub",
        artist="Tester",
        album="Album",
        lyricist="Words",
        composer="Music",
        copyright="(c) 2024",
        transcriber="Tabber",
        instructions="Play it",
        notices=["first notice"],
        programs={0: 25, 1: 33, 5: -3},
        tracks=[
            {"name": "Guitar", "tuning": STANDARD_TUNING, "gm1": 1, "gm2": 2},
            {"name": "Bass", "tuning": BASS_TUNING, "gm1": 2, "gm2": 3},
            {"name": "Drums", "tuning": [0] * 6, "gm1": 10, "gm2": 10, "flags": 0x01},
        ],
        headers=[
            {"numerator": 4, "denominator": 4},
            {"repeat_open": True, "marker": "Verse"},
        ],
        measures=[
            [guitar_m1, bass_m1, drums_m1],
            [guitar_m2, empty, empty],
        ],
    )


@pytest.fixture
def song_file(tmp_path, song_data):
    """Write the synthetic song to a temporary .gp5 file."""
    path = tmp_path / "song.gp5"
    path.write_bytes(song_data)
    return path


def info_header(version_line: str, fields: Sequence[str] = (), pad: int = 0) -> bytes:
    """
    Build the start of a Guitar Pro 3-5 file for the metadata-only reader.

    The version string sits in a 30-byte slot after its length byte. The
    text fields are LongStrings; ``pad`` bytes are inserted before them so
    they start at ``len(version_line) + 6`` plus the tag-dependent skip.
    """
    builder = TabBuilder().fixed_byte_string(version_line, 30).zeros(pad)
    for text in fields:
        builder.long_string(text)
    return builder.build()
