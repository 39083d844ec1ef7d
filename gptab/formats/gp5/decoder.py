"""
Guitar Pro 5 file decoder.

Walks a complete GP5 buffer in file order and assembles a Score.

File layout:
    version             FixedByteString(30)
    header text         9 x ByteSizePrefixedString, notice count + notices
    lyrics              int track, IntSizePrefixedString, 4 x (int, string)
    page setup          30 (v5.00) or 49 (v5.10) bytes + 11 x (4 bytes, string)
    tempo               ByteSizePrefixedString name, int tempo
    key signature       byte (+7), 3 reserved bytes, octave byte
    channel table       64 x (int program, 7 mix bytes, 2 reserved bytes)
    directions, reverb  42 bytes
    counts              int measure count, int track count
    measure headers     one per measure
    tracks              one per track, then 2 (v5.00) or 1 (v5.10) bytes
    measures            for each measure, for each track: 2 voices, 1 byte

The version and header text are fatal on failure. Everything after them is
decoded with the degrade-and-continue policy: a truncated field is logged
and left zero-valued.
"""

import copy
import logging
from typing import Dict, List, Optional, Tuple

from gptab.formats.gp5.beat_parser import BeatParser, division_from_code
from gptab.models.beat import QUARTER_TIME, Duration
from gptab.models.measure import Clef, Color, Marker, Measure, MeasureHeader, TimeSignature
from gptab.models.score import Lyric, Score
from gptab.models.track import (
    DEFAULT_BANK,
    DEFAULT_PERCUSSION_BANK,
    PERCUSSION_CHANNEL_INDEX,
    Channel,
    ChannelParameter,
    GuitarString,
    Track,
)
from gptab.utils.byte_cursor import ByteCursor
from gptab.utils.scaling import key_signature_from_byte
from gptab.utils.strings import (
    read_byte_size_string,
    read_fixed_byte_string,
    read_int_size_string,
)
from gptab.utils.validation import (
    InvalidContainerError,
    OutOfBoundsError,
    UnsupportedVersionError,
    detect_signature,
    is_compressed_container,
    match_version,
    parse_version_number,
)

logger = logging.getLogger(__name__)

GM_CHANNEL_1 = "gm channel 1"
GM_CHANNEL_2 = "gm channel 2"

# Open-string pitch at or below which a track is written in bass clef
BASS_CLEF_MAX_PITCH = 34


class GP5Decoder:
    """
    Stateful decoder for one GP5 buffer.

    A decoder instance holds the cursor and the accumulators of a single
    decode; create a new one (or call ``decode`` again) per file.

    Example:
        score = GP5Decoder().decode(data)
        print(score.title, score.track_count)
    """

    VERSIONS = ("FICHIER GUITAR PRO v5.00", "FICHIER GUITAR PRO v5.10")

    VERSION_SLOT_SIZE = 30
    CHANNEL_COUNT = 64
    TRACK_NAME_SIZE = 40
    TUNING_SLOTS = 7
    LYRIC_LINES = 4
    PAGE_SETUP_LINES = 11

    DEFAULT_NUMERATOR = 4

    def __init__(self):
        self._reset()

    def _reset(self) -> None:
        self.cursor = ByteCursor(b"")
        self.version = ""
        self.version_index = 0
        self.major = 0
        self.minor = 0
        self.header_fields: Dict[str, str] = {}
        self.notices: List[str] = []
        self.lyrics = Lyric()
        self.tempo_name = ""
        self.tempo = 120
        self.key_signature = 0
        self.channel_table: List[Channel] = []
        self.bound_channels: List[Channel] = []
        self.measure_headers: List[MeasureHeader] = []
        self.tracks: List[Track] = []

    def decode(self, data: bytes) -> Score:
        """
        Decode a complete GP5 buffer.

        Args:
            data: Entire file contents

        Returns:
            The decoded Score

        Raises:
            InvalidContainerError: Empty buffer or missing signature
            UnsupportedVersionError: Compressed container or unknown version
            MalformedVersionError: Version without a major.minor number
            OutOfBoundsError: Buffer ends inside the version or header text
        """
        self._reset()
        self.cursor = ByteCursor(data)

        self.read_version(data)
        self.read_header_text()
        self.read_song_preamble()
        self.read_channel_table()

        measure_count, track_count = self.read_counts()
        self.read_measure_headers(measure_count)
        self.read_tracks(track_count)
        self.read_measures()

        return self.assemble()

    # ------------------------------------------------------------------
    # Fatal section
    # ------------------------------------------------------------------

    def read_version(self, data: bytes) -> None:
        """Check the container and match the version string."""
        if not data:
            raise InvalidContainerError("Empty buffer")
        if is_compressed_container(data):
            raise UnsupportedVersionError("BCFZ compressed containers are not supported")
        if detect_signature(data) is None:
            raise InvalidContainerError("Missing Guitar Pro signature")

        self.version = read_fixed_byte_string(self.cursor, self.VERSION_SLOT_SIZE)
        self.version_index = match_version(self.version, self.VERSIONS)
        self.major, self.minor = parse_version_number(self.version)
        logger.debug(f"Version {self.version!r} (index {self.version_index})")

    def read_header_text(self) -> None:
        cursor = self.cursor
        for name in (
            "title",
            "subtitle",
            "artist",
            "album",
            "lyricist",
            "composer",
            "copyright",
            "transcriber",
            "instructions",
        ):
            self.header_fields[name] = read_byte_size_string(cursor)

        notice_count = cursor.read_int()
        self.notices = [read_byte_size_string(cursor) for _ in range(max(notice_count, 0))]

    # ------------------------------------------------------------------
    # Song-level records
    # ------------------------------------------------------------------

    def read_song_preamble(self) -> None:
        """Read lyrics, page setup, tempo and the global key signature."""
        self.lyrics = self.read_lyrics()
        self.read_page_setup()

        cursor = self.cursor
        try:
            self.tempo_name = read_byte_size_string(cursor)
            self.tempo = cursor.read_int()
            if self.version_index > 0:
                cursor.skip(1)
            self.key_signature = key_signature_from_byte(cursor.read_byte())
            cursor.skip(3)
            cursor.read_byte()  # octave
        except OutOfBoundsError as e:
            logger.warning(f"Tempo and key signature are truncated: {e}")

    def read_lyrics(self) -> Lyric:
        cursor = self.cursor
        lyrics = Lyric()
        try:
            lyrics.track = cursor.read_int()
            lyrics.text = read_int_size_string(cursor)
            for _ in range(self.LYRIC_LINES):
                cursor.read_int()
                read_int_size_string(cursor)
        except OutOfBoundsError as e:
            logger.warning(f"Lyrics are truncated: {e}")
        return lyrics

    def read_page_setup(self) -> None:
        """Skip the page setup block; its values are not kept."""
        cursor = self.cursor
        cursor.skip(49 if self.version_index > 0 else 30)
        try:
            for _ in range(self.PAGE_SETUP_LINES):
                cursor.skip(4)
                read_fixed_byte_string(cursor, 0)
        except OutOfBoundsError as e:
            logger.warning(f"Page setup is truncated: {e}")

    def read_channel_table(self) -> None:
        """
        Read the fixed 64-entry channel table.

        Entry 9 is always the percussion channel. Negative program numbers
        are clamped to 0. The whole table is consumed even when no track
        refers to an entry.
        """
        cursor = self.cursor
        self.channel_table = []
        for index in range(self.CHANNEL_COUNT):
            channel = Channel()
            try:
                channel.program = max(cursor.read_int(), 0)
                channel.volume = cursor.read_byte()
                channel.balance = cursor.read_byte()
                channel.chorus = cursor.read_byte()
                channel.reverb = cursor.read_byte()
                channel.pan = cursor.read_byte()
                channel.phaser = cursor.read_byte()
                channel.tremolo = cursor.read_byte()
            except OutOfBoundsError as e:
                logger.warning(f"Channel {index} is truncated: {e}")

            if index == PERCUSSION_CHANNEL_INDEX:
                channel.bank = DEFAULT_PERCUSSION_BANK
                channel.is_percussion_channel = True
            else:
                channel.bank = DEFAULT_BANK

            self.channel_table.append(channel)
            cursor.skip(2)

    def read_counts(self) -> Tuple[int, int]:
        """Skip directions and master reverb, then read measure and track counts."""
        cursor = self.cursor
        cursor.skip(42)
        try:
            measure_count = cursor.read_int()
            track_count = cursor.read_int()
        except OutOfBoundsError as e:
            logger.warning(f"Measure and track counts are missing: {e}")
            return 0, 0

        logger.debug(f"{measure_count} measure(s), {track_count} track(s)")
        return max(measure_count, 0), max(track_count, 0)

    # ------------------------------------------------------------------
    # Measure headers
    # ------------------------------------------------------------------

    def read_measure_headers(self, count: int) -> None:
        start = QUARTER_TIME
        previous: Optional[MeasureHeader] = None
        for index in range(count):
            if self.cursor.exhausted:
                logger.warning(f"Buffer exhausted after {index} of {count} measure header(s)")
                break
            header = self.read_measure_header(index + 1, previous)
            header.start = start
            start += header.length
            self.measure_headers.append(header)
            previous = header

    def read_measure_header(
        self, number: int, previous: Optional[MeasureHeader] = None
    ) -> MeasureHeader:
        """
        Read one measure header.

        Flags:
            0x01 numerator (int)
            0x02 denominator (byte note value, int tuplet code)
            0x04 repeat open
            0x08 repeat close (byte)
            0x10 alternate ending (byte)
            0x20 marker
            0x40 key signature (byte, then 1 reserved byte)

        Time signature and key signature are inherited from ``previous``
        when their flags are clear. The first header inherits the global
        key signature.

        Args:
            number: 1-based measure number
            previous: Previous header, or None for the first measure

        Returns:
            The header (partially filled if the record is truncated)
        """
        cursor = self.cursor
        header = MeasureHeader(number=number, tempo=self.tempo)
        if previous is not None:
            header.time_signature = TimeSignature(
                numerator=previous.time_signature.numerator,
                denominator=copy.deepcopy(previous.time_signature.denominator),
            )
            header.key_signature = previous.key_signature
        else:
            header.time_signature = TimeSignature(numerator=self.DEFAULT_NUMERATOR)
            header.key_signature = self.key_signature

        try:
            if previous is not None:
                cursor.skip(1)
            flags = cursor.read_byte()

            if flags & 0x01:
                header.time_signature.numerator = cursor.read_int()
            if flags & 0x02:
                denominator = duration_from_note_value(cursor.read_byte())
                denominator.division = division_from_code(cursor.read_int())
                header.time_signature.denominator = denominator
            header.repeat_open = bool(flags & 0x04)
            if flags & 0x08:
                header.repeat_close = cursor.read_byte()
            if flags & 0x20:
                header.marker = self.read_marker()
            if flags & 0x10:
                header.repeat_alternative = cursor.read_byte()
            if flags & 0x40:
                header.key_signature = key_signature_from_byte(cursor.read_byte())
                cursor.skip(1)
            if flags & 0x03:
                cursor.skip(4)
            if not flags & 0x10:
                cursor.skip(1)
            header.triplet_feel = cursor.read_byte()
        except OutOfBoundsError as e:
            logger.warning(f"Measure header {number} is truncated: {e}")

        return header

    def read_marker(self) -> Marker:
        title = read_byte_size_string(self.cursor)
        return Marker(title=title, color=self.read_color())

    def read_color(self) -> Color:
        """Read an RGB colour followed by one padding byte."""
        cursor = self.cursor
        color = Color(r=cursor.read_byte(), g=cursor.read_byte(), b=cursor.read_byte())
        cursor.skip(1)
        return color

    # ------------------------------------------------------------------
    # Tracks
    # ------------------------------------------------------------------

    def read_tracks(self, count: int) -> None:
        for index in range(count):
            if self.cursor.exhausted:
                logger.warning(f"Buffer exhausted after {index} of {count} track(s)")
                break
            self.tracks.append(self.read_track(index + 1))
        self.cursor.skip(2 if self.version_index == 0 else 1)

    def read_track(self, number: int) -> Track:
        """
        Read one track record.

        Only the first ``string count`` of the 7 tuning slots are kept.

        Args:
            number: 1-based track number

        Returns:
            The track (partially filled if the record is truncated)
        """
        cursor = self.cursor
        track = Track(number=number)
        try:
            if number == 1 or self.version_index == 0:
                cursor.skip(1)
            flags = cursor.read_byte()
            track.is_percussion_track = bool(flags & 0x01)
            track.name = read_fixed_byte_string(cursor, self.TRACK_NAME_SIZE)

            string_count = cursor.read_int()
            for index in range(self.TUNING_SLOTS):
                tuning = cursor.read_int()
                if index < string_count:
                    track.strings.append(GuitarString(number=index + 1, value=tuning))

            track.port = cursor.read_int()
            self.bind_channel(track)
            track.fret_count = cursor.read_int()
            track.offset = cursor.read_int()
            track.color = self.read_color()

            cursor.skip(49 if self.version_index > 0 else 44)
            if self.version_index > 0:
                read_byte_size_string(cursor)
                read_byte_size_string(cursor)
        except OutOfBoundsError as e:
            logger.warning(f"Track {number} is truncated: {e}")

        return track

    def bind_channel(self, track: Track) -> None:
        """
        Read the two GM channel indices of a track and bind its channel.

        The first track to reference a table entry gives it an id and its
        name; later tracks on the same entry reuse that id. An index
        outside the table leaves the track unbound (id 0).
        """
        cursor = self.cursor
        primary = cursor.read_int() - 1
        secondary = cursor.read_int() - 1

        if not 0 <= primary < len(self.channel_table):
            logger.debug(f"Track {track.number}: GM channel {primary} out of range, unbound")
            return

        channel = self.channel_table[primary]
        if channel.id == 0:
            if primary == PERCUSSION_CHANNEL_INDEX:
                secondary = primary
            channel.id = len(self.channel_table) + len(self.bound_channels) + 1
            channel.name = track.name
            channel.parameters = [
                ChannelParameter(key=GM_CHANNEL_1, value=str(primary)),
                ChannelParameter(key=GM_CHANNEL_2, value=str(secondary)),
            ]
            self.bound_channels.append(channel)

        track.channel_id = channel.id

    # ------------------------------------------------------------------
    # Measures
    # ------------------------------------------------------------------

    def read_measures(self) -> None:
        """
        Decode every measure of every track, in file order.

        Measures are attached to their track before decoding so tied notes
        can resolve against earlier beats of the same measure.
        """
        parser = BeatParser(self.cursor, self.version_index)
        cursor = self.cursor
        tempo = self.tempo
        exhausted_logged = False

        for header in self.measure_headers:
            header.tempo = tempo
            for track in self.tracks:
                measure = Measure(
                    header=header,
                    start=header.start,
                    key_signature=header.key_signature,
                )
                track.measures.append(measure)

                if cursor.exhausted:
                    if not exhausted_logged:
                        logger.warning(
                            f"Buffer exhausted at measure {header.number}, track {track.number}"
                        )
                        exhausted_logged = True
                    continue

                parser.read_measure(measure, track)
                cursor.skip(1)
            tempo = header.tempo

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def is_percussion_channel(self, channel_id: int) -> bool:
        for channel in self.bound_channels:
            if channel.id == channel_id:
                return channel.is_percussion_channel
        return False

    def get_clef(self, track: Track) -> Clef:
        """Bass clef for non-percussion tracks with a string tuned to 34 or lower."""
        if not self.is_percussion_channel(track.channel_id):
            if any(string.value <= BASS_CLEF_MAX_PITCH for string in track.strings):
                return Clef.BASS
        return Clef.TREBLE

    def assemble(self) -> Score:
        """Derive clefs and freeze the accumulated records into a Score."""
        for track in self.tracks:
            clef = self.get_clef(track)
            for measure in track.measures:
                measure.clef = clef

        return Score(
            version=self.version,
            major=self.major,
            minor=self.minor,
            notices=tuple(self.notices),
            lyrics=self.lyrics,
            tempo_name=self.tempo_name,
            tempo=self.tempo,
            key_signature=self.key_signature,
            channels=tuple(self.bound_channels),
            channel_table=tuple(self.channel_table),
            measure_headers=tuple(self.measure_headers),
            tracks=tuple(self.tracks),
            **self.header_fields,
        )


def duration_from_note_value(value: int) -> Duration:
    """Build a time-signature denominator from its note value (4 = quarter)."""
    if value <= 0:
        return Duration()
    return Duration(value=value)


def decode(data: bytes) -> Score:
    """Decode a complete GP5 buffer into a Score."""
    return GP5Decoder().decode(data)
