"""
Score data model - the top-level result of decoding a tablature file.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from gptab.models.measure import MeasureHeader
from gptab.models.track import Channel, Track


@dataclass
class Lyric:
    """Song lyrics and the track they are attached to."""

    track: int = 0
    text: str = ""


@dataclass
class ScoreInfo:
    """
    Metadata-only view of a tablature file.

    Produced by the lightweight header reader, which stops after the text
    fields and works for versions 3 to 5.
    """

    version: str = ""
    title: str = ""
    artist: str = ""
    subtitle: str = ""
    album: str = ""
    lyricist: str = ""
    composer: str = ""
    copyright: str = ""
    transcriber: str = ""
    instructions: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "version": self.version,
            "title": self.title,
            "artist": self.artist,
            "subtitle": self.subtitle,
            "album": self.album,
            "lyricist": self.lyricist,
            "composer": self.composer,
            "copyright": self.copyright,
            "transcriber": self.transcriber,
            "instructions": self.instructions,
        }


@dataclass(frozen=True)
class Score:
    """
    Complete decoded score.

    Built once at the end of a successful decode. The containers are tuples
    so the score itself cannot be re-shaped after decoding. The freeze is
    shallow: the tracks, measures and headers it holds are plain dataclasses
    and stay mutable.

    Attributes:
        version: Version string, e.g. "FICHIER GUITAR PRO v5.10"
        major: Major version number
        minor: Minor version number
        title, subtitle, artist, album, lyricist, composer, copyright,
        transcriber, instructions: Header text fields
        notices: Free-form notice lines
        lyrics: Lyrics block
        tempo_name: Tempo label
        tempo: Initial tempo in BPM
        key_signature: Global key signature (offset by +7)
        channels: Channels bound by tracks, in binding order
        channel_table: All 64 channel table entries
        measure_headers: One header per measure
        tracks: Tracks in file order
    """

    version: str = ""
    major: int = 0
    minor: int = 0
    title: str = ""
    subtitle: str = ""
    artist: str = ""
    album: str = ""
    lyricist: str = ""
    composer: str = ""
    copyright: str = ""
    transcriber: str = ""
    instructions: str = ""
    notices: Tuple[str, ...] = ()
    lyrics: Lyric = field(default_factory=Lyric)
    tempo_name: str = ""
    tempo: int = 120
    key_signature: int = 0
    channels: Tuple[Channel, ...] = ()
    channel_table: Tuple[Channel, ...] = ()
    measure_headers: Tuple[MeasureHeader, ...] = ()
    tracks: Tuple[Track, ...] = ()

    @property
    def measure_count(self) -> int:
        return len(self.measure_headers)

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    def get_channel(self, channel_id: int) -> Optional[Channel]:
        """
        Find a bound channel by id.

        Args:
            channel_id: 1-based channel id

        Returns:
            The Channel, or None if no channel has that id
        """
        if channel_id == 0:
            return None
        for channel in self.channels:
            if channel.id == channel_id:
                return channel
        return None

    def get_track_channel(self, track: Track) -> Optional[Channel]:
        return self.get_channel(track.channel_id)

    @property
    def info(self) -> ScoreInfo:
        """Metadata of this score in the lightweight shape."""
        return ScoreInfo(
            version=self.version,
            title=self.title,
            artist=self.artist,
            subtitle=self.subtitle,
            album=self.album,
            lyricist=self.lyricist,
            composer=self.composer,
            copyright=self.copyright,
            transcriber=self.transcriber,
            instructions=self.instructions,
        )
