"""Data models for decoded tablature scores."""

from gptab.models.beat import (
    Beat,
    Chord,
    Division,
    Duration,
    MixTableChange,
    Stroke,
    StrokeDirection,
    Voice,
)
from gptab.models.measure import Clef, Color, Marker, Measure, MeasureHeader, TimeSignature
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
from gptab.models.score import Lyric, Score, ScoreInfo
from gptab.models.track import Channel, ChannelParameter, GuitarString, Track

__all__ = [
    "Beat",
    "Bend",
    "Channel",
    "ChannelParameter",
    "Chord",
    "Clef",
    "Color",
    "Division",
    "Duration",
    "EffectPoint",
    "Grace",
    "GraceTransition",
    "GuitarString",
    "Harmonic",
    "HarmonicType",
    "Lyric",
    "Marker",
    "Measure",
    "MeasureHeader",
    "MixTableChange",
    "Note",
    "NoteEffect",
    "Score",
    "ScoreInfo",
    "Stroke",
    "StrokeDirection",
    "TimeSignature",
    "TremoloBar",
    "TremoloPicking",
    "Track",
    "Trill",
    "Voice",
]
