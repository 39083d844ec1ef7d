"""
Display formatting utilities for CLI output.

Provides bar graphics, note names and other formatting helpers.
"""

from typing import List

from gptab.models.measure import MeasureHeader, TimeSignature
from gptab.models.track import Channel, GuitarString

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Major keys by circle-of-fifths position, offset by +7 (7 = C major)
KEY_NAMES = [
    "Cb",
    "Gb",
    "Db",
    "Ab",
    "Eb",
    "Bb",
    "F",
    "C",
    "G",
    "D",
    "A",
    "E",
    "B",
    "F#",
    "C#",
]


def value_bar(
    value: int,
    max_value: int = 127,
    width: int = 10,
    filled_char: str = "█",
    empty_char: str = "░",
    show_value: bool = True,
) -> str:
    """
    Create a text-based bar graphic for a mixer value.

    Args:
        value: Current value
        max_value: Maximum value (127 for MIDI-style bytes)
        width: Bar width in characters
        filled_char: Character for filled portion
        empty_char: Character for empty portion
        show_value: Show numeric value

    Returns:
        Formatted string like "91 [███████░░░]"
    """
    if max_value <= 0:
        max_value = 1

    clamped = max(0, min(value, max_value))
    fill_count = int((clamped / max_value) * width)
    bar = filled_char * fill_count + empty_char * (width - fill_count)

    if show_value:
        return f"{value:3d} [{bar}]"
    return f"[{bar}]"


def pan_bar(pan: int, width: int = 11, center: int = 64) -> str:
    """
    Create a centered pan bar graphic.

    Returns:
        Formatted string like "L32 [──◀──●─────]"
    """
    half = width // 2
    bar = ["─"] * width
    bar[half] = "●"

    if pan == center:
        label = "  C"
    elif pan < center:
        amount = center - pan
        bar[max(half - int((amount / center) * half) - 1, 0)] = "◀"
        label = f"L{amount:2d}"
    else:
        amount = pan - center
        bar[min(half + int((amount / (127 - center)) * half) + 1, width - 1)] = "▶"
        label = f"R{amount:2d}"

    return f"{label} [{''.join(bar)}]"


def note_name(pitch: int) -> str:
    """
    Convert a MIDI pitch to a note name with octave.

    Example:
        note_name(64) -> "E4"
    """
    if pitch < 0:
        return str(pitch)
    return f"{NOTE_NAMES[pitch % 12]}{pitch // 12 - 1}"


def format_tuning(strings: List[GuitarString]) -> str:
    """
    Format a tuning lowest string first, the way guitarists read it.

    Returns:
        "E2 A2 D3 G3 B3 E4" or "-" for a track without strings
    """
    if not strings:
        return "-"
    return " ".join(note_name(string.value) for string in reversed(strings))


def key_signature_name(key_signature: int) -> str:
    if 0 <= key_signature < len(KEY_NAMES):
        return KEY_NAMES[key_signature]
    return f"? ({key_signature})"


def format_time_signature(time_signature: TimeSignature) -> str:
    """
    Format a time signature, with its tuplet if the denominator has one.

    Returns:
        "4/4" or "6/8 (3:2)"
    """
    text = str(time_signature)
    division = time_signature.denominator.division
    if division.is_tuplet:
        text += f" ({division.enters}:{division.times})"
    return text


def format_repeat(header: MeasureHeader) -> str:
    parts = []
    if header.repeat_open:
        parts.append("|:")
    if header.repeat_close:
        parts.append(f":| x{header.repeat_close}")
    if header.repeat_alternative:
        parts.append(f"alt {header.repeat_alternative}")
    return " ".join(parts)


def format_channel(channel: Channel) -> str:
    """
    Format a bound channel.

    Returns:
        "#65 prog 25 (default bank)" or "[dim]unbound[/dim]"
    """
    if not channel.is_bound:
        return "[dim]unbound[/dim]"
    text = f"#{channel.id} prog {channel.program:3d} ({channel.bank})"
    if channel.is_percussion_channel:
        text = f"[magenta]{text}[/magenta]"
    return text
