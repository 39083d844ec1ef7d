"""
Scaled-value conversions for Guitar Pro numeric fields.
"""

import math

# Bend curves are stored with 60 position steps and 25 value steps per semitone
BEND_POSITION_STEPS = 60
BEND_SEMITONE_STEPS = 25
BEND_MAX_POSITION = 12
BEND_SEMITONE_LENGTH = 1

# Tremolo-bar values use 0x2F steps per unit; positions are kept as stored
TREMOLO_BAR_SEMITONE_STEPS = 0x2F

# Velocity bytes count dynamics upwards from ppp
MIN_VELOCITY = 15
VELOCITY_INCREMENT = 16

KEY_SIGNATURE_OFFSET = 7


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def scale_bend_position(position: int) -> int:
    return round_half_away(position * BEND_MAX_POSITION / BEND_POSITION_STEPS)


def scale_bend_value(value: int) -> int:
    return round_half_away(value * BEND_SEMITONE_LENGTH / BEND_SEMITONE_STEPS)


def scale_tremolo_bar_position(position: int) -> int:
    return round_half_away(position * 1.0 / 1.0)


def scale_tremolo_bar_value(value: int) -> int:
    return round_half_away(value / (1.0 * TREMOLO_BAR_SEMITONE_STEPS))


def velocity_from_dynamic(raw: int) -> int:
    """
    Convert a dynamic byte to a velocity.

    Example:
        velocity_from_dynamic(8) -> 127
    """
    return MIN_VELOCITY + VELOCITY_INCREMENT * raw - VELOCITY_INCREMENT


def key_signature_from_byte(raw: int) -> int:
    """
    Decode a key-signature byte.

    The byte is offset by +7 with 8-bit wrap-around, so 0 becomes 7 and
    250 (-6 signed) becomes 1.
    """
    return (raw + KEY_SIGNATURE_OFFSET) & 0xFF
