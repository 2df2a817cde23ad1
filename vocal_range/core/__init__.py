"""Core types and constants for the vocal range engine."""

from .note import (
    NoteIdentity,
    midi_from_frequency,
    frequency_from_midi,
    cents_offset,
    note_name,
    note_from_frequency,
    parse_note,
)
from .types import RegisterCategory, Zone, Phase
from .constants import (
    PITCH_NAMES,
    A4_FREQUENCY,
    DEFAULT_SR,
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_LENGTH,
    MIN_FREQUENCY,
    MAX_FREQUENCY,
)

__all__ = [
    "NoteIdentity",
    "midi_from_frequency",
    "frequency_from_midi",
    "cents_offset",
    "note_name",
    "note_from_frequency",
    "parse_note",
    "RegisterCategory",
    "Zone",
    "Phase",
    "PITCH_NAMES",
    "A4_FREQUENCY",
    "DEFAULT_SR",
    "DEFAULT_FRAME_SIZE",
    "DEFAULT_HOP_LENGTH",
    "MIN_FREQUENCY",
    "MAX_FREQUENCY",
]
