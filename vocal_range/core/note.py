"""Note identity - frequency to note name, octave and tuning cents."""

import math
import re
from dataclasses import dataclass

import numpy as np

from .constants import (
    PITCH_NAMES,
    A4_FREQUENCY,
    A4_MIDI,
    SEMITONES_PER_OCTAVE,
    CENTS_PER_SEMITONE,
)

_NOTE_PATTERN = re.compile(r"^\s*([A-Ga-g])([#b]?)(-?\d+)\s*$")


def _check_frequency(freq: float) -> None:
    if not freq > 0 or not np.isfinite(freq):
        raise ValueError(f"Frequency must be a positive finite number, got {freq!r}")


def midi_from_frequency(freq: float) -> int:
    """Convert frequency (Hz) to the nearest MIDI pitch.

    Exact half-semitones resolve to the lower note, so the matching
    cents offset always lies in (-50, 50].
    """
    _check_frequency(freq)
    semitones = A4_MIDI + SEMITONES_PER_OCTAVE * np.log2(freq / A4_FREQUENCY)
    return int(math.ceil(semitones - 0.5))


def frequency_from_midi(midi: int) -> float:
    """Convert MIDI pitch to frequency (Hz)."""
    return A4_FREQUENCY * (2 ** ((midi - A4_MIDI) / float(SEMITONES_PER_OCTAVE)))


def cents_offset(freq: float, midi: int) -> float:
    """Signed deviation of `freq` from the ideal pitch of `midi`, in cents."""
    _check_frequency(freq)
    semitones = SEMITONES_PER_OCTAVE * np.log2(freq / frequency_from_midi(midi))
    return float(CENTS_PER_SEMITONE * semitones)


def note_name(midi: int) -> str:
    """Get note name (e.g., 'C4', 'A#3')."""
    octave = (midi // 12) - 1
    return f"{PITCH_NAMES[midi % 12]}{octave}"


def parse_note(name: str) -> int:
    """Parse a note name such as 'A2', 'F#4' or 'Bb3' into a MIDI pitch."""
    match = _NOTE_PATTERN.match(name)
    if match is None:
        raise ValueError(f"Invalid note name: {name!r}")

    letter, accidental, octave = match.groups()
    pitch_class = PITCH_NAMES.index(letter.upper())
    if accidental == "#":
        pitch_class += 1
    elif accidental == "b":
        pitch_class -= 1

    return (int(octave) + 1) * 12 + pitch_class


@dataclass(frozen=True)
class NoteIdentity:
    """A frequency resolved to its nearest equal-tempered note."""

    pitch_class: str  # One of PITCH_NAMES
    octave: int
    midi: int
    cents: float  # Deviation from the ideal pitch, in (-50, 50]
    frequency: float  # Measured frequency in Hz

    @property
    def name(self) -> str:
        """Note name with octave (e.g., 'A4')."""
        return f"{self.pitch_class}{self.octave}"

    @property
    def ideal_frequency(self) -> float:
        """Frequency of the note at zero cents."""
        return frequency_from_midi(self.midi)


def note_from_frequency(freq: float) -> NoteIdentity:
    """Resolve a frequency to its note identity."""
    midi = midi_from_frequency(freq)
    return NoteIdentity(
        pitch_class=PITCH_NAMES[midi % 12],
        octave=(midi // 12) - 1,
        midi=midi,
        cents=cents_offset(freq, midi),
        frequency=float(freq),
    )
