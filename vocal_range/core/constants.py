"""Global constants for the vocal range engine."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Tuning reference (12-tone equal temperament)
A4_FREQUENCY = 440.0
A4_MIDI = 69
SEMITONES_PER_OCTAVE = 12
CENTS_PER_SEMITONE = 100

# Audio processing defaults
DEFAULT_SR = 44100
DEFAULT_FRAME_SIZE = 4096  # ~93 ms @ 44.1 kHz, enough periods for low voices
DEFAULT_HOP_LENGTH = 2048

# Plausible sung/played fundamental (Hz)
MIN_FREQUENCY = 50.0
MAX_FREQUENCY = 1400.0

# Range capture acceptance bounds (MIDI)
LOW_FLOOR_MIDI = 33  # A1, rejects sub-bass hum
HIGH_CEILING_MIDI = 96  # C7, rejects whistle/noise spikes

# Tuner
IN_TUNE_CENTS = 10.0
