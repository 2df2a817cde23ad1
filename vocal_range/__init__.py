"""Vocal Range - Pitch detection and voice type classification engine.

Architecture Layers:
    1. core/       - Note mapping, constants and shared enumerations
    2. analysis/   - Per-frame pitch estimation and tuner readings
    3. session/    - Guided low/high range capture state machine
    4. inference/  - Voice type classification
    5. input/      - Audio loading and framing
"""

__version__ = "0.1.0"

# Core types
from .core import (
    NoteIdentity,
    RegisterCategory,
    Zone,
    Phase,
    midi_from_frequency,
    frequency_from_midi,
    cents_offset,
    note_from_frequency,
)

# Analysis layer
from .analysis import (
    PitchEstimator,
    PitchEstimate,
    EstimatorConfig,
    estimate_pitch,
    Tuner,
    TunerReading,
    TuningStatus,
)

# Session layer
from .session import RangeCaptureSession, RangeCaptureState, CaptureConfig

# Inference layer
from .inference import (
    VocalRangeClassifier,
    ClassificationResult,
    ScoringConfig,
    VOICE_TYPES,
)

# Input layer
from .input import AudioLoader

__all__ = [
    # Core
    "NoteIdentity",
    "RegisterCategory",
    "Zone",
    "Phase",
    "midi_from_frequency",
    "frequency_from_midi",
    "cents_offset",
    "note_from_frequency",
    # Analysis
    "PitchEstimator",
    "PitchEstimate",
    "EstimatorConfig",
    "estimate_pitch",
    "Tuner",
    "TunerReading",
    "TuningStatus",
    # Session
    "RangeCaptureSession",
    "RangeCaptureState",
    "CaptureConfig",
    # Inference
    "VocalRangeClassifier",
    "ClassificationResult",
    "ScoringConfig",
    "VOICE_TYPES",
    # Input
    "AudioLoader",
]
