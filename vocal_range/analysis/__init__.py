"""Analysis layer - Per-frame signal analysis.

This layer turns raw waveform frames into musical readings:
- Pitch estimation (autocorrelation with noise gate)
- Continuous tuning readings (note, cents, in-tune status)
"""

from .pitch import (
    PitchEstimator,
    PitchEstimate,
    EstimatorConfig,
    Rejection,
    NO_PITCH,
    estimate_pitch,
)
from .tuner import Tuner, TunerReading, TuningStatus

__all__ = [
    "PitchEstimator",
    "PitchEstimate",
    "EstimatorConfig",
    "Rejection",
    "NO_PITCH",
    "estimate_pitch",
    "Tuner",
    "TunerReading",
    "TuningStatus",
]
