"""Inference layer - Voice type classification.

This layer turns a captured range into a musical judgement:
- Reference voice-type table
- Multi-criterion best-fit classification
"""

from .voice_types import VoiceTypeProfile, VOICE_TYPES, profiles_for
from .classifier import (
    VocalRangeClassifier,
    ClassificationResult,
    ScoringConfig,
    UNDETERMINED,
)

__all__ = [
    "VoiceTypeProfile",
    "VOICE_TYPES",
    "profiles_for",
    "VocalRangeClassifier",
    "ClassificationResult",
    "ScoringConfig",
    "UNDETERMINED",
]
