"""Closed enumerations shared across layers."""

from enum import Enum


class RegisterCategory(Enum):
    """Coarse voice partition selecting the candidate voice types."""
    MASCULINE = "masculine"
    FEMININE = "feminine"


class Zone(Enum):
    """Part of the voice a user reports as comfortable or difficult."""
    LOW = "low"
    MID = "mid"
    HIGH = "high"


class Phase(Enum):
    """Steps of the guided range test, in protocol order."""
    INTRO = "intro"
    GENDER_SELECT = "gender_select"
    LOW = "low"
    HIGH = "high"
    QUESTIONNAIRE = "questionnaire"
    RESULT = "result"
