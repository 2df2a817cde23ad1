"""Voice type classification - Best-fit voice type for a captured range.

Scores every reference profile of the declared register category on:
- Coverage of the profile's reference range by the user's range
- Declared comfort zone (canonical and secondary matches)
- Declared difficulty zone (penalises the zone a type "owns")
- Reachability of the profile's floor
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from .voice_types import VOICE_TYPES, VoiceTypeProfile, profiles_for
from ..core import RegisterCategory, Zone, note_name

if TYPE_CHECKING:
    from ..session import RangeCaptureState

UNDETERMINED = "Undetermined"


@dataclass(frozen=True)
class ScoringConfig:
    """Weights of the classification criteria.

    Attributes:
        coverage_weight: Points for fully covering a profile's range (default: 20)
        comfort_bonus: Points for the canonical comfort match (default: 15)
        secondary_comfort_bonus: Points for a secondary comfort match (default: 5)
        difficulty_penalty: Points lost when difficulty hits the profile's own zone (default: 10)
        low_mismatch_penalty: Points lost when the user's low note misses the floor (default: 20)
        low_mismatch_semitones: Allowed distance above the profile floor (default: 7)
    """

    coverage_weight: float = 20.0
    comfort_bonus: float = 15.0
    secondary_comfort_bonus: float = 5.0
    difficulty_penalty: float = 10.0
    low_mismatch_penalty: float = 20.0
    low_mismatch_semitones: int = 7


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one completed range test."""

    label: str
    score_margin: float = 0.0
    detected_range: Tuple[Optional[int], Optional[int]] = (None, None)
    scores: Dict[str, float] = field(default_factory=dict)  # Per candidate, table order

    @property
    def is_determined(self) -> bool:
        return self.label != UNDETERMINED

    @property
    def range_label(self) -> str:
        """Captured range as note names (e.g., 'A2 - D5')."""
        low, high = self.detected_range
        if low is None or high is None:
            return "--"
        return f"{note_name(low)} - {note_name(high)}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        low, high = self.detected_range
        return {
            "label": self.label,
            "score_margin": self.score_margin,
            "low_midi": low,
            "high_midi": high,
            "range": self.range_label,
            "scores": dict(self.scores),
        }


class VocalRangeClassifier:
    """Pick the best-matching voice type for a range and two answers."""

    def __init__(
        self,
        profiles: Tuple[VoiceTypeProfile, ...] = VOICE_TYPES,
        config: Optional[ScoringConfig] = None,
    ):
        self.profiles = profiles
        self.config = config if config is not None else ScoringConfig()

    def classify(
        self,
        register: RegisterCategory,
        comfort_zone: Zone,
        difficulty_zone: Zone,
        low_midi: Optional[int],
        high_midi: Optional[int],
    ) -> ClassificationResult:
        """
        Classify a captured range.

        Args:
            register: Declared register category
            comfort_zone: Where the voice feels most comfortable
            difficulty_zone: Where the voice breaks or strains
            low_midi: Lowest captured note (None if never captured)
            high_midi: Highest captured note (None if never captured)

        Returns:
            ClassificationResult; label is UNDETERMINED when either extreme
            is missing or no profile matches the register category
        """
        detected = (low_midi, high_midi)
        candidates = profiles_for(register, self.profiles)
        if low_midi is None or high_midi is None or not candidates:
            return ClassificationResult(label=UNDETERMINED, detected_range=detected)

        scores = {
            profile.name: self.score(
                profile, comfort_zone, difficulty_zone, low_midi, high_midi
            )
            for profile in candidates
        }

        # max() keeps the first of equal scores, i.e. table order
        best = max(candidates, key=lambda p: scores[p.name])
        others = [scores[p.name] for p in candidates if p is not best]
        margin = scores[best.name] - max(others) if others else scores[best.name]

        return ClassificationResult(
            label=best.name,
            score_margin=margin,
            detected_range=detected,
            scores=scores,
        )

    def classify_state(self, state: "RangeCaptureState") -> ClassificationResult:
        """Classify from anything carrying the range-capture state fields."""
        return self.classify(
            state.register,
            state.comfort_zone,
            state.difficulty_zone,
            state.low_midi,
            state.high_midi,
        )

    def score(
        self,
        profile: VoiceTypeProfile,
        comfort_zone: Zone,
        difficulty_zone: Zone,
        low_midi: int,
        high_midi: int,
    ) -> float:
        """Total score of one profile."""
        cfg = self.config
        score = 0.0

        overlap = max(0, min(high_midi, profile.max_midi) - max(low_midi, profile.min_midi))
        if profile.span > 0:
            score += cfg.coverage_weight * overlap / profile.span

        if comfort_zone == profile.comfort_zone:
            score += cfg.comfort_bonus
        elif comfort_zone in profile.secondary_comfort_zones:
            score += cfg.secondary_comfort_bonus

        if difficulty_zone == profile.difficulty_zone:
            score -= cfg.difficulty_penalty

        if low_midi > profile.min_midi + cfg.low_mismatch_semitones:
            score -= cfg.low_mismatch_penalty

        return score
