"""Reference voice types - the static table the classifier scores against."""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core import RegisterCategory, Zone, note_name


@dataclass(frozen=True)
class VoiceTypeProfile:
    """A named voice type with its reference range.

    Attributes:
        name: Display label (e.g., "Mezzo-soprano")
        register: Register category the type belongs to
        min_midi: Lowest reference note (MIDI)
        max_midi: Highest reference note (MIDI)
        comfort_zone: Comfort answer that canonically points to this type
        secondary_comfort_zones: Comfort answers that point here as a runner-up
        difficulty_zone: Difficulty answer that argues against this type
    """

    name: str
    register: RegisterCategory
    min_midi: int
    max_midi: int
    comfort_zone: Zone
    secondary_comfort_zones: Tuple[Zone, ...] = ()
    difficulty_zone: Optional[Zone] = None

    @property
    def span(self) -> int:
        return self.max_midi - self.min_midi

    @property
    def description(self) -> str:
        """Reference range as note names (e.g., 'F2 - F4')."""
        return f"{note_name(self.min_midi)} - {note_name(self.max_midi)}"


VOICE_TYPES: Tuple[VoiceTypeProfile, ...] = (
    VoiceTypeProfile(
        "Bass", RegisterCategory.MASCULINE, 28, 52,
        comfort_zone=Zone.LOW,
        difficulty_zone=Zone.LOW,
    ),
    VoiceTypeProfile(
        "Baritone", RegisterCategory.MASCULINE, 33, 57,
        comfort_zone=Zone.MID,
        secondary_comfort_zones=(Zone.LOW,),
    ),
    VoiceTypeProfile(
        "Tenor", RegisterCategory.MASCULINE, 36, 60,
        comfort_zone=Zone.HIGH,
        secondary_comfort_zones=(Zone.MID,),
        difficulty_zone=Zone.HIGH,
    ),
    VoiceTypeProfile(
        "Contralto", RegisterCategory.FEMININE, 41, 65,
        comfort_zone=Zone.LOW,
        secondary_comfort_zones=(Zone.MID,),
        difficulty_zone=Zone.LOW,
    ),
    VoiceTypeProfile(
        "Mezzo-soprano", RegisterCategory.FEMININE, 45, 69,
        comfort_zone=Zone.MID,
        secondary_comfort_zones=(Zone.LOW, Zone.HIGH),
    ),
    VoiceTypeProfile(
        "Soprano", RegisterCategory.FEMININE, 48, 72,
        comfort_zone=Zone.HIGH,
        difficulty_zone=Zone.HIGH,
    ),
)


def profiles_for(
    register: RegisterCategory,
    profiles: Tuple[VoiceTypeProfile, ...] = VOICE_TYPES,
) -> Tuple[VoiceTypeProfile, ...]:
    """Profiles of one register category, in table order."""
    return tuple(p for p in profiles if p.register == register)
