"""Range capture - the guided two-phase (low/high) range test.

The test is modelled as an immutable state plus pure transition functions
`(state, input) -> state`:

    INTRO -> GENDER_SELECT -> LOW -> HIGH -> QUESTIONNAIRE -> RESULT

During LOW the lowest accepted note is latched, during HIGH the highest.
A latched extreme is only ever replaced by a more extreme note. `reset` is
the only way back to the start.
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Union

import numpy as np

from ..analysis import PitchEstimator, PitchEstimate
from ..core import Phase, RegisterCategory, Zone, midi_from_frequency, note_name
from ..core.constants import LOW_FLOOR_MIDI, HIGH_CEILING_MIDI
from ..inference import ClassificationResult, VocalRangeClassifier

WAITING_STATUS = "Waiting for sound..."
HIGH_WAITING_STATUS = "Waiting for high notes..."


class InvalidTransitionError(ValueError):
    """An operation was requested in a phase that does not allow it."""


@dataclass(frozen=True)
class CaptureConfig:
    """Acceptance rules for latching notes.

    Attributes:
        low_floor_midi: Low-phase notes must be above this (default: 33, A1)
        high_ceiling_midi: High-phase notes must be below this (default: 96, C7)
        stable_frames: Consecutive identical notes required before a note
            can latch (default: 1, latch on first detection)
    """

    low_floor_midi: int = LOW_FLOOR_MIDI
    high_ceiling_midi: int = HIGH_CEILING_MIDI
    stable_frames: int = 1


DEFAULT_CAPTURE_CONFIG = CaptureConfig()
_DEFAULT_ESTIMATOR = PitchEstimator()


@dataclass(frozen=True)
class RangeCaptureState:
    """Everything one range test knows at a given moment."""

    phase: Phase = Phase.INTRO
    register: RegisterCategory = RegisterCategory.MASCULINE
    low_midi: Optional[int] = None
    high_midi: Optional[int] = None
    comfort_zone: Zone = Zone.MID
    difficulty_zone: Zone = Zone.HIGH
    result: Optional[ClassificationResult] = None
    candidate_midi: Optional[int] = None  # Note currently being held
    candidate_count: int = 0  # Consecutive frames of candidate_midi
    status: str = WAITING_STATUS

    @property
    def latched_midi(self) -> Optional[int]:
        """Extreme latched in the current capture phase."""
        if self.phase == Phase.LOW:
            return self.low_midi
        if self.phase == Phase.HIGH:
            return self.high_midi
        return None

    @property
    def low_note(self) -> Optional[str]:
        return note_name(self.low_midi) if self.low_midi is not None else None

    @property
    def high_note(self) -> Optional[str]:
        return note_name(self.high_midi) if self.high_midi is not None else None


def initial_state() -> RangeCaptureState:
    return RangeCaptureState()


def _require(state: RangeCaptureState, phase: Phase, action: str) -> None:
    if state.phase != phase:
        raise InvalidTransitionError(
            f"Cannot {action} in phase '{state.phase.value}' "
            f"(expected '{phase.value}')"
        )


def begin(state: RangeCaptureState) -> RangeCaptureState:
    """Leave the intro screen."""
    _require(state, Phase.INTRO, "begin")
    return replace(state, phase=Phase.GENDER_SELECT)


def select_register(
    state: RangeCaptureState,
    register: RegisterCategory,
) -> RangeCaptureState:
    """Record the register category and start the low phase."""
    _require(state, Phase.GENDER_SELECT, "select a register")
    return replace(state, phase=Phase.LOW, register=register, status=WAITING_STATUS)


def observe_midi(
    state: RangeCaptureState,
    midi: int,
    config: CaptureConfig = DEFAULT_CAPTURE_CONFIG,
) -> RangeCaptureState:
    """
    Apply one detected note to the capture.

    Only LOW and HIGH react; in every other phase the state is returned
    unchanged so a host loop can feed notes unconditionally.
    """
    if state.phase == Phase.LOW:
        if midi <= config.low_floor_midi:
            return state
    elif state.phase == Phase.HIGH:
        if midi >= config.high_ceiling_midi:
            return state
    else:
        return state

    if midi == state.candidate_midi:
        count = state.candidate_count + 1
    else:
        count = 1
    state = replace(state, candidate_midi=midi, candidate_count=count)
    if count < config.stable_frames:
        return state

    if state.phase == Phase.LOW:
        if state.low_midi is None or midi < state.low_midi:
            return replace(state, low_midi=midi, status=f"Detected: {note_name(midi)}")
    else:
        if state.high_midi is None or midi > state.high_midi:
            return replace(state, high_midi=midi, status=f"Detected: {note_name(midi)}")
    return state


def _break_run(state: RangeCaptureState) -> RangeCaptureState:
    if state.candidate_midi is None and state.candidate_count == 0:
        return state
    return replace(state, candidate_midi=None, candidate_count=0)


def observe(
    state: RangeCaptureState,
    estimate: PitchEstimate,
    estimator: Optional[PitchEstimator] = None,
    config: CaptureConfig = DEFAULT_CAPTURE_CONFIG,
) -> RangeCaptureState:
    """Apply one pitch estimate.

    Silence and implausible pitches never latch, and they end the run of
    identical notes counted towards `stable_frames`.
    """
    estimator = estimator if estimator is not None else _DEFAULT_ESTIMATOR
    if not estimate.detected or not estimator.is_plausible(estimate.frequency):
        return _break_run(state)
    return observe_midi(state, midi_from_frequency(estimate.frequency), config)


def can_advance(state: RangeCaptureState) -> bool:
    """Whether the current capture phase has latched its extreme."""
    if state.phase == Phase.LOW:
        return state.low_midi is not None
    if state.phase == Phase.HIGH:
        return state.high_midi is not None
    return False


def advance(state: RangeCaptureState) -> RangeCaptureState:
    """Move LOW -> HIGH or HIGH -> QUESTIONNAIRE once the extreme is latched."""
    if state.phase not in (Phase.LOW, Phase.HIGH):
        raise InvalidTransitionError(
            f"Cannot advance from phase '{state.phase.value}'"
        )
    if not can_advance(state):
        raise InvalidTransitionError(
            f"No note captured yet in phase '{state.phase.value}'"
        )

    cleared = replace(state, candidate_midi=None, candidate_count=0)
    if state.phase == Phase.LOW:
        return replace(cleared, phase=Phase.HIGH, status=HIGH_WAITING_STATUS)
    return replace(cleared, phase=Phase.QUESTIONNAIRE)


def answer(
    state: RangeCaptureState,
    comfort_zone: Zone,
    difficulty_zone: Zone,
) -> RangeCaptureState:
    """Record the questionnaire answers."""
    _require(state, Phase.QUESTIONNAIRE, "answer the questionnaire")
    return replace(state, comfort_zone=comfort_zone, difficulty_zone=difficulty_zone)


def finish(
    state: RangeCaptureState,
    classifier: Optional[VocalRangeClassifier] = None,
) -> RangeCaptureState:
    """Classify the captured range and enter the terminal RESULT phase."""
    _require(state, Phase.QUESTIONNAIRE, "finish")
    if state.low_midi is None or state.high_midi is None:
        raise InvalidTransitionError("Both low and high notes must be captured")

    classifier = classifier if classifier is not None else VocalRangeClassifier()
    result = classifier.classify_state(state)
    return replace(state, phase=Phase.RESULT, result=result)


def reset(state: Optional[RangeCaptureState] = None) -> RangeCaptureState:
    """Discard everything and return to the intro."""
    return initial_state()


class RangeCaptureSession:
    """One range test driven by a single host loop.

    Holds the current state and replaces it through the transition
    functions; each screen running a test owns its own session.
    """

    def __init__(
        self,
        estimator: Optional[PitchEstimator] = None,
        classifier: Optional[VocalRangeClassifier] = None,
        config: Optional[CaptureConfig] = None,
    ):
        self.estimator = estimator if estimator is not None else PitchEstimator()
        self.classifier = classifier if classifier is not None else VocalRangeClassifier()
        self.config = config if config is not None else CaptureConfig()
        self.state = initial_state()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def result(self) -> Optional[ClassificationResult]:
        return self.state.result

    def begin(self) -> RangeCaptureState:
        self.state = begin(self.state)
        return self.state

    def select_register(self, register: RegisterCategory) -> RangeCaptureState:
        self.state = select_register(self.state, register)
        return self.state

    def feed(
        self,
        frame: Union[Sequence[float], np.ndarray],
        sample_rate: int,
    ) -> PitchEstimate:
        """Estimate one frame and apply it; returns the estimate for display."""
        estimate = self.estimator.track(frame, sample_rate)
        self.state = observe(self.state, estimate, self.estimator, self.config)
        return estimate

    def observe(self, estimate: PitchEstimate) -> RangeCaptureState:
        self.state = observe(self.state, estimate, self.estimator, self.config)
        return self.state

    def observe_midi(self, midi: int) -> RangeCaptureState:
        self.state = observe_midi(self.state, midi, self.config)
        return self.state

    def can_advance(self) -> bool:
        return can_advance(self.state)

    def advance(self) -> RangeCaptureState:
        self.state = advance(self.state)
        return self.state

    def answer(self, comfort_zone: Zone, difficulty_zone: Zone) -> RangeCaptureState:
        self.state = answer(self.state, comfort_zone, difficulty_zone)
        return self.state

    def finish(self) -> ClassificationResult:
        self.state = finish(self.state, self.classifier)
        return self.state.result

    def reset(self) -> RangeCaptureState:
        self.state = reset(self.state)
        return self.state
