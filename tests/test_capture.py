"""Tests for the range capture state machine."""

import numpy as np
import pytest

from vocal_range.analysis import PitchEstimate
from vocal_range.core import Phase, RegisterCategory, Zone
from vocal_range.session import (
    RangeCaptureSession,
    CaptureConfig,
    InvalidTransitionError,
    initial_state,
    begin,
    select_register,
    observe,
    observe_midi,
    can_advance,
    advance,
    answer,
    finish,
    reset,
)

from generate_test_audio import SR, FRAME_SIZE, sine_frame


def low_phase(register=RegisterCategory.FEMININE):
    return select_register(begin(initial_state()), register)


def feed(state, midis, config=CaptureConfig()):
    for midi in midis:
        state = observe_midi(state, midi, config)
    return state


class TestProtocol:
    """Phase order and guards."""

    def test_initial_state(self):
        state = initial_state()

        assert state.phase == Phase.INTRO
        assert state.low_midi is None
        assert state.high_midi is None
        assert state.comfort_zone == Zone.MID
        assert state.difficulty_zone == Zone.HIGH

    def test_full_walkthrough(self):
        state = low_phase()
        assert state.phase == Phase.LOW
        assert state.register == RegisterCategory.FEMININE

        state = advance(feed(state, [50, 45]))
        assert state.phase == Phase.HIGH

        state = advance(feed(state, [70, 74]))
        assert state.phase == Phase.QUESTIONNAIRE

        state = answer(state, Zone.MID, Zone.HIGH)
        state = finish(state)

        assert state.phase == Phase.RESULT
        assert state.result.label == "Mezzo-soprano"
        assert state.result.detected_range == (45, 74)

    def test_begin_only_from_intro(self):
        with pytest.raises(InvalidTransitionError):
            begin(low_phase())

    def test_register_only_in_gender_select(self):
        with pytest.raises(InvalidTransitionError, match="select a register"):
            select_register(initial_state(), RegisterCategory.MASCULINE)

    def test_cannot_advance_without_low(self):
        state = low_phase()

        assert not can_advance(state)
        with pytest.raises(InvalidTransitionError, match="No note captured"):
            advance(state)

    def test_cannot_advance_without_high(self):
        state = advance(feed(low_phase(), [45]))

        assert state.phase == Phase.HIGH
        assert not can_advance(state)
        with pytest.raises(InvalidTransitionError):
            advance(state)

    def test_cannot_advance_from_questionnaire(self):
        state = advance(feed(advance(feed(low_phase(), [45])), [74]))
        with pytest.raises(InvalidTransitionError, match="Cannot advance"):
            advance(state)

    def test_answer_only_in_questionnaire(self):
        with pytest.raises(InvalidTransitionError):
            answer(low_phase(), Zone.LOW, Zone.HIGH)

    def test_finish_only_in_questionnaire(self):
        with pytest.raises(InvalidTransitionError):
            finish(feed(low_phase(), [45]))

    def test_result_is_terminal(self):
        state = finish(advance(feed(advance(feed(low_phase(), [45])), [74])))

        with pytest.raises(InvalidTransitionError):
            finish(state)
        with pytest.raises(InvalidTransitionError):
            advance(state)
        assert observe_midi(state, 30) is state

    def test_reset_discards_everything(self):
        state = finish(advance(feed(advance(feed(low_phase(), [45])), [74])))

        state = reset(state)

        assert state == initial_state()
        assert state.result is None

    def test_transitions_do_not_mutate(self):
        state = low_phase()
        after = observe_midi(state, 45)

        assert state.low_midi is None
        assert after.low_midi == 45


class TestLowPhase:
    """Low phase latches the lowest accepted note."""

    def test_latches_minimum_of_down_up_sequence(self):
        state = feed(low_phase(), [52, 48, 45, 43, 47, 50, 55])
        assert state.low_midi == 43

    def test_floor_is_exclusive(self):
        state = feed(low_phase(), [33, 30, 20])
        assert state.low_midi is None

        state = feed(state, [34, 33])
        assert state.low_midi == 34

    def test_later_higher_note_never_unlatches(self):
        state = feed(low_phase(), [40])
        state = feed(state, [60, 70])
        assert state.low_midi == 40

    def test_status_shows_latched_note(self):
        state = feed(low_phase(), [45])
        assert state.status == "Detected: A2"
        assert state.low_note == "A2"
        assert state.latched_midi == 45

    def test_high_values_ignored_while_low(self):
        state = feed(low_phase(), [45])
        assert state.high_midi is None


class TestHighPhase:
    """High phase latches the highest accepted note."""

    def high_phase(self):
        return advance(feed(low_phase(), [45]))

    def test_latches_maximum(self):
        state = feed(self.high_phase(), [60, 67, 74, 71, 65])
        assert state.high_midi == 74

    def test_ceiling_is_exclusive(self):
        state = feed(self.high_phase(), [96, 100])
        assert state.high_midi is None

        state = feed(state, [95])
        assert state.high_midi == 95

    def test_low_latch_kept(self):
        state = feed(self.high_phase(), [30, 72])
        assert state.low_midi == 45
        assert state.high_midi == 72

    def test_status_resets_on_entry(self):
        assert self.high_phase().status == "Waiting for high notes..."


class TestStability:
    """Optional consecutive-frame requirement before latching."""

    def test_single_glitch_not_latched(self):
        config = CaptureConfig(stable_frames=3)
        state = feed(low_phase(), [45, 45, 45, 40, 45], config)

        assert state.low_midi == 45

    def test_held_note_latched(self):
        config = CaptureConfig(stable_frames=3)
        state = feed(low_phase(), [45, 45, 45, 40, 40, 40], config)

        assert state.low_midi == 40

    def test_silence_breaks_the_run(self):
        config = CaptureConfig(stable_frames=2)
        state = observe(low_phase(), PitchEstimate(frequency=110.0), config=config)
        state = observe(state, PitchEstimate(), config=config)
        state = observe(state, PitchEstimate(frequency=110.0), config=config)

        assert state.low_midi is None
        assert state.candidate_count == 1

        state = observe(state, PitchEstimate(frequency=110.0), config=config)
        assert state.low_midi == 45

    def test_implausible_pitch_breaks_the_run(self):
        config = CaptureConfig(stable_frames=2)
        state = observe(low_phase(), PitchEstimate(frequency=110.0), config=config)
        state = observe(state, PitchEstimate(frequency=20.0), config=config)
        state = observe(state, PitchEstimate(frequency=110.0), config=config)

        assert state.low_midi is None

    def test_default_latches_immediately(self):
        state = feed(low_phase(), [41])
        assert state.low_midi == 41


class TestObserveEstimates:
    """Pitch estimates go through the plausible-range filter first."""

    def test_no_pitch_ignored(self):
        state = low_phase()
        assert observe(state, PitchEstimate()) is state

    def test_detected_frequency_converted(self):
        state = observe(low_phase(), PitchEstimate(frequency=110.0))
        assert state.low_midi == 45

    def test_implausible_frequency_ignored(self):
        state = observe(low_phase(), PitchEstimate(frequency=45.0))
        assert state.low_midi is None

        state = advance(observe(state, PitchEstimate(frequency=110.0)))
        state = observe(state, PitchEstimate(frequency=1500.0))
        assert state.high_midi is None

    def test_ignored_outside_capture(self):
        state = initial_state()
        assert observe(state, PitchEstimate(frequency=110.0)) is state


class TestRangeCaptureSession:
    """The stateful wrapper driven by frames."""

    def test_feed_frames_end_to_end(self):
        session = RangeCaptureSession()
        session.begin()
        session.select_register(RegisterCategory.FEMININE)

        for freq in (130.81, 110.0, 123.47):  # C3, A2, B2
            session.feed(sine_frame(freq), SR)
        session.feed(np.zeros(FRAME_SIZE), SR)
        assert session.state.low_midi == 45

        session.advance()
        for freq in (440.0, 587.33, 523.25):  # A4, D5, C5
            session.feed(sine_frame(freq), SR)
        assert session.state.high_midi == 74

        session.advance()
        session.answer(Zone.MID, Zone.HIGH)
        result = session.finish()

        assert session.phase == Phase.RESULT
        assert result is session.result
        assert result.label == "Mezzo-soprano"
        assert result.range_label == "A2 - D5"

    def test_feed_returns_estimate(self):
        session = RangeCaptureSession()
        estimate = session.feed(sine_frame(220.0), SR)

        assert estimate.detected
        assert session.phase == Phase.INTRO

    def test_sessions_are_independent(self):
        first = RangeCaptureSession()
        second = RangeCaptureSession()
        for session in (first, second):
            session.begin()
            session.select_register(RegisterCategory.MASCULINE)

        first.observe_midi(40)

        assert first.state.low_midi == 40
        assert second.state.low_midi is None

    def test_reset(self):
        session = RangeCaptureSession()
        session.begin()
        session.select_register(RegisterCategory.MASCULINE)
        session.observe_midi(40)

        session.reset()

        assert session.phase == Phase.INTRO
        assert session.state.low_midi is None
        assert not session.can_advance()

    def test_stable_frames_config(self):
        session = RangeCaptureSession(config=CaptureConfig(stable_frames=2))
        session.begin()
        session.select_register(RegisterCategory.MASCULINE)

        session.observe(PitchEstimate(frequency=110.0))
        assert session.state.low_midi is None
        session.observe(PitchEstimate(frequency=110.0))
        assert session.state.low_midi == 45
