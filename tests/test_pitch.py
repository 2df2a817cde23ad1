"""Tests for autocorrelation pitch estimation."""

import numpy as np
import pytest

from vocal_range.analysis import (
    PitchEstimator,
    PitchEstimate,
    EstimatorConfig,
    Rejection,
    NO_PITCH,
    estimate_pitch,
)

from generate_test_audio import SR, FRAME_SIZE, sine_frame, harmonic_frame, generate_sine_wave


class TestPureTones:
    """Pure sine frames should be estimated within musical tolerance."""

    @pytest.mark.parametrize(
        "freq",
        [
            55.0, 65.41, 82.41, 98.0, 110.0, 123.47, 130.81, 146.83,
            196.0, 261.63, 329.63, 440.0, 587.33, 659.25, 880.0, 1000.0,
        ],
    )
    def test_sine_within_two_percent(self, freq):
        estimate = estimate_pitch(sine_frame(freq), SR)

        assert estimate.detected, f"No pitch detected for {freq} Hz"
        error = abs(estimate.frequency - freq) / freq
        assert error < 0.02, f"{freq} Hz estimated as {estimate.frequency:.2f} Hz"

    @pytest.mark.parametrize("phase", [0.0, 0.3, 1.0, 2.0, 3.0, 4.5])
    def test_start_phase_does_not_matter(self, phase):
        frame = generate_sine_wave(220.0, FRAME_SIZE / SR, phase=phase)[:FRAME_SIZE]
        estimate = estimate_pitch(frame, SR)

        assert estimate.detected
        assert abs(estimate.frequency - 220.0) / 220.0 < 0.02

    def test_other_sample_rate(self):
        sr = 22050
        frame = generate_sine_wave(196.0, 2048 / sr, sr=sr)[:2048]
        estimate = estimate_pitch(frame, sr)

        assert estimate.detected
        assert abs(estimate.frequency - 196.0) / 196.0 < 0.02

    def test_accepts_plain_list(self):
        frame = sine_frame(440.0).tolist()
        estimate = estimate_pitch(frame, SR)
        assert estimate.detected

    def test_reports_rms(self):
        estimate = estimate_pitch(sine_frame(440.0, amplitude=0.5), SR)
        assert estimate.rms == pytest.approx(0.5 / np.sqrt(2), rel=0.01)

    def test_deterministic(self):
        frame = sine_frame(330.0)
        first = estimate_pitch(frame, SR)
        second = estimate_pitch(frame.copy(), SR)
        assert first == second


class TestHarmonicFrames:
    """Voice-like frames must report the fundamental, not a harmonic or a multiple."""

    @pytest.mark.parametrize("f0", [110.0, 130.81, 196.0])
    def test_weak_fundamental_strong_second_harmonic(self, f0):
        frame = harmonic_frame(f0, [0.1, 0.5])
        estimate = estimate_pitch(frame, SR)

        assert estimate.detected
        assert abs(estimate.frequency - f0) / f0 < 0.02, (
            f"{f0} Hz estimated as {estimate.frequency:.2f} Hz"
        )

    @pytest.mark.parametrize("f0", [82.41, 220.0, 440.0])
    def test_sawtooth_like_voice(self, f0):
        frame = harmonic_frame(f0, [0.4, 0.2, 0.13, 0.1])
        estimate = estimate_pitch(frame, SR)

        assert estimate.detected
        assert abs(estimate.frequency - f0) / f0 < 0.02

    def test_low_tone_survives_range_filter(self):
        estimate = PitchEstimator().track(sine_frame(110.0), SR)

        assert estimate.detected
        assert estimate.rejection is None
        assert abs(estimate.frequency - 110.0) / 110.0 < 0.02


class TestNoiseGate:
    """Silence and quiet noise must not produce a pitch."""

    def test_silence(self):
        estimate = estimate_pitch(np.zeros(FRAME_SIZE, dtype=np.float32), SR)

        assert not estimate.detected
        assert estimate.rejection == Rejection.NO_SIGNAL

    def test_quiet_white_noise(self):
        rng = np.random.default_rng(42)
        frame = (rng.standard_normal(FRAME_SIZE) * 0.01).astype(np.float32)

        estimate = estimate_pitch(frame, SR)

        assert not estimate.detected
        assert estimate.rejection == Rejection.NO_SIGNAL
        assert estimate.rms < 0.03

    def test_quiet_tone_is_gated(self):
        # RMS ~0.014, below the 0.03 gate
        estimate = estimate_pitch(sine_frame(440.0, amplitude=0.02), SR)
        assert not estimate.detected

    def test_gate_is_configurable(self):
        estimator = PitchEstimator(EstimatorConfig(noise_gate_rms=0.001))
        estimate = estimator.estimate(sine_frame(440.0, amplitude=0.02), SR)
        assert estimate.detected

    def test_empty_frame(self):
        estimate = estimate_pitch([], SR)
        assert not estimate.detected


class TestDegenerateFrames:
    """Frames without a usable correlation peak return no pitch, never raise."""

    def test_tiny_frame(self):
        estimate = estimate_pitch([0.9, -0.9], SR)

        assert not estimate.detected
        assert estimate.rejection == Rejection.DEGENERATE_FRAME

    def test_period_longer_than_search_window(self):
        # 5 Hz: the trimmed frame is a single zero-crossing ramp
        estimate = estimate_pitch(sine_frame(5.0), SR)

        assert not estimate.detected
        assert estimate.rejection == Rejection.DEGENERATE_FRAME


class TestPlausibleRange:
    """track() drops detections outside 50-1400 Hz."""

    def test_is_plausible(self):
        estimator = PitchEstimator()
        assert estimator.is_plausible(440.0)
        assert not estimator.is_plausible(50.0)
        assert not estimator.is_plausible(1400.0)
        assert not estimator.is_plausible(30.0)
        assert not estimator.is_plausible(2000.0)

    def test_track_keeps_vocal_pitch(self):
        estimate = PitchEstimator().track(sine_frame(220.0), SR)
        assert estimate.detected

    def test_track_rejects_high_pitch(self):
        estimator = PitchEstimator()
        frame = sine_frame(2000.0)

        raw = estimator.estimate(frame, SR)
        tracked = estimator.track(frame, SR)

        assert raw.detected
        assert raw.frequency > 1400.0
        assert not tracked.detected
        assert tracked.rejection == Rejection.OUT_OF_RANGE

    def test_custom_range(self):
        estimator = PitchEstimator(EstimatorConfig(min_frequency=300.0))
        assert not estimator.track(sine_frame(220.0), SR).detected


class TestInputValidation:
    """Caller errors raise ValueError."""

    def test_rejects_non_positive_sample_rate(self):
        with pytest.raises(ValueError, match="Sample rate"):
            estimate_pitch(sine_frame(440.0), 0)

    def test_rejects_multichannel_frame(self):
        stereo = np.stack([sine_frame(440.0), sine_frame(440.0)])
        with pytest.raises(ValueError, match="1-D"):
            estimate_pitch(stereo, SR)


class TestPitchEstimate:
    """Tests for the PitchEstimate value type."""

    def test_no_pitch(self):
        assert not NO_PITCH.detected
        assert NO_PITCH.frequency is None

    def test_detected(self):
        assert PitchEstimate(frequency=220.0).detected
