"""Pitch estimation - autocorrelation f0 for single waveform frames.

Implements a per-frame estimator suited to a display-refresh polling loop:
- RMS noise gate (rejects silence before the correlation step)
- Clip trimming of low-energy edges
- Length-normalized autocorrelation (no bias toward short lags)
- Parabolic sub-sample refinement of the winning lag
- Plausible-range filter for sung/played fundamentals
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np
import librosa

from ..core.constants import MIN_FREQUENCY, MAX_FREQUENCY


class Rejection(Enum):
    """Why a frame produced no usable pitch."""
    NO_SIGNAL = "no_signal"  # RMS below the noise gate
    DEGENERATE_FRAME = "degenerate_frame"  # No correlation peak to refine
    OUT_OF_RANGE = "out_of_range"  # Outside the plausible frequency range


@dataclass(frozen=True)
class PitchEstimate:
    """Result of estimating one frame. `frequency` is None for no pitch."""

    frequency: Optional[float] = None
    rms: float = 0.0
    rejection: Optional[Rejection] = None

    @property
    def detected(self) -> bool:
        return self.frequency is not None


NO_PITCH = PitchEstimate()


@dataclass(frozen=True)
class EstimatorConfig:
    """Configuration for the autocorrelation estimator.

    Attributes:
        noise_gate_rms: Minimum frame RMS to attempt detection (default: 0.03)
        clip_threshold: Amplitude below which edge samples start/end the
            analysed interval (default: 0.2)
        min_frequency: Lowest plausible fundamental in Hz (default: 50)
        max_frequency: Highest plausible fundamental in Hz (default: 1400)
        peak_tolerance: Fraction of the best repeat (energy-normalized
            correlation) an earlier peak must reach to be taken as the
            period instead of a later multiple (default: 0.97)
        max_lag_fraction: Longest lag searched, as a fraction of the
            trimmed frame (default: 0.5)
    """

    noise_gate_rms: float = 0.03
    clip_threshold: float = 0.2
    min_frequency: float = MIN_FREQUENCY
    max_frequency: float = MAX_FREQUENCY
    peak_tolerance: float = 0.97
    max_lag_fraction: float = 0.5


class PitchEstimator:
    """Estimate the fundamental frequency of one waveform frame."""

    def __init__(self, config: Optional[EstimatorConfig] = None):
        self.config = config if config is not None else EstimatorConfig()

    def estimate(
        self,
        frame: Union[Sequence[float], np.ndarray],
        sample_rate: int,
    ) -> PitchEstimate:
        """
        Estimate f0 of a frame without range filtering.

        Args:
            frame: Mono samples in [-1, 1]
            sample_rate: Sample rate in Hz

        Returns:
            PitchEstimate (frequency is None when nothing was detected)

        Raises:
            ValueError: If sample_rate is not positive or frame is not 1-D
        """
        if sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {sample_rate}")

        buf = np.asarray(frame, dtype=np.float64)
        if buf.ndim != 1:
            raise ValueError(f"Expected a 1-D frame, got shape {buf.shape}")
        if buf.size == 0:
            return PitchEstimate(rejection=Rejection.NO_SIGNAL)

        rms = float(np.sqrt(np.mean(buf ** 2)))
        if rms < self.config.noise_gate_rms:
            return PitchEstimate(rms=rms, rejection=Rejection.NO_SIGNAL)

        buf = self._trim(buf)
        if buf.size < 3:
            return PitchEstimate(rms=rms, rejection=Rejection.DEGENERATE_FRAME)

        corr = self._normalized_autocorrelation(buf)
        lag = self._find_period(buf, corr)
        if lag is None:
            return PitchEstimate(rms=rms, rejection=Rejection.DEGENERATE_FRAME)

        return PitchEstimate(frequency=sample_rate / lag, rms=rms)

    def track(
        self,
        frame: Union[Sequence[float], np.ndarray],
        sample_rate: int,
    ) -> PitchEstimate:
        """Estimate f0 and drop detections outside the plausible range."""
        estimate = self.estimate(frame, sample_rate)
        if estimate.detected and not self.is_plausible(estimate.frequency):
            return PitchEstimate(rms=estimate.rms, rejection=Rejection.OUT_OF_RANGE)
        return estimate

    def is_plausible(self, frequency: float) -> bool:
        """Check a frequency against the plausible vocal/instrument range."""
        return self.config.min_frequency < frequency < self.config.max_frequency

    def _trim(self, buf: np.ndarray) -> np.ndarray:
        """Cut the frame to the interval between its first and last quiet samples."""
        n = buf.size
        half = (n + 1) // 2
        quiet = np.abs(buf) < self.config.clip_threshold

        head = np.flatnonzero(quiet[:half])
        start = int(head[0]) if head.size else 0

        tail_idx = np.arange(n - 1, n - half, -1)
        tail = tail_idx[quiet[tail_idx]]
        end = int(tail[0]) if tail.size else n - 1

        return buf[start:end]

    @staticmethod
    def _normalized_autocorrelation(buf: np.ndarray) -> np.ndarray:
        """Autocorrelation divided by the number of terms summed at each lag."""
        corr = librosa.autocorrelate(buf)
        return corr / np.arange(buf.size, 0, -1)

    def _find_period(self, buf: np.ndarray, corr: np.ndarray) -> Optional[float]:
        """Locate the fundamental period (in samples) with sub-sample precision."""
        # Lags past this average too few products to be trusted
        limit = int(corr.size * self.config.max_lag_fraction)

        # Leave the zero-lag lobe: first non-positive lag, then down to its trough
        crossed = np.flatnonzero(corr[:limit + 1] <= 0)
        if crossed.size == 0:
            return None
        start = int(crossed[0])
        rising = np.flatnonzero(np.diff(corr[start:]) >= 0)
        if rising.size == 0:
            return None
        start += int(rising[0])
        if start >= limit:
            return None

        best = start + int(np.argmax(corr[start:limit + 1]))
        if corr[best] <= 0:
            return None

        # Period multiples repeat the waveform as well as the period itself
        # and can win on integer-lag rounding. Take the earliest peak that
        # repeats the frame nearly as well as the best-repeating one.
        inner = corr[1:-1]
        peaks = np.flatnonzero((inner >= corr[:-2]) & (inner >= corr[2:])) + 1
        peaks = peaks[(peaks >= start) & (peaks < best)]
        candidates = np.append(peaks, best)
        clarity = self._clarity(buf, corr, candidates)
        strong = candidates[clarity >= self.config.peak_tolerance * clarity.max()]
        lag = int(strong[0])

        if lag <= 0 or lag >= corr.size - 1:
            return None

        x1, x2, x3 = corr[lag - 1], corr[lag], corr[lag + 1]
        a = (x1 + x3 - 2 * x2) / 2
        b = (x3 - x1) / 2
        period = float(lag)
        if a:
            period -= b / (2 * a)

        if period < 2:
            return None
        return period

    @staticmethod
    def _clarity(buf: np.ndarray, corr: np.ndarray, lags: np.ndarray) -> np.ndarray:
        """Energy-normalized correlation at `lags`; 1.0 is a perfect repeat."""
        n = buf.size
        energy = np.concatenate(([0.0], np.cumsum(buf ** 2)))
        products = corr[lags] * (n - lags)
        overlap = energy[n - lags] + (energy[n] - energy[lags])
        return 2 * products / np.maximum(overlap, np.finfo(float).tiny)


_DEFAULT_ESTIMATOR = PitchEstimator()


def estimate_pitch(
    frame: Union[Sequence[float], np.ndarray],
    sample_rate: int,
) -> PitchEstimate:
    """Estimate f0 of a frame with the default configuration."""
    return _DEFAULT_ESTIMATOR.estimate(frame, sample_rate)
