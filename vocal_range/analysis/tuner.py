"""Continuous tuning readings for a polling display loop."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

from .pitch import PitchEstimator
from ..core import NoteIdentity, note_from_frequency
from ..core.constants import IN_TUNE_CENTS


class TuningStatus(Enum):
    """How the sung note sits against its nearest tempered pitch."""
    IN_TUNE = "in_tune"
    FLAT = "flat"
    SHARP = "sharp"
    NO_SIGNAL = "no_signal"


@dataclass(frozen=True)
class TunerReading:
    """What a tuner display shows for one tick."""

    note: Optional[NoteIdentity] = None
    status: TuningStatus = TuningStatus.NO_SIGNAL

    @property
    def detected(self) -> bool:
        return self.note is not None

    @property
    def in_tune(self) -> bool:
        return self.status == TuningStatus.IN_TUNE


NO_READING = TunerReading()


class Tuner:
    """Turn waveform frames into note + cents readings.

    `read` reports exactly what the current frame contains; `update` keeps
    the last valid reading on screen while frames carry no usable pitch.
    """

    def __init__(
        self,
        estimator: Optional[PitchEstimator] = None,
        in_tune_cents: float = IN_TUNE_CENTS,
    ):
        self.estimator = estimator if estimator is not None else PitchEstimator()
        self.in_tune_cents = in_tune_cents
        self.current = NO_READING

    def read(
        self,
        frame: Union[Sequence[float], np.ndarray],
        sample_rate: int,
    ) -> TunerReading:
        estimate = self.estimator.track(frame, sample_rate)
        if not estimate.detected:
            return NO_READING
        return self.reading_for(estimate.frequency)

    def reading_for(self, frequency: float) -> TunerReading:
        """Build the reading for an already-estimated frequency."""
        note = note_from_frequency(frequency)
        if abs(note.cents) < self.in_tune_cents:
            status = TuningStatus.IN_TUNE
        elif note.cents < 0:
            status = TuningStatus.FLAT
        else:
            status = TuningStatus.SHARP
        return TunerReading(note=note, status=status)

    def update(
        self,
        frame: Union[Sequence[float], np.ndarray],
        sample_rate: int,
    ) -> TunerReading:
        """Advance one tick, holding the previous reading on silence."""
        reading = self.read(frame, sample_rate)
        if reading.detected:
            self.current = reading
        return self.current

    def clear(self) -> None:
        """Blank the display (e.g. when the microphone is switched off)."""
        self.current = NO_READING
