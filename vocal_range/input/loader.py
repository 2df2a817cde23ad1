"""Audio loading and framing utilities."""

import warnings
from pathlib import Path
from typing import Iterator, Optional, Tuple

import numpy as np
import librosa

from ..core.constants import DEFAULT_SR, DEFAULT_FRAME_SIZE, DEFAULT_HOP_LENGTH


class AudioLoader:
    """Reads range-test takes from disk and cuts them into estimator frames."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a"}

    def __init__(
        self,
        target_sr: int = DEFAULT_SR,
        mono: bool = True,
        normalize: bool = False,
    ):
        """
        Args:
            target_sr: Sample rate every take is resampled to
            mono: Mix channels down to one if True
            normalize: Scale the take so its peak is 1.0. Off by default
                because the noise gate works on absolute levels.
        """
        self.target_sr = target_sr
        self.mono = mono
        self.normalize = normalize

    def load(self, path: str) -> Tuple[np.ndarray, int]:
        """
        Read a take.

        Returns:
            (samples, sample rate) with samples as float32 in [-1, 1]

        Raises:
            FileNotFoundError: No file at `path`
            ValueError: Suffix is not one of SUPPORTED_FORMATS
        """
        take = Path(path)
        self._check(take)

        samples, sr = librosa.load(str(take), sr=self.target_sr, mono=self.mono)
        if self.normalize:
            samples = self._peak_normalize(samples)
        return samples, sr

    def _check(self, take: Path) -> None:
        if not take.exists():
            raise FileNotFoundError(f"Audio file not found: {take}")
        suffix = take.suffix.lower()
        if suffix not in self.SUPPORTED_FORMATS:
            supported = ", ".join(sorted(self.SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported format: {take.suffix}. Supported: {supported}")

    @staticmethod
    def _peak_normalize(samples: np.ndarray) -> np.ndarray:
        peak = float(np.max(np.abs(samples))) if samples.size else 0.0
        return samples / peak if peak > 0 else samples

    def frames(
        self,
        audio: np.ndarray,
        frame_size: int = DEFAULT_FRAME_SIZE,
        hop_length: int = DEFAULT_HOP_LENGTH,
    ) -> Iterator[np.ndarray]:
        """
        Yield consecutive analysis frames in temporal order.

        Audio shorter than one frame is zero-padded to a single frame.
        """
        if frame_size <= 0 or hop_length <= 0:
            raise ValueError("frame_size and hop_length must be positive")

        audio = np.asarray(audio, dtype=np.float32)
        if audio.size < frame_size:
            warnings.warn(
                f"Audio has {audio.size} samples, shorter than one frame "
                f"({frame_size}); padding with silence"
            )
            audio = np.pad(audio, (0, frame_size - audio.size))

        framed = librosa.util.frame(audio, frame_length=frame_size, hop_length=hop_length)
        for i in range(framed.shape[1]):
            yield framed[:, i]

    def frame_times(
        self,
        n_frames: int,
        sr: Optional[int] = None,
        hop_length: int = DEFAULT_HOP_LENGTH,
    ) -> np.ndarray:
        """Start time in seconds of each frame."""
        sr = sr or self.target_sr
        return librosa.frames_to_time(np.arange(n_frames), sr=sr, hop_length=hop_length)

    def get_duration(self, audio: np.ndarray, sr: Optional[int] = None) -> float:
        """Length of a take in seconds."""
        return audio.shape[-1] / (sr or self.target_sr)
