"""Session layer - The guided range test state machine."""

from .capture import (
    RangeCaptureState,
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

__all__ = [
    "RangeCaptureState",
    "RangeCaptureSession",
    "CaptureConfig",
    "InvalidTransitionError",
    "initial_state",
    "begin",
    "select_register",
    "observe",
    "observe_midi",
    "can_advance",
    "advance",
    "answer",
    "finish",
    "reset",
]
