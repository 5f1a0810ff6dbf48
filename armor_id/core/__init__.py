"""Core domain entities, constants and errors."""

from .entities import (
    ArmorCandidate, ClassificationBatch, DigitLabel, FrameResult, LightBar,
    NumberQuad, Point, RECOGNIZED_LABELS, RejectedCandidate, RejectionReason
)
from .exceptions import (
    ApplicationError, ConfigurationError, FrameError, GeometryDegenerateError,
    SizeMismatchError, ValidationError
)
from .constants import APP_NAME, VERSION, DIGIT_WIDTH, DIGIT_HEIGHT, DIGIT_SHAPE

__all__ = [
    "ArmorCandidate", "ClassificationBatch", "DigitLabel", "FrameResult", "LightBar",
    "NumberQuad", "Point", "RECOGNIZED_LABELS", "RejectedCandidate", "RejectionReason",
    "ApplicationError", "ConfigurationError", "FrameError", "GeometryDegenerateError",
    "SizeMismatchError", "ValidationError",
    "APP_NAME", "VERSION", "DIGIT_WIDTH", "DIGIT_HEIGHT", "DIGIT_SHAPE"
]
