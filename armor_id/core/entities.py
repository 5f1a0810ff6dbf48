"""Domain entities (data-only structures) used across services."""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Tuple
import math

import cv2
import numpy as np

Point = Tuple[float, float]  # (x, y) in image pixels, y pointing down


class DigitLabel(str, Enum):
    """Closed digit vocabulary painted on armor plates."""
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    UNASSIGNED = "unassigned"

    def __str__(self) -> str:
        return self.value


# Template enumeration order; the first label wins exact similarity ties
RECOGNIZED_LABELS: Tuple[DigitLabel, ...] = (
    DigitLabel.TWO, DigitLabel.THREE, DigitLabel.FOUR, DigitLabel.FIVE
)


class RejectionReason(str, Enum):
    DEGENERATE_GEOMETRY = "degenerate_geometry"
    SIZE_MISMATCH = "size_mismatch"
    LOW_CONFIDENCE = "low_confidence"


class NumberQuad(NamedTuple):
    """Digit region corners.

    Source and destination quads are always built in this field order, so a
    perspective transform between two NumberQuads cannot mix up corners.
    """
    bottom_left: Point
    top_left: Point
    top_right: Point
    bottom_right: Point

    def as_array(self) -> np.ndarray:
        return np.array(self, dtype=np.float32).reshape(4, 2)

    def signed_area(self) -> float:
        """Shoelace area, positive for an upright quad in image coordinates."""
        pts = np.asarray(self, dtype=np.float64)
        x, y = pts[:, 0], pts[:, 1]
        return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)))


@dataclass(slots=True, frozen=True)
class LightBar:
    top: Point
    bottom: Point

    @classmethod
    def from_rotated_rect(cls, rect) -> "LightBar":
        """Build a light bar from an OpenCV rotated rect ((cx, cy), (w, h), angle)."""
        corners = sorted(map(tuple, cv2.boxPoints(rect)), key=lambda p: p[1])
        top = ((corners[0][0] + corners[1][0]) / 2.0, (corners[0][1] + corners[1][1]) / 2.0)
        bottom = ((corners[2][0] + corners[3][0]) / 2.0, (corners[2][1] + corners[3][1]) / 2.0)
        return cls(top=(float(top[0]), float(top[1])), bottom=(float(bottom[0]), float(bottom[1])))

    @property
    def center(self) -> Point:
        return ((self.top[0] + self.bottom[0]) / 2.0, (self.top[1] + self.bottom[1]) / 2.0)

    @property
    def length(self) -> float:
        return math.hypot(self.bottom[0] - self.top[0], self.bottom[1] - self.top[1])

    @property
    def tilt_angle(self) -> float:
        """Angle from vertical in degrees, positive when the top leans right."""
        return math.degrees(math.atan2(self.top[0] - self.bottom[0], self.bottom[1] - self.top[1]))


@dataclass(slots=True)
class ArmorCandidate:
    left_light: LightBar
    right_light: LightBar
    center: Point
    digit_image: Optional[np.ndarray] = field(default=None, compare=False, repr=False)
    similarity: float = 0.0
    label: DigitLabel = DigitLabel.UNASSIGNED
    classification_text: str = ""

    @classmethod
    def from_lights(cls, left_light: LightBar, right_light: LightBar) -> "ArmorCandidate":
        lc, rc = left_light.center, right_light.center
        return cls(left_light=left_light, right_light=right_light,
                   center=((lc[0] + rc[0]) / 2.0, (lc[1] + rc[1]) / 2.0))

    def evolve(self, **changes: Any) -> "ArmorCandidate":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass(slots=True)
class RejectedCandidate:
    armor: ArmorCandidate
    reason: RejectionReason
    detail: str = ""


@dataclass(slots=True)
class ClassificationBatch:
    armors: List[ArmorCandidate]
    rejected: List[RejectedCandidate]
    xor_diagnostic: Optional[np.ndarray] = None


@dataclass(slots=True)
class FrameResult:
    armors: List[ArmorCandidate]
    rejected: List[RejectedCandidate]
    xor_diagnostic: Optional[np.ndarray]
    latency_ms: float
    frame_id: str
