"""Digit region rectification.

Maps each armor candidate's digit region, bounded by a quad projected from
its two light bars, onto the canonical upright 20x28 binary digit image.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from ..core.constants import DIGIT_SIZE, SUPPORTED_COLOR_ORDERS
from ..core.entities import ArmorCandidate, NumberQuad, RejectedCandidate, RejectionReason
from ..core.exceptions import ConfigurationError, GeometryDegenerateError
from ..utils.geometry import canonical_quad, check_lights, number_vertices, perspective_matrix
from ..utils.image_utils import check_frame, to_grayscale

logger = logging.getLogger(__name__)


class NumberRectifier:
    """Rectifies armor digit regions into canonical binary images."""

    def __init__(self, height_ratio: float, width_ratio: float,
                 color_order: str = "rgb", min_quad_area: float = 1.0):
        """
        Raises:
            ConfigurationError: if ``color_order`` is not a supported channel order
        """
        if not isinstance(color_order, str) or color_order.lower() not in SUPPORTED_COLOR_ORDERS:
            raise ConfigurationError(
                f"Invalid color order '{color_order}'. Must be one of: {', '.join(SUPPORTED_COLOR_ORDERS)}"
            )
        self.height_ratio = height_ratio
        self.width_ratio = width_ratio
        self.color_order = color_order.lower()
        self.min_quad_area = min_quad_area

    @classmethod
    def from_config(cls, cfg) -> "NumberRectifier":
        return cls(cfg.height_ratio, cfg.width_ratio,
                   color_order=cfg.color_order, min_quad_area=cfg.min_quad_area)

    def number_quad(self, armor: ArmorCandidate) -> NumberQuad:
        return number_vertices(armor, self.height_ratio, self.width_ratio)

    def rectify(self, src: np.ndarray, quad: NumberQuad,
                target: Optional[NumberQuad] = None) -> np.ndarray:
        """Warp ``quad`` of ``src`` onto ``target`` and binarize with Otsu.

        Args:
            src: full camera frame, 1, 3 or 4 channels
            quad: digit region corners in ``src``
            target: destination corners, the canonical image corners by default

        Returns:
            uint8 image of shape (28, 20) holding only 0 and 255
        """
        matrix = perspective_matrix(quad, target or canonical_quad(), self.min_quad_area)
        number_image = cv2.warpPerspective(src, matrix, DIGIT_SIZE)
        number_image = to_grayscale(number_image, self.color_order)
        _, number_image = cv2.threshold(number_image, 0, 255, cv2.THRESH_BINARY | cv2.THRESH_OTSU)
        return number_image

    def extract_number(self, src: np.ndarray, armor: ArmorCandidate) -> ArmorCandidate:
        """Return a copy of ``armor`` carrying its rectified digit image.

        Raises:
            GeometryDegenerateError: if the light bars do not span a usable quad
        """
        check_lights(armor)
        number_image = self.rectify(src, self.number_quad(armor))
        return armor.evolve(digit_image=number_image)

    def try_extract_number(self, src: np.ndarray, armor: ArmorCandidate):
        """Rectify one armor, returning a RejectedCandidate instead of raising."""
        try:
            return self.extract_number(src, armor)
        except GeometryDegenerateError as e:
            logger.warning(f"Dropping armor at ({armor.center[0]:.1f}, {armor.center[1]:.1f}): {e}")
            return RejectedCandidate(armor, RejectionReason.DEGENERATE_GEOMETRY, str(e))

    def extract_numbers(self, src: np.ndarray, armors: Sequence[ArmorCandidate],
                        mapper=map) -> Tuple[List[ArmorCandidate], List[RejectedCandidate]]:
        """Rectify a batch of armors, keeping input order.

        Args:
            src: full camera frame
            armors: candidates from light matching
            mapper: ``map``-compatible callable used to run per-armor work

        Returns:
            (rectified armors, armors dropped for degenerate geometry)

        Raises:
            FrameError: if ``src`` is not a usable frame
        """
        check_frame(src)
        rectified: List[ArmorCandidate] = []
        rejected: List[RejectedCandidate] = []
        for outcome in mapper(lambda armor: self.try_extract_number(src, armor), armors):
            if isinstance(outcome, RejectedCandidate):
                rejected.append(outcome)
            else:
                rectified.append(outcome)
        return rectified, rejected
