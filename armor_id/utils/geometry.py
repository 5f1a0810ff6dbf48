"""Light bar and digit quad geometry."""

import cv2
import numpy as np

from ..core.constants import DIGIT_WIDTH, DIGIT_HEIGHT
from ..core.entities import ArmorCandidate, NumberQuad, Point
from ..core.exceptions import GeometryDegenerateError

# Homographies with a smaller determinant are treated as singular
MIN_TRANSFORM_DETERMINANT = 1e-12
MIN_LIGHT_LENGTH = 1e-6


def _vec(p: Point) -> np.ndarray:
    return np.asarray(p, dtype=np.float64)


def _point(v: np.ndarray) -> Point:
    return (float(v[0]), float(v[1]))


def canonical_quad() -> NumberQuad:
    """Corners of the canonical digit image, at pixel centers."""
    return NumberQuad(
        bottom_left=(0.0, float(DIGIT_HEIGHT - 1)),
        top_left=(0.0, 0.0),
        top_right=(float(DIGIT_WIDTH - 1), 0.0),
        bottom_right=(float(DIGIT_WIDTH - 1), float(DIGIT_HEIGHT - 1)),
    )


def number_vertices(armor: ArmorCandidate, height_ratio: float, width_ratio: float) -> NumberQuad:
    """Project the light bar endpoints into the digit region quad.

    The spacing between the two lights (separately at the top and at the
    bottom) sets the width of the region, and each light's own extent sets
    the height of the side it is on, so a plate seen at an angle yields a
    trapezoid rather than a rectangle.
    """
    left, right = armor.left_light, armor.right_light
    center = _vec(armor.center)

    top_width_diff = _vec(right.top) - _vec(left.top)
    bottom_width_diff = _vec(right.bottom) - _vec(left.bottom)
    left_height_diff = _vec(left.bottom) - _vec(left.top)
    right_height_diff = _vec(right.bottom) - _vec(right.top)

    return NumberQuad(
        bottom_left=_point(center + left_height_diff * height_ratio - bottom_width_diff * width_ratio),
        top_left=_point(center - left_height_diff * height_ratio - top_width_diff * width_ratio),
        top_right=_point(center - right_height_diff * height_ratio + top_width_diff * width_ratio),
        bottom_right=_point(center + right_height_diff * height_ratio + bottom_width_diff * width_ratio),
    )


def check_lights(armor: ArmorCandidate) -> None:
    """Reject armors whose light bars cannot span a digit region."""
    for side, light in (("left", armor.left_light), ("right", armor.right_light)):
        if light.length < MIN_LIGHT_LENGTH:
            raise GeometryDegenerateError(f"{side} light bar has zero length")
    if (np.allclose(armor.left_light.top, armor.right_light.top)
            and np.allclose(armor.left_light.bottom, armor.right_light.bottom)):
        raise GeometryDegenerateError("left and right light bars coincide")


def perspective_matrix(src: NumberQuad, dst: NumberQuad, min_area: float = 1.0) -> np.ndarray:
    """4-point homography mapping ``src`` onto ``dst``.

    Raises:
        GeometryDegenerateError: if ``src`` is not finite, has area at or below
            ``min_area`` (zero, negative or mirrored), or yields a singular
            transform.
    """
    src_pts = src.as_array()
    if not np.all(np.isfinite(src_pts)):
        raise GeometryDegenerateError("digit quad has non-finite corners")

    area = src.signed_area()
    if area <= min_area:
        raise GeometryDegenerateError(f"digit quad area {area:.3f} is not above {min_area}")

    try:
        matrix = cv2.getPerspectiveTransform(src_pts, dst.as_array())
    except cv2.error as e:
        raise GeometryDegenerateError(f"perspective transform failed: {e}") from e

    if not np.all(np.isfinite(matrix)) or abs(np.linalg.det(matrix)) < MIN_TRANSFORM_DETERMINANT:
        raise GeometryDegenerateError("perspective transform is singular")
    return matrix

