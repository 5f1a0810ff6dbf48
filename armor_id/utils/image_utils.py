"""Image processing utilities."""

import cv2
import numpy as np
from typing import List, Optional, Sequence

from ..core.entities import ArmorCandidate
from ..core.exceptions import FrameError

_GRAY_CONVERSIONS = {
    ("rgb", 3): cv2.COLOR_RGB2GRAY,
    ("bgr", 3): cv2.COLOR_BGR2GRAY,
    ("rgb", 4): cv2.COLOR_RGBA2GRAY,
    ("bgr", 4): cv2.COLOR_BGRA2GRAY,
}


def check_frame(image: np.ndarray) -> None:
    """Raise FrameError unless ``image`` is a non-empty 8-bit camera frame."""
    if image is None or not isinstance(image, np.ndarray) or image.size == 0:
        raise FrameError("frame is empty")
    if image.dtype != np.uint8:
        raise FrameError(f"frame must be 8-bit, got {image.dtype}")
    if image.ndim == 2:
        return
    if image.ndim != 3 or image.shape[2] not in (1, 3, 4):
        raise FrameError(f"unsupported frame shape {image.shape}")


def to_grayscale(image: np.ndarray, color_order: str = "rgb") -> np.ndarray:
    """Convert a 1, 3 or 4 channel image to a single channel."""
    if image.ndim == 2:
        return image
    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0]
    return cv2.cvtColor(image, _GRAY_CONVERSIONS[(color_order, channels)])


def is_binary(image: np.ndarray) -> bool:
    """True when every pixel is 0 or 255."""
    return bool(np.all((image == 0) | (image == 255)))


def concat_vertical(images: Sequence[np.ndarray]) -> Optional[np.ndarray]:
    if not images:
        return None
    return cv2.vconcat(list(images))


def stack_number_images(armors: Sequence[ArmorCandidate]) -> Optional[np.ndarray]:
    """Side-by-side strip of the armors' digit images for debug display."""
    images = [a.digit_image for a in armors if a.digit_image is not None]
    if not images:
        return None
    return cv2.hconcat(images)


def draw_armors(frame: np.ndarray, armors: Sequence[ArmorCandidate],
                color=(0, 255, 0), text_color=(0, 255, 255)) -> np.ndarray:
    """Return a copy of ``frame`` with each armor outlined and labeled."""
    canvas = frame.copy()
    if canvas.ndim == 2:
        canvas = cv2.cvtColor(canvas, cv2.COLOR_GRAY2BGR)

    for armor in armors:
        corners: List[tuple] = [
            armor.left_light.top, armor.right_light.top,
            armor.right_light.bottom, armor.left_light.bottom,
        ]
        pts = np.array(corners, dtype=np.float32).round().astype(np.int32).reshape(-1, 1, 2)
        cv2.polylines(canvas, [pts], True, color, 2)

        if armor.classification_text:
            org = (int(round(armor.center[0])), int(round(armor.center[1])))
            cv2.putText(canvas, armor.classification_text, org,
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, text_color, 2)
    return canvas
