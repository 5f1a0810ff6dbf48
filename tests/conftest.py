"""Pytest configuration and shared fixtures for armor number identification.

Digit templates are rendered with OpenCV's Hershey font, and test frames are
built by warping a template back into the quad an armor's light bars define,
so rectifying that armor recovers the template pixel for pixel.
"""
import logging
from pathlib import Path
from typing import Dict, Tuple

import cv2
import numpy as np
import pytest

from armor_id.config.settings import Config, build_config
from armor_id.core.constants import DIGIT_SHAPE
from armor_id.core.entities import ArmorCandidate, DigitLabel, LightBar, RECOGNIZED_LABELS
from armor_id.services.template_manager import DigitTemplates
from armor_id.utils.geometry import canonical_quad, number_vertices, perspective_matrix

HEIGHT_RATIO = 0.5
WIDTH_RATIO = 0.25
FRAME_SIZE = (320, 240)  # width, height

logging.getLogger('armor_id').setLevel(logging.DEBUG)


def render_digit(text: str) -> np.ndarray:
    """Canonical-size binary image of ``text`` in white on black."""
    image = np.zeros(DIGIT_SHAPE, dtype=np.uint8)
    cv2.putText(image, text, (3, 23), cv2.FONT_HERSHEY_SIMPLEX, 0.8, 255, 2)
    _, image = cv2.threshold(image, 127, 255, cv2.THRESH_BINARY)
    return image


def make_armor(cx: float = 160.0, cy: float = 120.0,
               spacing: float = 100.0, length: float = 70.0) -> ArmorCandidate:
    """Upright armor with two vertical light bars ``spacing`` apart."""
    half_w, half_h = spacing / 2.0, length / 2.0
    left = LightBar(top=(cx - half_w, cy - half_h), bottom=(cx - half_w, cy + half_h))
    right = LightBar(top=(cx + half_w, cy - half_h), bottom=(cx + half_w, cy + half_h))
    return ArmorCandidate(left_light=left, right_light=right, center=(cx, cy))


def paint_digit(frame: np.ndarray, armor: ArmorCandidate, digit: np.ndarray) -> np.ndarray:
    """Warp ``digit`` into the armor's digit quad of a grayscale ``frame``."""
    quad = number_vertices(armor, HEIGHT_RATIO, WIDTH_RATIO)
    matrix = perspective_matrix(quad, canonical_quad())
    height, width = frame.shape[:2]
    painted = cv2.warpPerspective(digit.copy(), matrix, (width, height),
                                  flags=cv2.INTER_NEAREST | cv2.WARP_INVERSE_MAP)
    return np.maximum(frame, painted)


def render_frame(placements) -> np.ndarray:
    """RGB frame with each (armor, digit image) pair painted in."""
    width, height = FRAME_SIZE
    gray = np.zeros((height, width), dtype=np.uint8)
    for armor, digit in placements:
        gray = paint_digit(gray, armor, digit)
    return cv2.cvtColor(gray, cv2.COLOR_GRAY2RGB)


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Provide a temporary directory for test files."""
    return tmp_path


@pytest.fixture(scope="session")
def template_images() -> Dict[DigitLabel, np.ndarray]:
    return {label: render_digit(label.value) for label in RECOGNIZED_LABELS}


@pytest.fixture
def templates(template_images) -> DigitTemplates:
    return DigitTemplates(template_images)


@pytest.fixture
def template_dir(temp_dir, template_images) -> Path:
    """Directory holding 2.png .. 5.png."""
    directory = temp_dir / "templates"
    directory.mkdir()
    for label, image in template_images.items():
        cv2.imwrite(str(directory / f"{label.value}.png"), image)
    return directory


@pytest.fixture
def config(template_dir) -> Config:
    return build_config({
        "height_ratio": HEIGHT_RATIO,
        "width_ratio": WIDTH_RATIO,
        "confidence_threshold": 0.7,
        "template_dir": str(template_dir),
    })


@pytest.fixture
def three_scene(template_images) -> Tuple[np.ndarray, ArmorCandidate]:
    """Frame with a '3' painted inside one armor's digit region."""
    armor = make_armor()
    frame = render_frame([(armor, template_images[DigitLabel.THREE])])
    return frame, armor


@pytest.fixture
def armor_factory():
    """Provide the upright armor builder."""
    return make_armor


@pytest.fixture
def frame_factory():
    """Provide the frame builder taking (armor, digit image) pairs."""
    return render_frame


@pytest.fixture
def digit_renderer():
    return render_digit
