"""Digit template loading.

The vocabulary is closed: exactly one reference image per label in
``RECOGNIZED_LABELS``. Templates are binarized and frozen at load time and
then shared read-only by every classification call.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Tuple, Union

import cv2
import numpy as np

from ..core.constants import DIGIT_SHAPE, TEMPLATE_BINARY_THRESHOLD, TEMPLATE_FILE_PATTERN
from ..core.entities import DigitLabel, RECOGNIZED_LABELS
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class DigitTemplates:
    """Immutable label -> canonical binary image lookup."""

    def __init__(self, images: Mapping[DigitLabel, np.ndarray]):
        """
        Args:
            images: one grayscale image of the canonical size per recognized label

        Raises:
            ConfigurationError: if the mapping is empty, a label is missing or
                unknown, or an image is not canonical
        """
        if not images:
            raise ConfigurationError("No digit templates provided")

        by_label = {}
        for key, image in images.items():
            try:
                label = DigitLabel(key)
            except ValueError:
                label = None
            if label not in RECOGNIZED_LABELS:
                raise ConfigurationError(f"Unknown template label: {key!r}")
            by_label[label] = image

        missing = [label.value for label in RECOGNIZED_LABELS if label not in by_label]
        if missing:
            raise ConfigurationError(f"Missing templates for labels: {missing}")

        templates = {}
        for label in RECOGNIZED_LABELS:
            templates[label] = self._prepare(label, by_label[label])
        self._templates = MappingProxyType(templates)

    @staticmethod
    def _prepare(label: DigitLabel, image: np.ndarray) -> np.ndarray:
        if image is None or not isinstance(image, np.ndarray) or image.size == 0:
            raise ConfigurationError(f"Template '{label.value}' is empty")
        if image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]
        if image.ndim != 2:
            raise ConfigurationError(f"Template '{label.value}' must be single-channel, got shape {image.shape}")
        if image.shape != DIGIT_SHAPE:
            raise ConfigurationError(
                f"Template '{label.value}' has shape {image.shape}, expected {DIGIT_SHAPE}"
            )

        # Ensure binary image
        _, binary = cv2.threshold(image.astype(np.uint8), TEMPLATE_BINARY_THRESHOLD, 255, cv2.THRESH_BINARY)
        binary.setflags(write=False)
        return binary

    @classmethod
    def load(cls, template_dir: Union[str, Path]) -> "DigitTemplates":
        """Load ``<label>.png`` for every recognized label from ``template_dir``.

        Raises:
            ConfigurationError: if the directory or any template cannot be read
        """
        directory = Path(template_dir)
        if not directory.is_dir():
            raise ConfigurationError(f"Template directory does not exist: {directory}")

        images = {}
        for label in RECOGNIZED_LABELS:
            path = directory / TEMPLATE_FILE_PATTERN.format(label=label.value)
            if not path.is_file():
                raise ConfigurationError(f"Missing digit template: {path}")

            image = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
            if image is None:
                raise ConfigurationError(f"Failed to load digit template: {path}")
            images[label] = image

        templates = cls(images)
        logger.info(f"Loaded {len(templates)} digit templates from {directory}")
        return templates

    @property
    def labels(self) -> Tuple[DigitLabel, ...]:
        return tuple(self._templates)

    def items(self) -> Iterator[Tuple[DigitLabel, np.ndarray]]:
        """Templates in tie-break order."""
        return iter(self._templates.items())

    def __getitem__(self, label: DigitLabel) -> np.ndarray:
        return self._templates[label]

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, label: object) -> bool:
        return label in self._templates
