"""XOR template classification of rectified digit images.

Similarity is the complement of the normalized Hamming distance between the
candidate's binary digit image and a template: 1.0 for a pixel-perfect match,
0.0 for its full complement. Each candidate takes the best scoring template;
candidates below the confidence threshold are dropped afterwards.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import DIGIT_SHAPE, FULL_DIFF_SUM
from ..core.entities import (
    ArmorCandidate, ClassificationBatch, DigitLabel, RejectedCandidate, RejectionReason
)
from ..core.exceptions import ConfigurationError, SizeMismatchError
from ..utils.image_utils import concat_vertical
from .template_manager import DigitTemplates

logger = logging.getLogger(__name__)


def format_classification(label: DigitLabel, similarity: float) -> str:
    return f"{label.value}:{similarity * 100.0:.1f}%"


def check_digit_image(image: Optional[np.ndarray]) -> None:
    """Raise SizeMismatchError unless ``image`` is a canonical uint8 digit image."""
    if image is None:
        raise SizeMismatchError("armor has no digit image")
    if not isinstance(image, np.ndarray) or image.dtype != np.uint8:
        raise SizeMismatchError("digit image must be a uint8 array")
    if image.shape != DIGIT_SHAPE:
        raise SizeMismatchError(f"digit image has shape {image.shape}, expected {DIGIT_SHAPE}")


def xor_similarity(digit_image: np.ndarray, template: np.ndarray) -> Tuple[float, np.ndarray]:
    """Similarity of two canonical binary images, plus their XOR difference image."""
    xor_result = np.bitwise_xor(digit_image, template)
    diff_sum = float(xor_result.sum(dtype=np.int64))
    return 1.0 - diff_sum / FULL_DIFF_SUM, xor_result


class NumberClassifier:
    """Labels rectified armors by their best matching digit template."""

    def __init__(self, templates: DigitTemplates, confidence_threshold: float,
                 collect_diagnostics: bool = False):
        if templates is None or len(templates) == 0:
            raise ConfigurationError("Classifier needs a non-empty template set")
        self.templates = templates
        self.confidence_threshold = confidence_threshold
        self.collect_diagnostics = collect_diagnostics

    @classmethod
    def from_config(cls, templates: DigitTemplates, cfg) -> "NumberClassifier":
        return cls(templates, cfg.confidence_threshold, collect_diagnostics=cfg.collect_diagnostics)

    def score(self, armor: ArmorCandidate) -> Tuple[ArmorCandidate, List[np.ndarray]]:
        """Score one armor against every template.

        Returns a labeled copy of the armor and its per-template XOR images.
        Armors without a canonical digit image come back UNASSIGNED with
        similarity 0.0 and no XOR images.
        """
        try:
            check_digit_image(armor.digit_image)
        except SizeMismatchError as e:
            logger.warning(f"Rejecting armor at ({armor.center[0]:.1f}, {armor.center[1]:.1f}): {e}")
            return armor.evolve(similarity=0.0, label=DigitLabel.UNASSIGNED,
                                classification_text=format_classification(DigitLabel.UNASSIGNED, 0.0)), []

        best_label = DigitLabel.UNASSIGNED
        best_similarity = -1.0
        xor_results = []
        for label, template in self.templates.items():
            similarity, xor_result = xor_similarity(armor.digit_image, template)
            xor_results.append(xor_result)
            # strict comparison keeps the earlier label on ties
            if similarity > best_similarity:
                best_similarity = similarity
                best_label = label

        logger.debug(f"Armor classified as {best_label.value} ({best_similarity:.3f})")
        return armor.evolve(
            similarity=best_similarity,
            label=best_label,
            classification_text=format_classification(best_label, best_similarity),
        ), xor_results

    def filter_confident(self, armors: Sequence[ArmorCandidate]
                         ) -> Tuple[List[ArmorCandidate], List[RejectedCandidate]]:
        """Split scored armors into survivors and rejections, keeping order."""
        survivors: List[ArmorCandidate] = []
        rejected: List[RejectedCandidate] = []
        for armor in armors:
            if armor.label is DigitLabel.UNASSIGNED:
                rejected.append(RejectedCandidate(armor, RejectionReason.SIZE_MISMATCH,
                                                  "no canonical digit image"))
            elif armor.similarity < self.confidence_threshold:
                rejected.append(RejectedCandidate(
                    armor, RejectionReason.LOW_CONFIDENCE,
                    f"similarity {armor.similarity:.3f} below {self.confidence_threshold}"))
            else:
                survivors.append(armor)
        return survivors, rejected

    def _mismatch_blocks(self) -> List[np.ndarray]:
        return [np.full(DIGIT_SHAPE, 255, dtype=np.uint8) for _ in range(len(self.templates))]

    def classify(self, armors: Sequence[ArmorCandidate], mapper=map) -> ClassificationBatch:
        """Score a batch of rectified armors, then drop the unconfident ones.

        With diagnostics on, ``xor_diagnostic`` holds one block per template for
        every input armor, in input order. Armors without a canonical digit
        image contribute all-255 blocks.

        Args:
            armors: armors carrying digit images from the rectifier
            mapper: ``map``-compatible callable used to run per-armor scoring
        """
        scored = []
        xor_images: List[np.ndarray] = []
        for armor, xor_results in mapper(self.score, armors):
            scored.append(armor)
            if self.collect_diagnostics:
                xor_images.extend(xor_results or self._mismatch_blocks())

        survivors, rejected = self.filter_confident(scored)
        if rejected:
            logger.debug(f"Classifier kept {len(survivors)} of {len(scored)} armors")
        return ClassificationBatch(
            armors=survivors,
            rejected=rejected,
            xor_diagnostic=concat_vertical(xor_images) if self.collect_diagnostics else None,
        )
