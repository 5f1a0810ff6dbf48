"""Services package for rectification and classification."""

from .template_manager import DigitTemplates
from .rectifier import NumberRectifier
from .classifier import NumberClassifier, xor_similarity
from .pipeline import NumberIdentificationPipeline

__all__ = [
    "DigitTemplates", "NumberRectifier", "NumberClassifier", "xor_similarity",
    "NumberIdentificationPipeline"
]
