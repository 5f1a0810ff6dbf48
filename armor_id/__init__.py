"""
Armor number identification: rectify armor plate digit regions and classify
them against fixed digit templates.
"""

__version__ = "1.0.0"

from .config.settings import Config, build_config, load_config, save_config
from .core.entities import ArmorCandidate, DigitLabel, FrameResult, LightBar, NumberQuad
from .core.exceptions import ConfigurationError, GeometryDegenerateError, SizeMismatchError
from .services import DigitTemplates, NumberClassifier, NumberIdentificationPipeline, NumberRectifier

__all__ = [
    "Config", "build_config", "load_config", "save_config",
    "ArmorCandidate", "DigitLabel", "FrameResult", "LightBar", "NumberQuad",
    "ConfigurationError", "GeometryDegenerateError", "SizeMismatchError",
    "DigitTemplates", "NumberClassifier", "NumberIdentificationPipeline", "NumberRectifier"
]
