"""Settings validation utilities and types."""

from __future__ import annotations
from typing import Any, Dict, List, Optional
from dataclasses import dataclass
import math

from ..core.constants import SUPPORTED_COLOR_ORDERS


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    is_valid: bool
    error_message: Optional[str] = None
    corrected_value: Optional[Any] = None


class SettingsValidator:
    """Validation of identification settings."""

    VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    @staticmethod
    def _as_float(value: Any) -> Optional[float]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return None
        return None

    @staticmethod
    def validate_positive_float(value: Any, field_name: str = "Value") -> ValidationResult:
        """Validate a finite, strictly positive number."""
        number = SettingsValidator._as_float(value)
        if number is None or not math.isfinite(number):
            return ValidationResult(False, f"{field_name} must be a finite number")
        if number <= 0.0:
            return ValidationResult(False, f"{field_name} must be positive, got {number}")
        return ValidationResult(True, None, number)

    @staticmethod
    def validate_unit_interval(value: Any, field_name: str = "Value") -> ValidationResult:
        """Validate a number in [0, 1]."""
        number = SettingsValidator._as_float(value)
        if number is None or not math.isfinite(number):
            return ValidationResult(False, f"{field_name} must be a finite number")
        if not 0.0 <= number <= 1.0:
            return ValidationResult(False, f"{field_name} must be between 0.0 and 1.0, got {number}")
        return ValidationResult(True, None, number)

    @staticmethod
    def validate_non_negative_int(value: Any, field_name: str = "Value") -> ValidationResult:
        if isinstance(value, bool):
            return ValidationResult(False, f"{field_name} must be an integer")
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if not isinstance(value, int):
            return ValidationResult(False, f"{field_name} must be an integer")
        if value < 0:
            return ValidationResult(False, f"{field_name} must not be negative, got {value}")
        return ValidationResult(True, None, value)

    @staticmethod
    def validate_boolean(value: Any, field_name: str = "Value") -> ValidationResult:
        """Validate boolean values."""
        if isinstance(value, bool):
            return ValidationResult(True, None, value)
        if isinstance(value, str):
            if value.lower() in ("true", "1", "yes", "on"):
                return ValidationResult(True, None, True)
            if value.lower() in ("false", "0", "no", "off"):
                return ValidationResult(True, None, False)
        if isinstance(value, int):
            return ValidationResult(True, None, bool(value))
        return ValidationResult(False, f"{field_name} must be true or false")

    @staticmethod
    def validate_color_order(value: Any) -> ValidationResult:
        if not isinstance(value, str) or value.lower() not in SUPPORTED_COLOR_ORDERS:
            return ValidationResult(
                False,
                f"Invalid color order '{value}'. Must be one of: {', '.join(SUPPORTED_COLOR_ORDERS)}"
            )
        return ValidationResult(True, None, value.lower())

    @staticmethod
    def validate_log_level(value: Any) -> ValidationResult:
        if not isinstance(value, str) or value.upper() not in SettingsValidator.VALID_LOG_LEVELS:
            return ValidationResult(
                False,
                f"Invalid log level '{value}'. Must be one of: {', '.join(SettingsValidator.VALID_LOG_LEVELS)}"
            )
        return ValidationResult(True, None, value.upper())

    @staticmethod
    def validate_path(value: Any, field_name: str = "Path") -> ValidationResult:
        if not isinstance(value, str) or not value.strip():
            return ValidationResult(False, f"{field_name} must be a non-empty string")
        return ValidationResult(True, None, value.strip())

    @classmethod
    def validate_all(cls, settings: Dict[str, Any]) -> Dict[str, ValidationResult]:
        """Validate every known setting, keyed by setting name."""
        checks = {
            "height_ratio": lambda v: cls.validate_positive_float(v, "Height ratio"),
            "width_ratio": lambda v: cls.validate_positive_float(v, "Width ratio"),
            "confidence_threshold": lambda v: cls.validate_unit_interval(v, "Confidence threshold"),
            "min_quad_area": lambda v: cls.validate_positive_float(v, "Minimum quad area"),
            "template_dir": lambda v: cls.validate_path(v, "Template directory"),
            "log_dir": lambda v: cls.validate_path(v, "Log directory"),
            "color_order": cls.validate_color_order,
            "log_level": cls.validate_log_level,
            "parallel_workers": lambda v: cls.validate_non_negative_int(v, "Parallel workers"),
            "collect_diagnostics": lambda v: cls.validate_boolean(v, "Collect diagnostics"),
            "debug": lambda v: cls.validate_boolean(v, "Debug"),
            "enable_file_logging": lambda v: cls.validate_boolean(v, "File logging"),
            "structured_logging": lambda v: cls.validate_boolean(v, "Structured logging"),
        }
        return {key: check(settings[key]) for key, check in checks.items() if key in settings}


def collect_errors(results: Dict[str, ValidationResult]) -> List[str]:
    """Error messages of every failed validation."""
    return [f"{key}: {result.error_message}" for key, result in results.items() if not result.is_valid]
