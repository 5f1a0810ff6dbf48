"""Configuration dataclass and loading utilities.

Provides a strongly-typed configuration object that is injected into the
rectifier, classifier and pipeline instead of module-level globals.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, Optional
import json, os, logging

from .defaults import DEFAULT_CONFIG
from .env_config import environment_overrides
from .validation import SettingsValidator, collect_errors
from ..core.exceptions import ConfigurationError

@dataclass(slots=True)
class Config:
    # Digit region geometry
    height_ratio: float = DEFAULT_CONFIG["height_ratio"]
    width_ratio: float = DEFAULT_CONFIG["width_ratio"]

    # Classification
    confidence_threshold: float = DEFAULT_CONFIG["confidence_threshold"]
    template_dir: str = DEFAULT_CONFIG["template_dir"]
    collect_diagnostics: bool = DEFAULT_CONFIG["collect_diagnostics"]

    # Rectification
    color_order: str = DEFAULT_CONFIG["color_order"]
    min_quad_area: float = DEFAULT_CONFIG["min_quad_area"]

    parallel_workers: int = DEFAULT_CONFIG["parallel_workers"]

    # Debug and Logging Settings
    debug: bool = DEFAULT_CONFIG["debug"]
    log_level: str = DEFAULT_CONFIG["log_level"]
    log_dir: str = DEFAULT_CONFIG["log_dir"]
    enable_file_logging: bool = DEFAULT_CONFIG["enable_file_logging"]
    structured_logging: bool = DEFAULT_CONFIG["structured_logging"]

    # Arbitrary extra values retained for forward compatibility
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        # merge extra keys at top-level for saving
        extra = d.pop("extra", {})
        d.update(extra)
        return d

    def get(self, key: str, default: Any = None) -> Any:
        if key in _CONFIG_FIELDS:
            return getattr(self, key)
        return self.extra.get(key, default)


_CONFIG_FIELDS = tuple(f.name for f in fields(Config) if f.name != "extra")


def _read_config_file(path: str) -> Dict[str, Any]:
    """Read the JSON settings file; problems fall back to defaults."""
    if not os.path.isfile(path):
        logging.info(f"Configuration file '{path}' does not exist. Using defaults.")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded_data = json.load(f)
    except json.JSONDecodeError as e:
        logging.error(f"Failed to parse JSON configuration file '{path}': {e}. Using defaults.")
        return {}
    except PermissionError:
        logging.error(f"Permission denied reading configuration file '{path}'. Using defaults.")
        return {}
    except OSError as e:
        logging.error(f"Unexpected error loading configuration file '{path}': {e}. Using defaults.")
        return {}

    if loaded_data is None:
        logging.warning(f"Configuration file '{path}' is empty, using defaults")
        return {}
    if not isinstance(loaded_data, dict):
        logging.error(f"Configuration file '{path}' does not contain a valid JSON object, using defaults")
        return {}

    logging.info(f"Successfully loaded configuration from '{path}'")
    return loaded_data


def build_config(values: Optional[Dict[str, Any]] = None) -> Config:
    """Validate raw settings merged over the defaults and build a Config.

    Raises:
        ConfigurationError: listing every invalid setting
    """
    merged = {**DEFAULT_CONFIG, **(values or {})}

    results = SettingsValidator.validate_all(merged)
    errors = collect_errors(results)
    if errors:
        raise ConfigurationError("Invalid configuration: " + "; ".join(errors))

    for key, result in results.items():
        if result.corrected_value is not None:
            merged[key] = result.corrected_value

    if merged["debug"]:
        merged["log_level"] = "DEBUG"

    extra = {k: v for k, v in merged.items() if k not in _CONFIG_FIELDS}
    if extra:
        logging.info(f"Found extra configuration keys: {list(extra.keys())}")

    return Config(**{k: merged[k] for k in _CONFIG_FIELDS}, extra=extra)


def load_config(path: str = "config.json", env_file: Optional[str] = None) -> Config:
    """Load configuration from a JSON file with environment overrides.

    Args:
        path: Path to config.json file
        env_file: Path to .env file (optional)

    Returns:
        Config: Loaded and validated configuration

    Raises:
        ConfigurationError: when any merged value is invalid
    """
    data = _read_config_file(path)
    data.update(environment_overrides(env_file))
    return build_config(data)


def save_config(cfg: Config, path: str = "config.json") -> None:
    """Save configuration to JSON file."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cfg.to_dict(), f, indent=2, ensure_ascii=False)
        logging.info(f"Configuration saved successfully to '{path}'")
    except PermissionError:
        logging.error(f"Permission denied writing configuration file '{path}'")
        raise
    except OSError as e:
        logging.error(f"OS error saving configuration file '{path}': {e}")
        raise
