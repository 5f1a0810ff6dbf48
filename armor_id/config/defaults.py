"""Default configuration values."""

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    # Digit region geometry, as fractions of light bar length / spacing
    "height_ratio": 0.5,
    "width_ratio": 0.25,

    # Classification
    "confidence_threshold": 0.7,  # 0.0 to 1.0
    "template_dir": "data/templates",
    "collect_diagnostics": False,

    # Rectification
    "color_order": "rgb",  # channel order of incoming camera frames
    "min_quad_area": 1.0,  # px^2, smaller digit quads are degenerate

    # Per-candidate worker threads, 0 runs inline
    "parallel_workers": 0,

    # Debug and Logging Settings
    "debug": False,
    "log_level": "INFO",
    "log_dir": "logs",
    "enable_file_logging": False,
    "structured_logging": False,
}
