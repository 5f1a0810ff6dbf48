"""Environment variable overrides for identification settings.

Values come from the process environment first and from an optional ``.env``
file second. Only a small, fixed set of ``ARMOR_ID_*`` variables is read;
their values are passed through unvalidated and checked together with the
rest of the configuration in ``load_config``.
"""
import os
import logging
from typing import Any, Dict, Optional
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "ARMOR_ID_"

# Environment variable suffix -> configuration key
ENV_OVERRIDES: Dict[str, str] = {
    "HEIGHT_RATIO": "height_ratio",
    "WIDTH_RATIO": "width_ratio",
    "CONFIDENCE_THRESHOLD": "confidence_threshold",
    "TEMPLATE_DIR": "template_dir",
    "COLOR_ORDER": "color_order",
    "PARALLEL_WORKERS": "parallel_workers",
    "LOG_LEVEL": "log_level",
    "DEBUG": "debug",
}


def load_env_file(env_path: Optional[str] = None) -> Dict[str, str]:
    """Load environment variables from .env file.

    Args:
        env_path: Path to .env file. Defaults to .env in current directory.

    Returns:
        dict: Loaded environment variables
    """
    if env_path is None:
        env_path = ".env"

    env_vars: Dict[str, str] = {}
    env_file_path = Path(env_path)

    if not env_file_path.exists():
        logger.debug(f"Environment file {env_path} not found, using system environment only")
        return env_vars

    try:
        with open(env_file_path, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()

                if not line or line.startswith('#'):
                    continue

                if '=' in line:
                    key, value = line.split('=', 1)
                    key = key.strip()
                    value = value.strip()

                    if value.startswith('"') and value.endswith('"'):
                        value = value[1:-1]
                    elif value.startswith("'") and value.endswith("'"):
                        value = value[1:-1]

                    env_vars[key] = value
                else:
                    logger.warning(f"Invalid line format in {env_path}:{line_num}: {line}")

        logger.info(f"Loaded {len(env_vars)} variables from {env_path}")

    except OSError as e:
        logger.error(f"Error reading environment file {env_path}: {e}")

    return env_vars


def get_env_var(key: str, default: Optional[str] = None,
                env_vars: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Get an environment variable, process environment first."""
    value = os.getenv(key)
    if value is None and env_vars:
        value = env_vars.get(key)
    return default if value is None else value


def environment_overrides(env_file_path: Optional[str] = None) -> Dict[str, Any]:
    """Configuration values set through ``ARMOR_ID_*`` variables."""
    env_vars = load_env_file(env_file_path)
    overrides: Dict[str, Any] = {}
    for suffix, config_key in ENV_OVERRIDES.items():
        value = get_env_var(ENV_PREFIX + suffix, env_vars=env_vars)
        if value is not None and value.strip() != "":
            overrides[config_key] = value.strip()

    if overrides:
        logger.info(f"Environment overrides applied: {sorted(overrides)}")
    return overrides


__all__ = ["ENV_PREFIX", "ENV_OVERRIDES", "load_env_file", "get_env_var", "environment_overrides"]
