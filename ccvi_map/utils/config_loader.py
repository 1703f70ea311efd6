"""
Configuration Loader Utility

Loads configuration from YAML files, a .env file and CCVI_ environment
variables.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

ENV_PREFIX = "CCVI_"

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _load_config_from_env() -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Environment variables must be prefixed with 'CCVI_'.
    Nested values use double underscore: CCVI_API__BASE_URL

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary from environment variables, empty if none found
    """
    config: Dict[str, Any] = {}

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        keys = key[len(ENV_PREFIX):].lower().split("__")

        current = config
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]
        current[keys[-1]] = value

    return config


def get_default_config() -> Dict[str, Any]:
    """
    Get the built-in configuration used when no config file is present.

    Returns
    -------
    Dict[str, Any]
        Default configuration dictionary
    """
    return {
        "api": {
            "base_url": "https://pakwmis.iwmi.org/iwmi-ccvi/backend",
            # No timeout: a hung request is simply superseded by the next one
            "timeout": None
        },
        "map": {
            "center": [30.3753, 69.3451],
            "zoom_start": 5,
            "tiles": "OpenStreetMap",
            "fit_padding": 20
        },
        "defaults": {
            "boundary": "district",
            "indicator": "climate_vulnerability"
        },
        "output": {
            "html": "output/ccvi_map.html",
            "auto_open_html": False
        },
        "logging": {
            "level": "INFO",
            "file": "logs/ccvi_map.log",
            "console": True
        }
    }


def _merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two configuration dictionaries.

    Parameters
    ----------
    base : Dict[str, Any]
        Base configuration
    override : Dict[str, Any]
        Override configuration (takes precedence)

    Returns
    -------
    Dict[str, Any]
        Merged configuration
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration with fallback system:
    1. Load .env file if available (using python-dotenv)
    2. Try config.yaml (or the explicit path)
    3. Merge CCVI_ environment variables over it
    4. Without a file or environment, try config.template.yaml
    5. Otherwise use the built-in defaults

    Whatever the source, missing keys are filled from the defaults.

    Parameters
    ----------
    config_path : str, optional
        Path to config file. Defaults to configs/config.yaml relative to project root.
        If a relative path is provided, it will be resolved relative to the project root.

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary

    Raises
    ------
    FileNotFoundError
        If an explicit config_path does not exist
    """
    env_file = PROJECT_ROOT / ".env"
    if env_file.exists():
        load_dotenv(env_file)

    if config_path is None:
        path = PROJECT_ROOT / "configs" / "config.yaml"
        explicit = False
    else:
        path = Path(config_path)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        explicit = True

    if explicit and not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    config = None
    if path.exists():
        config = _read_yaml(path)

    env_config = _load_config_from_env()
    if env_config:
        config = _merge_configs(config or {}, env_config)

    if config is None:
        template_path = path.parent / "config.template.yaml"
        if template_path.exists():
            config = _read_yaml(template_path)
        else:
            config = {}

    return _merge_configs(get_default_config(), config)
