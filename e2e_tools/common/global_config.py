"""
================================================================================
Global Configuration for the E2E Scaffold
================================================================================

Centralized configuration and logging setup shared by the page-object
framework, the reporting helpers and the pytest fixtures.

Features:
    - YAML-based configuration loading (config/config.yaml)
    - Environment-specific overlay (config/{ENV}.yaml)
    - Environment variable overrides with type coercion
    - Centralized Loguru logging configuration

Author: Automation Team
License: MIT
================================================================================
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger

# Global configuration storage
_config: Dict[str, Any] = {}
_logger_initialized: bool = False

DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# Short environment variables kept for CI pipelines and local runs
ENV_ALIASES: Dict[str, str] = {
    "ALLURE": "allure.enabled",
    "HEADLESS": "browser.headless",
    "BROWSER": "browser.type",
    "UI_BASE_URL": "ui.base_url",
    "E2E": "e2e.enabled",
    "LOG_LEVEL": "logging.level",
}


def init_logger(level: Optional[str] = None, format_str: Optional[str] = None) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Safe to call many times; only the first call installs sinks.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_str: Custom log format string. Defaults to config value.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    _ensure_config_loaded()

    log_level = str(level or get_config("logging.level", "INFO")).upper()
    log_format = format_str or get_config("logging.format", DEFAULT_LOG_FORMAT)

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = get_config("logging.file", None)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=log_format,
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def _ensure_config_loaded() -> None:
    if not _config:
        _load_config()


def _config_dirs() -> List[Path]:
    explicit = os.getenv("E2E_CONFIG_DIR")
    dirs = [Path(explicit)] if explicit else []
    dirs.extend([
        Path("config"),
        Path(__file__).parent.parent.parent / "config",
    ])
    return dirs


def _load_config() -> None:
    """
    Loads configuration from YAML files and environment variables.

    Configuration loading order:
        1. Built-in defaults
        2. Default configuration file (config/config.yaml)
        3. Environment-specific configuration (config/{ENV}.yaml)
        4. Environment variables (override YAML settings)
    """
    global _config

    merged = _get_defaults()

    config_dir = next((d for d in _config_dirs() if d.exists()), None)
    if config_dir is None:
        logger.warning("No configuration directory found. Using defaults.")
    else:
        default_config_path = config_dir / "config.yaml"
        if default_config_path.exists():
            with open(default_config_path, "r", encoding="utf-8") as f:
                merged = _deep_merge(merged, yaml.safe_load(f) or {})
            logger.debug(f"Loaded configuration from {default_config_path}")

        env = os.getenv("ENVIRONMENT", os.getenv("ENV", "dev"))
        env_config_path = config_dir / f"{env}.yaml"
        if env_config_path.exists():
            with open(env_config_path, "r", encoding="utf-8") as f:
                merged = _deep_merge(merged, yaml.safe_load(f) or {})
            logger.debug(f"Merged environment config: {env_config_path}")

    _config = merged
    _apply_env_overrides()


def _get_defaults() -> Dict[str, Any]:
    return {
        "logging": {
            "level": "INFO",
            "format": DEFAULT_LOG_FORMAT,
        },
        "browser": {
            "type": "chromium",
            "headless": True,
            "record_video": False,
            "viewport": {"width": 1920, "height": 1080},
        },
        "timeouts": {
            "page_load": 15.0,
            "element_wait": 10.0,
            "quiet_window": 0.5,
            "poll_interval": 0.1,
        },
        "retries": {
            "max_retries": 5,
            "retry_interval": 1.0,
        },
        "allure": {
            "enabled": False,
            "screenshots_dir": "reports/screenshots",
            "videos_dir": "reports/videos",
        },
        "ui": {
            "base_url": "https://github.com",
        },
        "e2e": {
            "enabled": False,
        },
    }


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merges two dictionaries, with override taking precedence.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def coerce_value(raw: str) -> Any:
    """
    Converts an environment string into bool/int/float where it looks like one.

    Examples:
        >>> coerce_value("true")
        True
        >>> coerce_value("30")
        30
        >>> coerce_value("0.5")
        0.5
    """
    lowered = raw.strip().lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            continue
    return raw


def _apply_env_overrides() -> None:
    """
    Applies environment variable overrides to the configuration.

    Environment variable naming convention:
        - Use double underscore to separate nested keys
        - Example: TIMEOUTS__PAGE_LOAD=30 overrides timeouts.page_load
        - Short aliases from ENV_ALIASES (ALLURE=true, HEADLESS=false, ...)
    """
    for env_key, config_key in ENV_ALIASES.items():
        if env_key in os.environ:
            _set_nested(_config, config_key.split("."), coerce_value(os.environ[env_key]))

    for key, value in os.environ.items():
        if "__" in key and not key.startswith("_"):
            parts = [p.lower() for p in key.split("__")]
            if parts[0] in _config:
                _set_nested(_config, parts, coerce_value(value))


def _set_nested(d: Dict, keys: list, value: Any) -> None:
    for key in keys[:-1]:
        node = d.get(key)
        if not isinstance(node, dict):
            node = {}
            d[key] = node
        d = node
    d[keys[-1]] = value


def get_config(key: str, default: Any = None) -> Any:
    """
    Retrieves a configuration value using a dot-separated key path.

    Args:
        key: Dot-separated key path (e.g., "timeouts.page_load").
        default: Default value to return if key is not found.

    Returns:
        The configuration value, or the default if not found.

    Examples:
        >>> get_config("retries.max_retries", 5)
        5
    """
    _ensure_config_loaded()

    value: Any = _config
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def set_config(key: str, value: Any) -> None:
    """
    Sets a configuration value at runtime.
    """
    _ensure_config_loaded()
    _set_nested(_config, key.split("."), value)


def reload_config() -> None:
    """
    Reloads the configuration from files and the environment.
    """
    global _config, _logger_initialized
    _config = {}
    _logger_initialized = False
    _load_config()
    init_logger()
    logger.info("Configuration reloaded.")
