"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import DashConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per process
_config_cache: DashConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/evolvedash/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "evolvedash" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Project directory (defaults to current directory)

    Returns:
        Path to .evolvedash.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".evolvedash.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> base = {"a": 1, "b": {"x": 10, "y": 20}}
        >>> override = {"b": {"y": 30, "z": 40}, "c": 3}
        >>> deep_merge(base, override)
        {'a': 1, 'b': {'x': 10, 'y': 30, 'z': 40}, 'c': 3}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning("Ignoring config at %s: top level is not an object", path)
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient to one bad layer
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _set_nested(config_dict: dict[str, Any], section: str, key: str, value: Any) -> None:
    if not isinstance(config_dict.get(section), dict):
        config_dict[section] = {}
    config_dict[section][key] = value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        EVOLVEDASH_PORT - overrides server.port
        EVOLVEDASH_GENERATOR - overrides generator.backend
        EVOLVEDASH_GENERATOR_TIMEOUT - overrides generator.timeout_seconds
        EVOLVEDASH_COMPONENTS_DIR - overrides discovery.components_dir
        EVOLVEDASH_DB_PATH - overrides storage.db_path
        EVOLVEDASH_SPEC_PATH - overrides storage.spec_path
        EVOLVEDASH_LOG_LEVEL - overrides logging.level

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = {
        key: value.copy() if isinstance(value, dict) else value
        for key, value in config_dict.items()
    }

    if port_str := os.environ.get("EVOLVEDASH_PORT"):
        try:
            _set_nested(result, "server", "port", int(port_str))
        except ValueError:
            logger.warning("Invalid EVOLVEDASH_PORT value '%s', ignoring", port_str)

    if backend := os.environ.get("EVOLVEDASH_GENERATOR"):
        _set_nested(result, "generator", "backend", backend.strip())

    if timeout_str := os.environ.get("EVOLVEDASH_GENERATOR_TIMEOUT"):
        try:
            timeout = int(timeout_str)
            if timeout < 1:
                logger.warning(
                    "EVOLVEDASH_GENERATOR_TIMEOUT must be >= 1, got %d, ignoring", timeout
                )
            else:
                _set_nested(result, "generator", "timeout_seconds", timeout)
        except ValueError:
            logger.warning(
                "Invalid EVOLVEDASH_GENERATOR_TIMEOUT value '%s', ignoring", timeout_str
            )

    if components_dir := os.environ.get("EVOLVEDASH_COMPONENTS_DIR"):
        _set_nested(result, "discovery", "components_dir", components_dir)

    if db_path := os.environ.get("EVOLVEDASH_DB_PATH"):
        _set_nested(result, "storage", "db_path", db_path)

    if spec_path := os.environ.get("EVOLVEDASH_SPEC_PATH"):
        _set_nested(result, "storage", "spec_path", spec_path)

    if level := os.environ.get("EVOLVEDASH_LOG_LEVEL"):
        _set_nested(result, "logging", "level", level)

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return DashConfig().model_dump()


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> DashConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (EVOLVEDASH_*)
        2. Project config (.evolvedash.json)
        3. User config (~/.config/evolvedash/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load .evolvedash.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated DashConfig instance

    Raises:
        pydantic.ValidationError: If the merged config fails validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = DashConfig(**merged)

    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
