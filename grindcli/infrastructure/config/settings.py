"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.grindcli/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Dict, List

from dotenv import load_dotenv
import yaml

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".grindcli"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "GRINDCLI_"

DEFAULT_CACHE_DIR_NAME = "cache"
DEFAULT_CACHE_MAX_MEMORY_BYTES = 100 * 1024 * 1024  # 100 MiB
DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60
DEFAULT_CACHE_NAMESPACES = ["grind75", "leetcode", "companies"]

# --- Global Configuration Store (Simple Approach) ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False

def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: ENV VARS take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no .env found at or above cwd).")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.debug("Configuration loading process completed.")

def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration re-reads it."""
    global _config, _loaded
    _config = {}
    _loaded = False

def _flatten(tree: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ('cache': {'dir': x} -> 'cache.dir')."""
    flat: Dict[str, Any] = {}
    for key, value in tree.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat

def env_var_name(key: str) -> str:
    """Environment variable consulted for a dotted config key ('cache.dir' -> 'GRINDCLI_CACHE_DIR')."""
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"

def _coerce(value: str) -> Any:
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value

def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (GRINDCLI_<KEY>)
    3. YAML config
    4. Default value

    Args:
        key: The dotted configuration key (e.g., 'cache.dir')
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default

def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def get_cache_dir() -> Path:
    """Root directory of the file cache (default: ./cache)."""
    value = get_config('cache.dir')
    return Path(str(value)).expanduser() if value else Path.cwd() / DEFAULT_CACHE_DIR_NAME

def get_cache_max_memory_bytes() -> int:
    """Soft byte budget of the in-memory cache tier."""
    value = get_config('cache.max_memory_bytes', DEFAULT_CACHE_MAX_MEMORY_BYTES)
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid cache.max_memory_bytes '{value}'. Using {DEFAULT_CACHE_MAX_MEMORY_BYTES}.")
        return DEFAULT_CACHE_MAX_MEMORY_BYTES

def get_cache_default_ttl() -> float:
    """Default time-to-live for cache entries, in seconds."""
    value = get_config('cache.default_ttl_seconds', DEFAULT_CACHE_TTL_SECONDS)
    try:
        ttl = float(value)
    except (TypeError, ValueError):
        ttl = 0
    if ttl <= 0:
        logger.warning(f"Invalid cache.default_ttl_seconds '{value}'. Using {DEFAULT_CACHE_TTL_SECONDS}.")
        return float(DEFAULT_CACHE_TTL_SECONDS)
    return ttl

def get_cache_namespaces() -> List[str]:
    """Namespaces provisioned at startup. Accepts a YAML list or a comma-separated string."""
    value = get_config('cache.namespaces', DEFAULT_CACHE_NAMESPACES)
    if isinstance(value, str):
        value = value.split(',')
    namespaces = [str(ns).strip() for ns in value if str(ns).strip()]
    return namespaces or list(DEFAULT_CACHE_NAMESPACES)

def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the rest of the process.

    Args:
        key: Configuration key (e.g., 'logging.level')
        value: Value to set
    """
    _config[key] = value
    os.environ[env_var_name(key)] = str(value)
    logger.debug(f"Config set: {key}={value}")

def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")

def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
