"""
Configuration loading utilities for the studio CMS.

This module loads application configuration from config.yaml, merges it
over built-in defaults, applies environment overrides for the content API
and caches the result for the running process.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

# Environment variables that override api settings
ENV_OVERRIDES = {
    'CMS_API_BASE_URL': ('api', 'base_url'),
    'CMS_API_TOKEN': ('api', 'token'),
}

# Global configuration cache
_config_cache = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'Studio CMS',
            'version': '1.0.0',
            'debug': False
        },
        'api': {
            'base_url': 'http://localhost:3000/api/v1',
            'timeout': 15,
            'token': None
        },
        'catalog': {
            'file': None
        },
        'ui': {
            'page_title': 'Content Management',
            'sidebar_title': 'Pages'
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'
        }
    }


def apply_env_overrides(config: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Return a copy of config with CMS_* environment variables applied."""
    environ = os.environ if environ is None else environ
    result = deepcopy(config)

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            result.setdefault(section, {})[key] = value
            logger.debug(f"Configuration {section}.{key} overridden by {env_name}")

    return result


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration.

    Missing, empty or unreadable files fall back to defaults; the fallback
    is logged, never raised.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        config_path = CONFIG_FILE

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return apply_env_overrides(default_config)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)

        if user_config is None:
            logger.warning(f"Configuration file is empty: {config_path}")
            return apply_env_overrides(default_config)

        if not isinstance(user_config, dict):
            logger.error(f"Configuration file is not a valid dictionary: {config_path}")
            logger.info("Using default configuration")
            return apply_env_overrides(default_config)

        config = deep_merge(default_config, user_config)

        logger.info(f"Successfully loaded configuration from {config_path}")
        return apply_env_overrides(config)

    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {config_path}: {e}")
        logger.info("Using default configuration")
        return apply_env_overrides(default_config)

    except (IOError, OSError) as e:
        logger.error(f"Failed to read configuration file {config_path}: {e}")
        logger.info("Using default configuration")
        return apply_env_overrides(default_config)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and required fields.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'api', 'ui', 'logging']

    for section in required_sections:
        if section not in config:
            logger.warning(f"Missing required configuration section: {section}")
            return False

    api = config.get('api', {})
    base_url = api.get('base_url')
    if not isinstance(base_url, str) or not base_url.startswith(('http://', 'https://')):
        logger.warning(f"api.base_url must be an http(s) URL, got: {base_url!r}")
        return False

    try:
        timeout = float(api.get('timeout', 0))
    except (ValueError, TypeError):
        logger.warning("api.timeout must be a valid number")
        return False
    if timeout <= 0:
        logger.warning("api.timeout must be positive")
        return False

    app = config.get('app', {})
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    return True


def get_config() -> Dict[str, Any]:
    """Return the cached configuration, loading it on first use."""
    global _config_cache

    if _config_cache is None:
        _config_cache = load_config()

    return _config_cache


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value.

    Args:
        section: Configuration section (e.g., 'api', 'ui')
        key: Configuration key within section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    value = get_config().get(section, {}).get(key, default)
    return default if value is None else value


def get_config_summary(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Get a summary of the current configuration for display.

    The API token is never included.
    """
    return {
        'app_name': config.get('app', {}).get('name', 'Unknown'),
        'app_version': config.get('app', {}).get('version', 'Unknown'),
        'debug_mode': config.get('app', {}).get('debug', False),
        'api_base_url': config.get('api', {}).get('base_url', 'Unknown'),
        'api_timeout': config.get('api', {}).get('timeout'),
        'has_api_token': bool(config.get('api', {}).get('token')),
        'catalog_file': config.get('catalog', {}).get('file') or 'built-in',
        'log_level': config.get('logging', {}).get('level', 'INFO')
    }
