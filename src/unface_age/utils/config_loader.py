"""Configuration loader module for the Unface age detection service."""

import os
import json
import copy
from typing import Optional, Dict, Any
from pathlib import Path

from dotenv import load_dotenv

# Default configuration
DEFAULT_CONFIG = {
    'server': {
        'host': '0.0.0.0',
        'port': 3001,
        'debug': False
    },
    'web': {
        'cors_origins': '*',
        'max_content_length': 10 * 1024 * 1024  # 10MB, base64 images are large
    },
    'aws': {
        'region': 'us-east-1',
        'access_key_id': None,
        'secret_access_key': None,
        'session_token': None,
        'endpoint_url': None,
        'connect_timeout': 5.0,
        'read_timeout': 10.0
    },
    'logging': {
        'level': 'INFO',
        'format': 'json',
        'dir': 'logs'
    }
}

# Plain environment variables understood by the service, mapped to config paths
ENV_VARIABLES = {
    'HOST': ('server', 'host'),
    'PORT': ('server', 'port'),
    'AWS_REGION': ('aws', 'region'),
    'AWS_ACCESS_KEY_ID': ('aws', 'access_key_id'),
    'AWS_SECRET_ACCESS_KEY': ('aws', 'secret_access_key'),
    'AWS_SESSION_TOKEN': ('aws', 'session_token'),
    'CORS_ALLOWED_ORIGINS': ('web', 'cors_origins'),
}


class ConfigurationError(ValueError):
    """Raised when the service configuration is incomplete or invalid."""
    pass


def load_config_with_defaults() -> Dict[str, Any]:
    """Load configuration with default values.

    Returns:
        Dict containing default configuration
    """
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config_from_file(path: str, strict: bool = False) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file.

    Args:
        path: Path to configuration file
        strict: If True, raise error if file doesn't exist

    Returns:
        Dict containing loaded configuration

    Raises:
        FileNotFoundError: If strict=True and file doesn't exist
        ConfigurationError: If file format is invalid
    """
    config_path = Path(path)

    if not config_path.exists():
        if strict:
            raise FileNotFoundError(f"Configuration file not found: {path}")
        return {}

    suffix = config_path.suffix.lower()
    if suffix == '.json':
        try:
            with open(config_path, 'r') as f:
                return json.load(f) or {}
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {path}: {e}")

    elif suffix in ['.yml', '.yaml']:
        import yaml
        try:
            with open(config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {path}: {e}")

    raise ConfigurationError(f"Unsupported config file format: {config_path.suffix}")


def merge_configs(base: dict, override: dict) -> dict:
    """Deep merge two configuration dictionaries.

    Args:
        base: Base configuration dict
        override: Override configuration dict

    Returns:
        Merged configuration dict (modifies base in-place)
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            merge_configs(base[key], value)
        else:
            base[key] = value
    return base


def _parse_env_value(env_value: str) -> Any:
    """Infer a python value from an environment string."""
    try:
        return json.loads(env_value)
    except (json.JSONDecodeError, ValueError):
        lowered = env_value.lower()
        if lowered == 'true':
            return True
        if lowered == 'false':
            return False
        if lowered in ('none', 'null'):
            return None
        return env_value


def load_config_from_env(config: dict, prefix: str = 'UNFACE_') -> dict:
    """Load configuration overrides from environment variables.

    Two families of variables are applied, in this order:

    - Prefixed overrides, ``UNFACE_SECTION__KEY`` (double underscore separates
      nesting), e.g. ``UNFACE_AWS__READ_TIMEOUT=20``.
    - The plain variables listed in ``ENV_VARIABLES`` (``PORT``,
      ``AWS_REGION``, ``AWS_ACCESS_KEY_ID``...), which win over the
      prefixed form.

    Args:
        config: Configuration dict to update
        prefix: Environment variable prefix

    Returns:
        Updated configuration dict

    Raises:
        ConfigurationError: If config is not a dictionary
    """
    if not isinstance(config, dict):
        raise ConfigurationError("Config must be a dictionary")

    for env_key, env_value in os.environ.items():
        if not env_key.startswith(prefix):
            continue

        keys = [key for key in env_key[len(prefix):].lower().split('__') if key]
        if not keys:
            continue

        current = config
        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[keys[-1]] = _parse_env_value(env_value)

    for env_key, (section, key) in ENV_VARIABLES.items():
        env_value = os.environ.get(env_key)
        if env_value is None or env_value == '':
            continue
        config.setdefault(section, {})
        if env_key == 'PORT':
            config[section][key] = _parse_env_value(env_value)
        else:
            # Credentials and region names stay strings
            config[section][key] = env_value

    return config


def validate_config(config: dict) -> None:
    """Validate configuration structure and values.

    Args:
        config: Configuration dict to validate

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration must be a dictionary")

    if not config:
        raise ConfigurationError("Configuration cannot be empty")

    required_sections = ['server', 'web', 'aws', 'logging']
    for section in required_sections:
        if section not in config:
            raise ConfigurationError(f"Missing required config section: {section}")
        if not isinstance(config[section], dict):
            raise ConfigurationError(f"Config section '{section}' must be a dictionary")

    server = config['server']
    port = server.get('port')
    if isinstance(port, bool) or not isinstance(port, int) or port < 0 or port > 65535:
        raise ConfigurationError(f"Invalid port: {port}")
    if not isinstance(server.get('host'), str):
        raise ConfigurationError(f"Invalid host: {server.get('host')}")

    web = config['web']
    max_length = web.get('max_content_length')
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        raise ConfigurationError(f"Invalid max_content_length: {max_length}")

    aws = config['aws']
    if not aws.get('region'):
        raise ConfigurationError("AWS region must not be empty")
    missing = [
        env_key for env_key, field in (
            ('AWS_ACCESS_KEY_ID', 'access_key_id'),
            ('AWS_SECRET_ACCESS_KEY', 'secret_access_key'),
        )
        if not aws.get(field)
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required AWS credentials: {', '.join(missing)}. "
            "Set them in the environment or in a .env file."
        )
    for field in ('connect_timeout', 'read_timeout'):
        value = aws.get(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigurationError(f"Invalid AWS {field}: {value}")

    level = config['logging'].get('level', 'INFO')
    valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if not isinstance(level, str) or level.upper() not in valid_levels:
        raise ConfigurationError(f"Invalid logging level: {level}")


def load_config(config_path: Optional[str] = None, use_defaults: bool = True,
                env_file: Optional[str] = '.env') -> dict:
    """Load configuration from file, environment, and defaults.

    Loading order:
    1. Load variables from ``env_file`` into the environment (existing
       variables are not overwritten)
    2. Start with default configuration (if use_defaults=True)
    3. Merge configuration from file (if config_path provided)
    4. Apply environment variable overrides
    5. Validate final configuration

    Args:
        config_path: Optional path to configuration file
        use_defaults: Whether to use default configuration as base
        env_file: dotenv file to read, None to skip

    Returns:
        Final merged and validated configuration dict

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if env_file:
        load_dotenv(env_file, override=False)

    config = load_config_with_defaults() if use_defaults else {}

    if config_path and os.path.exists(config_path):
        file_config = load_config_from_file(config_path, strict=False)
        config = merge_configs(config, file_config)

    config = load_config_from_env(config)

    validate_config(config)

    return config


__all__ = [
    'ConfigurationError',
    'DEFAULT_CONFIG',
    'ENV_VARIABLES',
    'load_config',
    'load_config_with_defaults',
    'load_config_from_file',
    'merge_configs',
    'load_config_from_env',
    'validate_config',
]
