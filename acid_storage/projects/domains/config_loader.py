"""Configuration loader for acid-storage."""
import os
import logging
from pathlib import Path
from typing import Dict, Any

import yaml

from .preferences import get_preference

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Configuration error exception."""
    pass


def default_config_path() -> Path:
    """Default config location, resolved against the current home directory."""
    return Path.home() / ".config" / "acid-storage" / "config.yml"


def _get_config_path() -> str:
    """
    Resolve the config file path.

    Priority order:
    1. User preference "config_path"
    2. ~/.config/acid-storage/config.yml

    Returns:
        Absolute path to config file

    Raises:
        FileNotFoundError: If no config file exists in either location
    """
    config_path_pref = get_preference("config_path")
    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            logger.info(f"Using config from preference: {config_path}")
            return str(config_path)
        logger.warning(f"Config path from preference doesn't exist: {config_path}")

    default_config = default_config_path()
    if default_config.exists():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    raise FileNotFoundError(
        "Configuration file not found. Set one up with either of:\n\n"
        "1. The default location:\n"
        f"   mkdir -p {default_config.parent}\n"
        f"   cp /path/to/your/config.yml {default_config}\n\n"
        "2. A custom path:\n"
        "   acid-storage config set-path /path/to/your/config.yml\n"
    )


def load_config() -> Dict[str, Any]:
    """
    Load and validate the YAML configuration.

    Returns:
        Dict with keys:
        - authentication: type and service_account_path
        - gcp: project_id, the default namespace for lookups

    Raises:
        FileNotFoundError: If no config file can be found
        ConfigError: If the file is invalid or the service account file is missing
    """
    # Resolved on every call so preference changes apply without a restart
    config_path = _get_config_path()

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}") from e

    if not config:
        raise ConfigError(f"Config file at {config_path} is empty")

    if not isinstance(config, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping")

    auth = config.get('authentication')
    if not isinstance(auth, dict):
        raise ConfigError(
            f"Missing 'authentication' section in config at {config_path}\n"
            f"Required format:\n"
            f"authentication:\n"
            f"  type: service_account\n"
            f"  service_account_path: /path/to/service-account.json"
        )

    if 'type' not in auth:
        raise ConfigError("Missing 'authentication.type' in config")

    if auth['type'] != 'service_account':
        raise ConfigError(
            f"Unsupported authentication type: {auth['type']}\n"
            f"Only 'service_account' is supported."
        )

    if 'service_account_path' not in auth:
        raise ConfigError(
            "Missing 'authentication.service_account_path' in config\n"
            "Please specify the absolute path to your service account JSON file."
        )

    service_account_path = auth['service_account_path']

    if not os.path.exists(service_account_path):
        raise ConfigError(
            f"Service account file not found at: {service_account_path}\n"
            f"Please ensure the file exists or update the path in {config_path}"
        )

    if not os.path.isfile(service_account_path):
        raise ConfigError(f"Service account path is not a file: {service_account_path}")

    gcp = config.get('gcp')
    if not isinstance(gcp, dict):
        raise ConfigError(
            f"Missing 'gcp' section in config at {config_path}\n"
            f"Required format:\n"
            f"gcp:\n"
            f"  project_id: your-project-id"
        )

    if 'project_id' not in gcp:
        raise ConfigError("Missing 'gcp.project_id' in config")

    logger.info(f"Configuration loaded successfully from {config_path}")
    logger.debug(f"Using service account: {service_account_path}")
    logger.debug(f"Default namespace: {gcp['project_id']}")

    return config
