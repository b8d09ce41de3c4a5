"""Secret store backed by GCP Secret Manager."""
import os
import base64
import logging
from typing import Optional, Dict, Any

import yaml
from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import secretmanager

from .config_loader import load_config, ConfigError
from .errors import ConnectivityError, DecodeError, ProjectNotFoundError
from .models import SecretRecord
from .store import SecretStore

logger = logging.getLogger(__name__)

# Deferred until the first store read so `acid-storage --help` needs no config
_CONFIG: Optional[Dict[str, Any]] = None
_CONFIG_LOADED = False


def _get_config() -> Optional[Dict[str, Any]]:
    """
    Lazy load configuration on first use.

    Returns:
        Configuration dictionary, or None when no config file exists and
        application default credentials should be used

    Raises:
        ConfigError: If a config file exists but is invalid
    """
    global _CONFIG, _CONFIG_LOADED

    if not _CONFIG_LOADED:
        try:
            _CONFIG = load_config()
        except FileNotFoundError:
            logger.debug("No config file found, using application default credentials")
            _CONFIG = None
        _CONFIG_LOADED = True

        if _CONFIG:
            sa_path = _CONFIG['authentication']['service_account_path']
            os.environ['GOOGLE_APPLICATION_CREDENTIALS'] = sa_path
            logger.info(f"Set GOOGLE_APPLICATION_CREDENTIALS from config: {sa_path}")

    return _CONFIG


def _mapping(document: Dict[str, Any], key: str, where: str) -> Dict[str, Any]:
    value = document.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"'{key}' in {where} must be a mapping")
    return value


def _strings(mapping: Dict[Any, Any], section: str, where: str) -> Dict[str, str]:
    """
    Check that a section holds only string keys and values.

    YAML reads unquoted scalars such as 0123 or yes as numbers and booleans,
    which Kubernetes rejects; null values are read as empty strings.
    """
    strings: Dict[str, str] = {}
    for key, value in mapping.items():
        if not isinstance(key, str):
            raise DecodeError(f"Key {key!r} in '{section}' of {where} must be a string")
        if value is None:
            value = ""
        elif not isinstance(value, str):
            raise DecodeError(
                f"Value of '{key}' in '{section}' of {where} must be a string, "
                f"got {type(value).__name__} (quote it in the payload)"
            )
        strings[key] = value
    return strings


def parse_payload(payload: bytes, secret_id: str) -> SecretRecord:
    """
    Parse a secret payload shaped like a Kubernetes Secret manifest.

    Recognised fields are metadata.name, metadata.annotations, data
    (base64 values) and stringData (plain values, taking precedence over
    data). All of them must be strings.

    Args:
        payload: Raw secret version payload
        secret_id: Secret id, used as the record name if metadata.name is unset

    Returns:
        SecretRecord with byte values

    Raises:
        DecodeError: If the payload is not a valid manifest
    """
    try:
        document = yaml.safe_load(payload)
    except yaml.YAMLError as e:
        raise DecodeError(f"Failed to parse payload of secret '{secret_id}': {e}") from e

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise DecodeError(f"Payload of secret '{secret_id}' must be a mapping")

    where = f"secret '{secret_id}'"
    metadata = _mapping(document, "metadata", where)
    name = metadata.get("name")
    if name is not None and not isinstance(name, str):
        raise DecodeError(f"'metadata.name' in {where} must be a string, got {type(name).__name__}")

    annotations = _strings(_mapping(metadata, "annotations", where), "metadata.annotations", where)

    data: Dict[str, bytes] = {}
    for key, value in _strings(_mapping(document, "data", where), "data", where).items():
        try:
            data[key] = base64.b64decode(value, validate=True)
        except ValueError as e:
            raise DecodeError(f"Value of '{key}' in {where} is not valid base64: {e}") from e

    for key, value in _strings(_mapping(document, "stringData", where), "stringData", where).items():
        data[key] = value.encode("utf-8")

    return SecretRecord(
        name=name or secret_id,
        annotations=annotations,
        data=data,
    )


class GCPSecretStore(SecretStore):
    """
    SecretStore over GCP Secret Manager.

    Namespaces map to GCP projects and keys to secret ids; each read fetches
    the latest secret version.
    """

    def __init__(self):
        self._client = None

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy-initialize client."""
        if self._client is None:
            _get_config()
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def get_default_namespace(self) -> Optional[str]:
        """
        Namespace to use when the caller did not give one.

        Priority order:
        1. GCP_PROJECT environment variable
        2. gcp.project_id from the config file

        Returns:
            Namespace string, or None if neither is set

        Raises:
            ConfigError: If a config file exists but is invalid
        """
        gcp_project_env = os.getenv("GCP_PROJECT")
        if gcp_project_env:
            logger.debug(f"Using GCP_PROJECT from environment: {gcp_project_env}")
            return gcp_project_env

        config = _get_config()
        if config:
            project_id = config['gcp']['project_id']
            logger.debug(f"Using project_id from config: {project_id}")
            return project_id

        return None

    def get(self, namespace: str, key: str, timeout: Optional[float] = None) -> SecretRecord:
        name = f"projects/{namespace}/secrets/{key}/versions/latest"
        logger.debug(f"Reading {name}")

        # Leave the client's default deadline in place unless the caller set one
        kwargs = {} if timeout is None else {"timeout": timeout}
        try:
            response = self.client.access_secret_version(request={"name": name}, **kwargs)
        except api_exceptions.NotFound as e:
            raise ProjectNotFoundError(key, namespace) from e
        except (api_exceptions.GoogleAPICallError, api_exceptions.RetryError) as e:
            raise ConnectivityError(f"Secret Manager request for {name} failed: {e}") from e
        except auth_exceptions.DefaultCredentialsError as e:
            raise ConnectivityError(f"No usable GCP credentials: {e}") from e
        except ConfigError as e:
            raise ConnectivityError(f"Cannot set up GCP credentials: {e}") from e

        return parse_payload(response.payload.data, key)
