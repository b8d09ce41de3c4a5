"""Decode raw secret record data into a ProjectConfig."""
import json
import logging
from typing import Dict, Mapping, Optional

from .errors import DecodeError
from .models import ProjectConfig, Repo

logger = logging.getLogger(__name__)

DEFAULT_VCS_SIDECAR = "acidic.azurecr.io/vcs-sidecar:latest"

# Store values cannot hold raw newlines, so SSH keys are written with this instead.
SSH_KEY_NEWLINE_ESCAPE = "$"


def _def(value: Optional[bytes], default: str) -> str:
    """Return value as text, or default when it is missing or empty."""
    if not value:
        return default
    return value.decode("utf-8", errors="replace")


def escape_ssh_key(key: str) -> str:
    """
    Escape a multi-line SSH key for storage.

    Lossy for keys that already contain a literal '$'.
    """
    return key.replace("\n", SSH_KEY_NEWLINE_ESCAPE)


def unescape_ssh_key(value: str) -> str:
    """Restore the newlines in a stored SSH key."""
    return value.replace(SSH_KEY_NEWLINE_ESCAPE, "\n")


def _decode_secrets(raw: Optional[bytes]) -> Dict[str, str]:
    """
    Parse the JSON-encoded secrets blob.

    Args:
        raw: JSON object bytes, or None/empty

    Returns:
        Mapping of secret names to values; empty when raw is empty

    Raises:
        DecodeError: If raw is not a JSON object of string values
    """
    if not raw:
        return {}

    try:
        # Invalid UTF-8 becomes U+FFFD, as it does in the scalar fields
        parsed = json.loads(raw.decode("utf-8", errors="replace"))
    except ValueError as e:
        raise DecodeError(f"Failed to parse 'secrets' as JSON: {e}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise DecodeError(
            f"Expected 'secrets' to be a JSON object, got {type(parsed).__name__}"
        )

    secrets: Dict[str, str] = {}
    for key, value in parsed.items():
        if value is None:
            secrets[key] = ""
        elif isinstance(value, str):
            secrets[key] = value
        else:
            raise DecodeError(
                f"Secret '{key}' must be a string, got {type(value).__name__}"
            )
    return secrets


def configure_project(
    data: Mapping[str, bytes],
    namespace: str,
    record_name: str,
    annotated_repo_name: str = "",
) -> ProjectConfig:
    """
    Build a ProjectConfig from a record's data mapping.

    Args:
        data: Record values keyed by field name
        namespace: Lookup namespace, used when 'namespace' is unset
        record_name: The record's own name
        annotated_repo_name: 'projectName' annotation, only used as the repo
            name when both 'repository' and record_name are empty

    Returns:
        A freshly built ProjectConfig

    Raises:
        DecodeError: If the 'secrets' value is malformed
    """
    secrets = _decode_secrets(data.get("secrets"))

    repo = Repo(
        name=_def(data.get("repository"), record_name or annotated_repo_name),
        ssh_key=unescape_ssh_key(_def(data.get("sshKey"), "")),
        clone_url=_def(data.get("cloneURL"), ""),
    )

    project = ProjectConfig(
        name=record_name,
        shared_secret=_def(data.get("sharedSecret"), ""),
        github_token=_def(data.get("githubToken"), ""),
        kubernetes_namespace=_def(data.get("namespace"), namespace),
        vcs_sidecar_image=_def(data.get("vcsSidecar"), DEFAULT_VCS_SIDECAR),
        repo=repo,
        secrets=secrets,
    )

    logger.debug(f"Decoded project '{record_name}' with {len(secrets)} secrets")
    return project
