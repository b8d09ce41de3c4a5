"""Stable store keys derived from project names."""
import hashlib

PROJECT_ID_PREFIX = "acid-"

# Existing records are keyed on this length; do not change it.
SHORT_SHA_LENGTH = 54


def short_sha(input: str) -> str:
    """
    Return a truncated SHA-256 hex digest of a string.

    Args:
        input: Any string, hashed as UTF-8

    Returns:
        The first 54 lowercase hex characters of the digest
    """
    return hashlib.sha256(input.encode("utf-8")).hexdigest()[:SHORT_SHA_LENGTH]


def project_id(id: str) -> str:
    """Encode a project name as a store key, leaving existing keys untouched."""
    if id.startswith(PROJECT_ID_PREFIX):
        return id
    return PROJECT_ID_PREFIX + short_sha(id)
