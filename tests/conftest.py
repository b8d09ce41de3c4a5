"""Shared fixtures for acid-storage tests."""
from pathlib import Path

import pytest

from acid_storage.projects.domains import gcp_client
from acid_storage.projects.domains import preferences
from acid_storage.projects.domains.errors import ConnectivityError, ProjectNotFoundError
from acid_storage.projects.domains.models import SecretRecord
from acid_storage.projects.domains.store import SecretStore


class InMemorySecretStore(SecretStore):
    """SecretStore over a dict, recording every read."""

    def __init__(self, records=None, offline=False):
        self.records = dict(records or {})
        self.offline = offline
        self.reads = []

    def add(self, namespace, record):
        self.records[(namespace, record.name)] = record

    def get(self, namespace, key, timeout=None):
        self.reads.append((namespace, key, timeout))
        if self.offline:
            raise ConnectivityError("connection refused")
        try:
            return self.records[(namespace, key)]
        except KeyError:
            raise ProjectNotFoundError(key, namespace) from None


@pytest.fixture
def store():
    return InMemorySecretStore()


@pytest.fixture
def make_record():
    """Build a SecretRecord from plain string values."""
    def _make(name, annotations=None, **data):
        return SecretRecord(
            name=name,
            annotations=dict(annotations or {}),
            data={k: v.encode("utf-8") for k, v in data.items()},
        )
    return _make


@pytest.fixture
def temp_home(tmp_path, monkeypatch):
    """Point the home directory and preferences file at a temp dir."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setattr(Path, "home", lambda: fake_home)

    fake_config_dir = fake_home / ".config" / "acid-storage"
    monkeypatch.setattr(preferences, "PREFERENCES_DIR", fake_config_dir)
    monkeypatch.setattr(preferences, "PREFERENCES_FILE", fake_config_dir / "preferences.json")

    return fake_home


@pytest.fixture(autouse=True)
def reset_gcp_config(monkeypatch):
    """Forget any config the GCP store loaded in an earlier test."""
    monkeypatch.setattr(gcp_client, "_CONFIG", None)
    monkeypatch.setattr(gcp_client, "_CONFIG_LOADED", False)
    monkeypatch.delenv("GCP_PROJECT", raising=False)
