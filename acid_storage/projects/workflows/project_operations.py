"""Workflow for loading project configuration from the secret store."""
import logging
from typing import Optional

from ..domains.decoder import configure_project
from ..domains.identifiers import project_id
from ..domains.models import ProjectConfig
from ..domains.store import SecretStore

logger = logging.getLogger(__name__)


class Loader:
    """
    Loads project configuration, one store read per call.

    Holds no per-lookup state, so a single instance may serve concurrent calls.
    """

    def __init__(self, store: Optional[SecretStore] = None):
        self._store = store

    @property
    def store(self) -> SecretStore:
        """Lazy-initialize the default GCP store."""
        if self._store is None:
            from ..domains.gcp_client import GCPSecretStore
            self._store = GCPSecretStore()
        return self._store

    def get(self, id: str, namespace: str, timeout: Optional[float] = None) -> ProjectConfig:
        """
        Retrieve a project's configuration.

        Args:
            id: Project name, or an already derived "acid-" key
            namespace: Namespace the record is stored in
            timeout: Seconds to wait for the store read

        Returns:
            A new ProjectConfig

        Raises:
            ProjectNotFoundError: If no record exists for the project
            ConnectivityError: If the store cannot be reached
            DecodeError: If the record contents are malformed
        """
        return load_project_config(self.store, project_id(id), namespace, timeout=timeout)


def new(store: Optional[SecretStore] = None) -> Loader:
    """Create a Loader, backed by GCP Secret Manager unless a store is given."""
    return Loader(store)


def load_project_config(
    store: SecretStore,
    key: str,
    namespace: str,
    timeout: Optional[float] = None,
) -> ProjectConfig:
    """Read the record stored at key in namespace and decode it."""
    logger.debug(f"Loading project '{key}' from namespace '{namespace}'")
    record = store.get(namespace, key, timeout=timeout)
    return configure_project(
        record.data,
        namespace,
        record.name,
        record.annotations.get("projectName", ""),
    )
