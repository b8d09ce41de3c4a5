"""Secret store interface consumed by the project loader."""
from abc import ABC, abstractmethod
from typing import Optional

from .models import SecretRecord


class SecretStore(ABC):
    """A key/value record store addressed by (namespace, key)."""

    @abstractmethod
    def get(self, namespace: str, key: str, timeout: Optional[float] = None) -> SecretRecord:
        """
        Read one record.

        Args:
            namespace: Scope of the lookup
            key: Record key within the namespace
            timeout: Seconds to wait for the store, or None for the client default

        Returns:
            The stored record

        Raises:
            ProjectNotFoundError: If no record exists at (namespace, key)
            ConnectivityError: If the store cannot be reached or authenticated against
        """
