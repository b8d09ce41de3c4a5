"""Exceptions raised while loading project configuration."""
from typing import Optional

from .models import ProjectConfig


class StorageError(Exception):
    """Base class for project storage errors."""
    pass


class ConnectivityError(StorageError):
    """The secret store could not be reached or refused our credentials."""
    pass


class ProjectNotFoundError(StorageError):
    """
    No record exists for the requested key.

    Attributes:
        key: Derived store key that was looked up
        namespace: Namespace the lookup was scoped to
        project: Zero-valued ProjectConfig; never meaningful on its own
    """

    def __init__(self, key: str, namespace: str, project: Optional[ProjectConfig] = None):
        # args mirror the constructor so the exception survives pickling
        super().__init__(key, namespace)
        self.key = key
        self.namespace = namespace
        self.project = project if project is not None else ProjectConfig()

    def __str__(self) -> str:
        return f"Project '{self.key}' not found in namespace '{self.namespace}'"


class DecodeError(StorageError):
    """A record was fetched but its contents could not be decoded."""
    pass
