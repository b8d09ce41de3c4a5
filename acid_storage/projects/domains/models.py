"""Domain models for project storage."""
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class SecretRecord:
    """A record as returned by the secret store."""
    name: str
    annotations: Dict[str, str] = field(default_factory=dict)
    data: Dict[str, bytes] = field(default_factory=dict)


@dataclass
class Repo:
    """Source repository settings for a project."""
    name: str = ""
    ssh_key: str = ""
    clone_url: str = ""


@dataclass
class ProjectConfig:
    """Decoded project configuration."""
    name: str = ""
    shared_secret: str = ""
    github_token: str = ""
    kubernetes_namespace: str = ""
    vcs_sidecar_image: str = ""
    repo: Repo = field(default_factory=Repo)
    secrets: Dict[str, str] = field(default_factory=dict)  # env vars for builds
