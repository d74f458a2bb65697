"""
Domain models for encrypted config artifacts.

- SecretArtifact: a readable file discovered by a secret loader
- FileArtifact: artifact backed by a filesystem path
- ResourceArtifact: artifact backed by a bundled package resource
- EncryptedPolicyPair: a config artifact with the policy matching its version
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from importlib.resources.abc import Traversable
from pathlib import Path


class SecretArtifact(ABC):
    """
    Handle to an encrypted config or policy file.

    Artifacts are identified by filename; the decrypt cache keys on it.
    """

    @property
    @abstractmethod
    def filename(self) -> str:
        pass

    @property
    @abstractmethod
    def location(self) -> str:
        """Human readable origin, for logs and diagnostics."""
        pass

    @abstractmethod
    def exists(self) -> bool:
        pass

    @abstractmethod
    def read_bytes(self) -> bytes:
        """
        Read the whole artifact.

        Raises:
            OSError: If the artifact cannot be read
        """
        pass


@dataclass(frozen=True)
class FileArtifact(SecretArtifact):
    path: Path

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def location(self) -> str:
        return str(self.path)

    def exists(self) -> bool:
        return self.path.exists()

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class ResourceArtifact(SecretArtifact):
    resource: Traversable
    root: str = ""

    @property
    def filename(self) -> str:
        return self.resource.name

    @property
    def location(self) -> str:
        return f"{self.root}:{self.resource}" if self.root else str(self.resource)

    def exists(self) -> bool:
        return self.resource.is_file()

    def read_bytes(self) -> bytes:
        return self.resource.read_bytes()


@dataclass(frozen=True)
class EncryptedPolicyPair:
    """An encrypted config and the policy that authorizes its decryption."""

    secret: SecretArtifact
    policy: SecretArtifact

    @property
    def filename(self) -> str:
        return self.secret.filename

    def __str__(self) -> str:
        return f"EncryptedPolicyPair({self.secret.filename} <- {self.policy.filename})"
