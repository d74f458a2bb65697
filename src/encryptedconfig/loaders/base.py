"""
Base secret loader interface.

A secret loader discovers encrypted configs and their policies for a
namespace in one storage medium. New backends (a remote secret store, for
instance) implement this interface and are passed to the resolver.
"""

from abc import ABC, abstractmethod
from typing import List

from encryptedconfig.domain.models import EncryptedPolicyPair


class SecretLoader(ABC):
    """
    Interface for secret discovery backends.

    Implementations must not touch the decrypt cache: ``load`` is a function
    of the namespace and the current state of the storage medium.
    """

    #: Short backend name shown in logs and the CLI.
    name: str = "loader"

    @abstractmethod
    def load(self, namespace: str) -> List[EncryptedPolicyPair]:
        """
        Discover encrypted policy pairs for a namespace.

        Args:
            namespace: "" for the root namespace, otherwise "/<name>"

        Returns:
            Pairs in discovery order; empty when the namespace is not present

        Raises:
            SecretLoaderError: If the storage medium cannot be enumerated
            MalformedFilenameError: If an artifact breaks the naming protocol
            NoMatchingPolicyError: If a config has no policy of its version
        """
        pass

    @staticmethod
    def build_path(path_format: str, namespace: str) -> str:
        """Substitute the namespace into a ``{namespace}`` path format."""
        return path_format.format(namespace=namespace)
