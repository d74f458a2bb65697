"""
Secret loaders discover encrypted configs and policies for a namespace.

Exports:
    - SecretLoader: Backend interface
    - ResourceSecretLoader: Resources bundled with installed packages
    - FileSecretLoader: /apps/spinnaker<namespace>/metatron on the filesystem
    - default_loaders: Backends in their default search order
"""

from typing import List

from encryptedconfig.loaders.base import SecretLoader
from encryptedconfig.loaders.file_loader import FileSecretLoader
from encryptedconfig.loaders.resource_loader import ResourceSecretLoader


def default_loaders() -> List[SecretLoader]:
    """Bundled resources first, then the filesystem."""
    return [ResourceSecretLoader(), FileSecretLoader()]


__all__ = [
    "SecretLoader",
    "FileSecretLoader",
    "ResourceSecretLoader",
    "default_loaders",
]
