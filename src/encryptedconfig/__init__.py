"""
Encrypted config resolution for metatron-protected secrets.

Discovers ``APP.yml.N.mte`` configs and their ``POLICY.N.mtp`` policies in
bundled resources and under ``/apps/spinnaker<namespace>/metatron``,
decrypts each config once, and appends the results to a layered
configuration at the lowest precedence.

Example:
    >>> from encryptedconfig import ConfigurableEnvironment, EncryptedConfigResolver
    >>> environment = ConfigurableEnvironment(active_profiles=["prod"])
    >>> EncryptedConfigResolver().resolve(environment)  # doctest: +SKIP
"""

from encryptedconfig.application import (
    DecryptCache,
    Decryptor,
    EncryptedConfigResolver,
    LayerBuilder,
    PassthroughDecryptor,
    YamlLayerParser,
)
from encryptedconfig.domain import EncryptedPolicyPair, FileArtifact, ResourceArtifact, SecretArtifact
from encryptedconfig.environment import (
    CompositePropertySource,
    ConfigurableEnvironment,
    MapPropertySource,
    PropertySource,
    PropertySources,
)
from encryptedconfig.loaders import FileSecretLoader, ResourceSecretLoader, SecretLoader, default_loaders
from encryptedconfig.shared.domain.exceptions import (
    DecryptionError,
    EncryptedConfigError,
    LayerParseError,
    MalformedFilenameError,
    NoMatchingPolicyError,
    PropertySourceError,
    SecretLoaderError,
    UnregisteredConfigError,
)

__version__ = "0.1.0"

__all__ = [
    "EncryptedConfigResolver",
    "DecryptCache",
    "Decryptor",
    "PassthroughDecryptor",
    "LayerBuilder",
    "YamlLayerParser",
    "SecretArtifact",
    "FileArtifact",
    "ResourceArtifact",
    "EncryptedPolicyPair",
    "SecretLoader",
    "FileSecretLoader",
    "ResourceSecretLoader",
    "default_loaders",
    "PropertySource",
    "MapPropertySource",
    "CompositePropertySource",
    "PropertySources",
    "ConfigurableEnvironment",
    "EncryptedConfigError",
    "MalformedFilenameError",
    "SecretLoaderError",
    "NoMatchingPolicyError",
    "PropertySourceError",
    "UnregisteredConfigError",
    "DecryptionError",
    "LayerParseError",
]
