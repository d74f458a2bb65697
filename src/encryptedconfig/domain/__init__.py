"""Artifact models and the versioned filename protocol."""

from encryptedconfig.domain.models import (
    EncryptedPolicyPair,
    FileArtifact,
    ResourceArtifact,
    SecretArtifact,
)
from encryptedconfig.domain.versioning import (
    CONFIG_FILENAME_PATTERN,
    POLICY_FILENAME_PATTERN,
    find_matching_policy,
    parse_config_version,
    parse_policy_version,
    parse_version,
)

__all__ = [
    "SecretArtifact",
    "FileArtifact",
    "ResourceArtifact",
    "EncryptedPolicyPair",
    "CONFIG_FILENAME_PATTERN",
    "POLICY_FILENAME_PATTERN",
    "parse_version",
    "parse_config_version",
    "parse_policy_version",
    "find_matching_policy",
]
