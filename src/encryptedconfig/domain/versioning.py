"""
Versioned filename protocol for metatron artifacts.

Encrypted configs are named ``APP_NAME.yml.POLICY_NUMBER.mte`` and policies
``POLICY_NAME.POLICY_NUMBER.mtp``. A config is paired with the policy that
carries the same POLICY_NUMBER. A filename that breaks the protocol is
fatal: skipping it could hide a missing secret.
"""

import re
from typing import Iterable

from encryptedconfig.domain.models import SecretArtifact
from encryptedconfig.shared.domain.exceptions import (
    MalformedFilenameError,
    NoMatchingPolicyError,
)

CONFIG_FILENAME_PATTERN = "APP_NAME.yml.POLICY_NUMBER.mte"
POLICY_FILENAME_PATTERN = "POLICY_NAME.POLICY_NUMBER.mtp"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_version(
    filename: str,
    expected_segments: int,
    version_index: int,
    expected_pattern: str,
) -> int:
    """
    Extract the integer version embedded in a dotted filename.

    Args:
        filename: Artifact filename, without directories
        expected_segments: Exact number of dot-separated segments required
        version_index: Index of the version segment
        expected_pattern: Naming pattern quoted in error messages

    Returns:
        Parsed version number

    Raises:
        MalformedFilenameError: On a wrong segment count or a non-integer version
    """
    parts = filename.split(".")
    if len(parts) != expected_segments:
        raise MalformedFilenameError(
            f"Malformed config filename '{filename}' expected '{expected_pattern}'",
            context={"filename": filename, "expected": expected_pattern},
        )

    segment = parts[version_index]
    if not _INTEGER.fullmatch(segment):
        raise MalformedFilenameError(
            f"Malformed config filename '{filename}': version '{segment}' is not an integer, "
            f"expected '{expected_pattern}'",
            context={"filename": filename, "expected": expected_pattern, "version": segment},
        )
    return int(segment)


def parse_config_version(filename: str) -> int:
    return parse_version(filename, 4, 2, CONFIG_FILENAME_PATTERN)


def parse_policy_version(filename: str) -> int:
    return parse_version(filename, 3, 1, POLICY_FILENAME_PATTERN)


def find_matching_policy(
    version: int,
    policies: Iterable[SecretArtifact],
    namespace: str = "",
) -> SecretArtifact:
    """
    Select the first policy whose parsed version equals ``version``.

    Policies are consumed lazily, so every candidate up to the match must be
    well-named. Uniqueness of policy versions is not verified.

    Raises:
        MalformedFilenameError: If a candidate policy is misnamed
        NoMatchingPolicyError: If no candidate carries the version
    """
    for policy in policies:
        if parse_policy_version(policy.filename) == version:
            return policy

    raise NoMatchingPolicyError(
        f"No matching policy for version {version}",
        context={"version": version, "namespace": namespace},
    )
