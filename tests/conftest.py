"""Shared test fixtures for the encryptedconfig test suite."""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from encryptedconfig.loaders import FileSecretLoader
from encryptedconfig.shared.infrastructure.config import Settings


class RecordingDecryptor:
    """Fake decryption service: returns the ciphertext and records every call."""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.calls: List[Tuple[bytes, bytes]] = []
        self.fail_with = fail_with

    def decrypt_secret(self, ciphertext: bytes, policy: bytes) -> bytes:
        self.calls.append((ciphertext, policy))
        if self.fail_with is not None:
            raise self.fail_with
        return ciphertext


def write_metatron_dir(
    directory: Path,
    configs: Optional[Dict[str, bytes]] = None,
    policies: Optional[Dict[str, bytes]] = None,
) -> Path:
    """Create ``directory/metatron/{encrypted,policy}`` populated with the given files."""
    encrypted = directory / "metatron" / "encrypted"
    policy = directory / "metatron" / "policy"
    encrypted.mkdir(parents=True, exist_ok=True)
    policy.mkdir(parents=True, exist_ok=True)
    for name, content in (configs or {}).items():
        (encrypted / name).write_bytes(content)
    for name, content in (policies or {}).items():
        (policy / name).write_bytes(content)
    return directory


@pytest.fixture
def decryptor():
    return RecordingDecryptor()


@pytest.fixture
def apps_dir(tmp_path):
    """Stand-in for /apps."""
    apps = tmp_path / "apps"
    apps.mkdir()
    return apps


@pytest.fixture
def file_loader(apps_dir):
    """FileSecretLoader rooted at the temporary apps directory."""
    return FileSecretLoader(
        config_path_format=str(apps_dir) + "/spinnaker{namespace}/metatron/encrypted",
        policy_path_format=str(apps_dir) + "/spinnaker{namespace}/metatron/policy",
    )


@pytest.fixture
def write_namespace(apps_dir):
    """Write metatron files for a namespace under the temporary apps directory."""

    def _write(namespace: str = "", configs=None, policies=None) -> Path:
        return write_metatron_dir(apps_dir / ("spinnaker" + namespace), configs, policies)

    return _write


@pytest.fixture
def resource_root(tmp_path):
    """A directory used as a bundled resource root."""
    root = tmp_path / "resources"
    root.mkdir()
    return root


@pytest.fixture
def settings():
    """Settings isolated from the process environment."""
    return Settings(
        _env_file=None,
        metatron_enabled="true",
        metatron_namespaces="",
        metatron_reverse_profiles=False,
        spring_profiles_active="",
    )


@pytest.fixture
def metatron_dir():
    """Factory for ``<dir>/metatron/{encrypted,policy}`` trees."""
    return write_metatron_dir


@pytest.fixture
def make_decryptor():
    """Factory for RecordingDecryptor, optionally failing with an exception."""
    return RecordingDecryptor
