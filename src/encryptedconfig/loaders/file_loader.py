"""
Filesystem secret loader.

Searches ``/apps/spinnaker<namespace>/metatron/encrypted`` for encrypted
configs and ``/apps/spinnaker<namespace>/metatron/policy`` for policies.
"""

from pathlib import Path
from typing import List

import structlog

from encryptedconfig.domain.models import EncryptedPolicyPair, FileArtifact, SecretArtifact
from encryptedconfig.domain.versioning import find_matching_policy, parse_config_version
from encryptedconfig.loaders.base import SecretLoader
from encryptedconfig.shared.domain.exceptions import SecretLoaderError

logger = structlog.get_logger(__name__)

CONFIG_PATH_FORMAT = "/apps/spinnaker{namespace}/metatron/encrypted"
POLICY_PATH_FORMAT = "/apps/spinnaker{namespace}/metatron/policy"


class FileSecretLoader(SecretLoader):
    """
    Loads encrypted policy pairs from a directory tree.

    A namespace whose config or policy directory is missing contributes
    nothing. Failing to list a directory that does exist is fatal.
    """

    name = "file"

    def __init__(
        self,
        config_path_format: str = CONFIG_PATH_FORMAT,
        policy_path_format: str = POLICY_PATH_FORMAT,
    ):
        self.config_path_format = config_path_format
        self.policy_path_format = policy_path_format

    def load(self, namespace: str) -> List[EncryptedPolicyPair]:
        config_path = Path(self.build_path(self.config_path_format, namespace))
        policy_path = Path(self.build_path(self.policy_path_format, namespace))

        if not config_path.is_dir() or not policy_path.is_dir():
            logger.warning(
                "metatron_filepath_missing",
                path=str(config_path),
                namespace=namespace,
                message="Metatron filepath does not exist, skipping load",
            )
            return []

        pairs = []
        for path in self._list(config_path, "Could not list encrypted metatron files at"):
            if not path.exists():
                logger.warning("metatron_config_inaccessible", path=str(path))
                continue
            version = parse_config_version(path.name)
            pairs.append(
                EncryptedPolicyPair(
                    secret=FileArtifact(path),
                    policy=self._load_policy(policy_path, version, namespace),
                )
            )
        return pairs

    def _load_policy(self, policy_path: Path, version: int, namespace: str) -> SecretArtifact:
        # Relisted for every config so a policy dropped in mid-scan is still seen.
        policies = (
            FileArtifact(p)
            for p in self._list(policy_path, "Could not list metatron policy files at")
            if p.exists()
        )
        return find_matching_policy(version, policies, namespace)

    @staticmethod
    def _list(directory: Path, message: str) -> List[Path]:
        try:
            return sorted(directory.iterdir())
        except OSError as e:
            raise SecretLoaderError(
                f"{message} {directory}",
                context={"path": str(directory)},
            ) from e
