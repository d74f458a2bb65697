"""
Bundled resource secret loader.

Finds ``<namespace>/metatron/encrypted/*.mte`` and
``<namespace>/metatron/policy/*.mtp`` under every resource root. Roots are
the packages or directories passed in explicitly, followed by every package
advertised under the ``encryptedconfig.resources`` entry-point group, so
secrets can ship inside any installed distribution:

    # setup.py of a service that bundles its secrets
    entry_points={
        "encryptedconfig.resources": ["myservice = myservice.secrets"],
    }
"""

import fnmatch
import os
from importlib import resources
from importlib.metadata import entry_points
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import structlog

from encryptedconfig.domain.models import EncryptedPolicyPair, ResourceArtifact, SecretArtifact
from encryptedconfig.domain.versioning import find_matching_policy, parse_config_version
from encryptedconfig.loaders.base import SecretLoader
from encryptedconfig.shared.domain.exceptions import SecretLoaderError

logger = structlog.get_logger(__name__)

CONFIG_PATTERN_FORMAT = "{namespace}/metatron/encrypted/*.mte"
POLICY_PATTERN_FORMAT = "{namespace}/metatron/policy/*.mtp"
ENTRY_POINT_GROUP = "encryptedconfig.resources"

ResourceRoot = Union[str, Path, Traversable]


class ResourceSecretLoader(SecretLoader):
    """
    Loads encrypted policy pairs from resources bundled with installed packages.

    Matches from all roots are merged. A namespace with no matching resources
    contributes nothing; a root that cannot be resolved is fatal.
    """

    name = "resource"

    def __init__(
        self,
        roots: Optional[Sequence[ResourceRoot]] = None,
        config_pattern: str = CONFIG_PATTERN_FORMAT,
        policy_pattern: str = POLICY_PATTERN_FORMAT,
        entry_point_group: Optional[str] = ENTRY_POINT_GROUP,
    ):
        self.roots = list(roots or [])
        self.config_pattern = config_pattern
        self.policy_pattern = policy_pattern
        self.entry_point_group = entry_point_group

    def load(self, namespace: str) -> List[EncryptedPolicyPair]:
        config_pattern = self.build_path(self.config_pattern, namespace)
        policy_pattern = self.build_path(self.policy_pattern, namespace)

        configs = self._resolve(config_pattern, "Could not resolve metatron encrypted config resources")
        return [
            EncryptedPolicyPair(
                secret=config,
                policy=self._load_policy(policy_pattern, parse_config_version(config.filename), namespace),
            )
            for config in configs
            if config.exists()
        ]

    def _load_policy(self, policy_pattern: str, version: int, namespace: str) -> SecretArtifact:
        policies = self._resolve(
            policy_pattern,
            f"Could not find a metatron policy for version {version}",
        )
        return find_matching_policy(version, (p for p in policies if p.exists()), namespace)

    def _resolve(self, pattern: str, message: str) -> List[ResourceArtifact]:
        """Expand a ``dir/parts/*.ext`` pattern against every root."""
        directory, _, name_glob = pattern.strip("/").rpartition("/")
        parts = [p for p in directory.split("/") if p]

        matches = []
        try:
            for label, root in self._iter_roots():
                matches.extend(self._match(label, root, parts, name_glob))
        except (OSError, ImportError, TypeError, ValueError) as e:
            raise SecretLoaderError(message, context={"pattern": pattern}) from e
        return matches

    @staticmethod
    def _match(label: str, root: Traversable, parts: List[str], name_glob: str) -> List[ResourceArtifact]:
        node = root
        for part in parts:
            node = node.joinpath(part)
            if not node.is_dir():
                return []
        children = sorted((c for c in node.iterdir() if fnmatch.fnmatchcase(c.name, name_glob)), key=lambda c: c.name)
        return [ResourceArtifact(resource=c, root=label) for c in children]

    def _iter_roots(self) -> Iterator[Tuple[str, Traversable]]:
        for root in self.roots:
            yield self._as_traversable(root)

        if not self.entry_point_group:
            return
        for ep in entry_points(group=self.entry_point_group):
            yield ep.value, resources.files(ep.value)

    @staticmethod
    def _as_traversable(root: ResourceRoot) -> Tuple[str, Traversable]:
        if isinstance(root, str):
            if os.sep in root or Path(root).is_dir():
                return root, Path(root)
            return root, resources.files(root)
        return str(root), root
