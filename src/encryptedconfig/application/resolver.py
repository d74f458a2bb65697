"""
Wires secret loaders, the decrypt cache and the layer builder together.

For every namespace (the root namespace plus those in METATRON_NAMESPACES)
the resolver asks each loader for encrypted policy pairs, decrypts each
config once, and appends a composite property source named
``metatron<namespace>`` at the lowest precedence of the environment.

Any error aborts the whole pass; the environment may already hold the
composites of earlier namespaces when that happens.
"""

from typing import List, Optional, Sequence

import structlog

from encryptedconfig.application.decrypt_cache import DecryptCache
from encryptedconfig.application.layer_builder import LayerBuilder
from encryptedconfig.domain.models import EncryptedPolicyPair
from encryptedconfig.environment.property_sources import (
    CompositePropertySource,
    ConfigurableEnvironment,
)
from encryptedconfig.loaders import SecretLoader, default_loaders
from encryptedconfig.shared.infrastructure.config import Settings

logger = structlog.get_logger(__name__)

COMPOSITE_PREFIX = "metatron"


class EncryptedConfigResolver:
    """
    Resolves metatron encrypted configs into an environment.

    Args:
        decrypt_cache: Shared cache; inject one per test for isolation
        loaders: Backends in search order (defaults to resources, then files)
        layer_builder: Plaintext to property source conversion
        settings: Fixed settings; when None they are read at the start of each pass
    """

    def __init__(
        self,
        decrypt_cache: DecryptCache = None,
        loaders: Optional[Sequence[SecretLoader]] = None,
        layer_builder: LayerBuilder = None,
        settings: Optional[Settings] = None,
    ):
        self.decrypt_cache = decrypt_cache or DecryptCache()
        self.loaders = list(loaders) if loaders is not None else default_loaders()
        self.layer_builder = layer_builder or LayerBuilder()
        self._settings = settings

    def resolve(self, environment: ConfigurableEnvironment) -> List[CompositePropertySource]:
        """
        Run one resolution pass.

        Returns:
            Composite property sources appended to the environment, in order
        """
        settings = self._settings if self._settings is not None else Settings()
        if not settings.is_metatron_enabled:
            logger.warning("metatron_disabled", message="Metatron secret decryption is disabled!")
            return []

        appended = []
        for namespace in settings.namespaces:
            composite = self._resolve_namespace(namespace, environment, settings.metatron_reverse_profiles)
            if composite is not None:
                environment.property_sources.add_last(composite)
                appended.append(composite)
        return appended

    def discover(self, namespace: str) -> List[EncryptedPolicyPair]:
        """All pairs for a namespace across loaders, without decrypting."""
        pairs = []
        for loader in self.loaders:
            pairs.extend(loader.load(namespace))
        return pairs

    def _resolve_namespace(
        self,
        namespace: str,
        environment: ConfigurableEnvironment,
        reverse_profiles: bool,
    ) -> Optional[CompositePropertySource]:
        pairs = self.discover(namespace)
        logger.info("metatron_secret_sources_found", namespace=namespace, count=len(pairs))

        self.decrypt_cache.register(pairs)

        profiles = list(environment.active_profiles)
        if reverse_profiles:
            # Given "mgmt,test,local" the first match wins, so load "local" first
            profiles.reverse()

        composite = CompositePropertySource(COMPOSITE_PREFIX + namespace)
        for pair in pairs:
            for profile in [*profiles, None]:
                plaintext = self.decrypt_cache.decrypt(pair)
                source = self.layer_builder.build(plaintext, pair.secret.filename, profile)
                if source is not None:
                    composite.add(source)

        if not len(composite):
            return None
        return composite
