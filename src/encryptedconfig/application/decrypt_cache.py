"""
Decrypt-once cache for encrypted policy pairs.

The resolver registers every pair it discovered before asking for plaintext.
Each config filename is decrypted at most once for the life of the cache;
later lookups return the cached bytes without reading the artifacts again.
Plaintext is held in memory only.
"""

import threading
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Protocol

import structlog

from encryptedconfig.domain.models import EncryptedPolicyPair
from encryptedconfig.shared.domain.exceptions import DecryptionError, UnregisteredConfigError

logger = structlog.get_logger(__name__)


class Decryptor(Protocol):
    """External decryption service. Policy trust is its concern."""

    def decrypt_secret(self, ciphertext: bytes, policy: bytes) -> bytes:
        ...


class PassthroughDecryptor:
    """Returns ciphertext unchanged. For local development against plaintext fixtures."""

    def decrypt_secret(self, ciphertext: bytes, policy: bytes) -> bytes:
        return ciphertext


class DecryptCache:
    """
    Process-wide plaintext cache keyed by config filename.

    Thread Safety:
        ``_lock`` guards the registration map, the plaintext map and the
        per-key lock table. Decryption itself runs under a per-key lock, so
        concurrent callers for the same filename wait for the first one and
        reuse its result, while different filenames decrypt in parallel.
    """

    def __init__(self, decryptor: Decryptor = None):
        self._decryptor = decryptor or PassthroughDecryptor()
        self._known_configs: Dict[str, EncryptedPolicyPair] = {}
        self._plaintext: Dict[str, bytes] = {}
        self._key_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._decrypt_count = 0

    def register(self, pairs: Iterable[EncryptedPolicyPair]) -> None:
        """
        Replace the known configs with ``pairs``, keyed by config filename.

        Registration is not additive. When two pairs share a filename the
        later one wins. Cached plaintext is kept.
        """
        known = {pair.secret.filename: pair for pair in pairs}
        with self._lock:
            self._known_configs = known

    def decrypt(self, pair: EncryptedPolicyPair) -> bytes:
        """
        Return the plaintext for a registered pair, decrypting on first use.

        Raises:
            UnregisteredConfigError: If the pair's filename was never registered
            DecryptionError: If reading either artifact or decrypting fails
        """
        key = pair.secret.filename
        with self._lock:
            registered = self._known_configs.get(key)
            if registered is None:
                # Means register() was skipped by the caller.
                raise UnregisteredConfigError(
                    "failed to find metatron config in loaded configs: this should never happen",
                    context={"filename": key},
                )
            if key in self._plaintext:
                return self._plaintext[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                if key in self._plaintext:
                    return self._plaintext[key]

            plaintext = self._decrypt(key, registered)

            with self._lock:
                self._plaintext[key] = plaintext
                self._decrypt_count += 1
            return plaintext

    def _decrypt(self, key: str, pair: EncryptedPolicyPair) -> bytes:
        try:
            ciphertext = pair.secret.read_bytes()
            policy = pair.policy.read_bytes()
            plaintext = self._decryptor.decrypt_secret(ciphertext, policy)
            if not isinstance(plaintext, (bytes, bytearray)):
                raise TypeError(f"decryptor returned {type(plaintext).__name__}, expected bytes")
            plaintext = bytes(plaintext)
        except Exception as e:
            raise DecryptionError(
                "Failed decrypting secrets",
                context={
                    "filename": key,
                    "policy": pair.policy.filename,
                    "error_type": type(e).__name__,
                },
            ) from e

        logger.debug("metatron_config_decrypted", filename=key, policy=pair.policy.filename)
        return plaintext

    @property
    def known_configs(self) -> Mapping[str, EncryptedPolicyPair]:
        with self._lock:
            return MappingProxyType(dict(self._known_configs))

    @property
    def cached_keys(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._plaintext)

    @property
    def decrypt_count(self) -> int:
        with self._lock:
            return self._decrypt_count
