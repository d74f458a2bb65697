"""
Resolution pipeline: decrypt-once cache, layer building and the resolver.

Exports:
    - Decryptor: Protocol for the external decryption service
    - PassthroughDecryptor: Development stand-in returning ciphertext as is
    - DecryptCache: Decrypt-once plaintext cache
    - LayerBuilder / YamlLayerParser: Plaintext to property sources
    - EncryptedConfigResolver: Runs a resolution pass against an environment
"""

from encryptedconfig.application.decrypt_cache import DecryptCache, Decryptor, PassthroughDecryptor
from encryptedconfig.application.layer_builder import LayerBuilder, LayerParser, YamlLayerParser, flatten
from encryptedconfig.application.resolver import COMPOSITE_PREFIX, EncryptedConfigResolver

__all__ = [
    "Decryptor",
    "PassthroughDecryptor",
    "DecryptCache",
    "LayerParser",
    "YamlLayerParser",
    "LayerBuilder",
    "flatten",
    "COMPOSITE_PREFIX",
    "EncryptedConfigResolver",
]
