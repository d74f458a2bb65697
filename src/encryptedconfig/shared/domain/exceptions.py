"""
Domain exceptions for encrypted config resolution.

Follows the "Fail Fast" principle: every condition below aborts the
resolution pass. All errors inherit from EncryptedConfigError and carry a
context dict with the offending filename, namespace, version or path.
"""


class EncryptedConfigError(Exception):
    """Base class for all encrypted config exceptions."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.context = context or {}


class MalformedFilenameError(EncryptedConfigError):
    """Raised when a config or policy filename does not follow the versioned naming protocol."""

    pass


class SecretLoaderError(EncryptedConfigError):
    """Raised when a backend cannot enumerate its storage medium."""

    pass


class NoMatchingPolicyError(SecretLoaderError):
    """Raised when no policy artifact carries the version of a config artifact."""

    pass


class PropertySourceError(EncryptedConfigError):
    """Raised when decrypted configs cannot be turned into property sources."""

    pass


class UnregisteredConfigError(PropertySourceError):
    """Raised when the decrypt cache is queried for a config it was never given."""

    pass


class DecryptionError(PropertySourceError):
    """Raised when reading or decrypting an encrypted policy pair fails."""

    pass


class LayerParseError(PropertySourceError):
    """Raised when decrypted bytes cannot be parsed into a property source."""

    pass
