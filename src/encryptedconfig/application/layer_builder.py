"""
Turns decrypted config bytes into property sources.

Decrypted configs are YAML, optionally split into documents scoped to a
profile the Spring way:

    datasource:
      url: jdbc:mysql://default
    ---
    spring:
      profiles: prod
    datasource:
      url: jdbc:mysql://prod

Functions:
- flatten: Nested mappings to dotted keys
- YamlLayerParser: Select documents for a profile and build a MapPropertySource
- LayerBuilder: Parse, log, and skip empty results
"""

from typing import Any, Dict, List, Optional, Protocol

import structlog
import yaml

from encryptedconfig.environment.property_sources import MapPropertySource, PropertySource
from encryptedconfig.shared.domain.exceptions import LayerParseError

logger = structlog.get_logger(__name__)

DEFAULT_PROFILE_LABEL = "default"


class LayerParser(Protocol):
    """Structured-text parser for decrypted configs."""

    def parse(self, name: str, plaintext: bytes, profile: Optional[str]) -> Optional[PropertySource]:
        ...


def flatten(data: Any, prefix: str = "", into: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Flatten nested mappings and lists into dotted property keys.

    Example:
        >>> flatten({"a": {"b": 1, "c": [2, 3]}})
        {'a.b': 1, 'a.c[0]': 2, 'a.c[1]': 3}
    """
    result = {} if into is None else into
    if isinstance(data, dict):
        for key, value in data.items():
            child = f"{prefix}.{key}" if prefix else str(key)
            flatten(value, child, result)
    elif isinstance(data, list) and prefix:
        for i, value in enumerate(data):
            flatten(value, f"{prefix}[{i}]", result)
    elif prefix:
        result[prefix] = data
    return result


def _document_profiles(document: Dict[str, Any], name: str) -> List[str]:
    spring = document.get("spring")
    if not isinstance(spring, dict):
        return []

    declared = spring.get("profiles")
    if declared is None:
        config = spring.get("config")
        activate = config.get("activate") if isinstance(config, dict) else None
        declared = activate.get("on-profile") if isinstance(activate, dict) else None

    if declared is None:
        return []
    if isinstance(declared, dict):
        raise LayerParseError(
            f"Profile selector in decrypted config {name} must be a string or list, got a mapping",
            context={"name": name},
        )
    if isinstance(declared, list):
        return [str(p).strip() for p in declared]
    return [p.strip() for p in str(declared).split(",") if p.strip()]


class YamlLayerParser:
    """
    Parses decrypted YAML into one property source per profile.

    With no profile only unscoped documents are used; with a profile only
    documents scoped to it. Later documents override earlier ones.
    """

    def parse(self, name: str, plaintext: bytes, profile: Optional[str]) -> Optional[PropertySource]:
        try:
            content = plaintext.decode("utf-8")
            documents = [d for d in yaml.safe_load_all(content) if d is not None]
        except (UnicodeDecodeError, yaml.YAMLError) as e:
            raise LayerParseError(
                f"Invalid YAML in decrypted config {name}: {e}",
                context={"name": name, "profile": profile},
            ) from e

        properties: Dict[str, Any] = {}
        for document in documents:
            if not isinstance(document, dict):
                raise LayerParseError(
                    f"Decrypted config {name} must contain mappings, got {type(document).__name__}",
                    context={"name": name, "profile": profile},
                )
            scoped_to = _document_profiles(document, name)
            if profile is None and scoped_to:
                continue
            if profile is not None and profile not in scoped_to:
                continue
            flatten(document, into=properties)

        if not properties:
            return None
        return MapPropertySource(f"{name}:{profile or DEFAULT_PROFILE_LABEL}", properties)


class LayerBuilder:
    """Builds property sources from plaintext, skipping empty results."""

    def __init__(self, parser: LayerParser = None):
        self.parser = parser or YamlLayerParser()

    def build(self, plaintext: bytes, name: str, profile: Optional[str] = None) -> Optional[PropertySource]:
        """
        Parse plaintext into a property source.

        Returns:
            The property source, or None when the parser produced nothing

        Raises:
            LayerParseError: If the parser fails
        """
        try:
            source = self.parser.parse(name, plaintext, profile)
        except LayerParseError:
            raise
        except (OSError, ValueError) as e:
            raise LayerParseError(
                "Could not load metatron encrypted config",
                context={"name": name, "profile": profile},
            ) from e

        if source is None:
            logger.warning("property_source_empty", filename=name, profile=profile)
            return None

        logger.info("property_source_loaded", filename=name, profile=profile)
        return source
