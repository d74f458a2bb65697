"""Host layered configuration: property sources and the environment holding them."""

from encryptedconfig.environment.property_sources import (
    CompositePropertySource,
    ConfigurableEnvironment,
    MapPropertySource,
    PropertySource,
    PropertySources,
)

__all__ = [
    "PropertySource",
    "MapPropertySource",
    "CompositePropertySource",
    "PropertySources",
    "ConfigurableEnvironment",
]
