"""
Layered configuration for the host application.

A ConfigurableEnvironment holds an ordered list of named property sources;
the first source containing a key wins. Decrypted configs are appended last
so they only fill in what nothing else sets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, Iterator, List, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from encryptedconfig.shared.infrastructure.config import Settings


class PropertySource(ABC):
    """A named key/value layer."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the value for key, or None when absent."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        pass

    def __contains__(self, key: object) -> bool:
        return key in self.keys()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class MapPropertySource(PropertySource):
    def __init__(self, name: str, source: Mapping[str, Any]):
        super().__init__(name)
        self.source = dict(source)

    def get(self, key: str) -> Any:
        return self.source.get(key)

    def keys(self) -> List[str]:
        return list(self.source)

    def __contains__(self, key: object) -> bool:
        return key in self.source


class CompositePropertySource(PropertySource):
    """
    Several property sources presented as one.

    Members are consulted in the order they were added.
    """

    def __init__(self, name: str):
        super().__init__(name)
        self.sources: List[PropertySource] = []

    def add(self, source: PropertySource) -> None:
        self.sources.append(source)

    def get(self, key: str) -> Any:
        for source in self.sources:
            if key in source:
                return source.get(key)
        return None

    def keys(self) -> List[str]:
        seen = {}
        for source in self.sources:
            for key in source.keys():
                seen.setdefault(key, None)
        return list(seen)

    def __contains__(self, key: object) -> bool:
        return any(key in source for source in self.sources)

    def __len__(self) -> int:
        return len(self.sources)


class PropertySources:
    """Ordered property sources; index 0 has the highest precedence."""

    def __init__(self, sources: Optional[Iterable[PropertySource]] = None):
        self._sources: List[PropertySource] = []
        for source in sources or []:
            self.add_last(source)

    def add_first(self, source: PropertySource) -> None:
        self.remove(source.name)
        self._sources.insert(0, source)

    def add_last(self, source: PropertySource) -> None:
        self.remove(source.name)
        self._sources.append(source)

    def remove(self, name: str) -> Optional[PropertySource]:
        for i, source in enumerate(self._sources):
            if source.name == name:
                return self._sources.pop(i)
        return None

    def get(self, name: str) -> Optional[PropertySource]:
        for source in self._sources:
            if source.name == name:
                return source
        return None

    def names(self) -> List[str]:
        return [source.name for source in self._sources]

    def __iter__(self) -> Iterator[PropertySource]:
        return iter(list(self._sources))

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, name: object) -> bool:
        return any(source.name == name for source in self._sources)


class ConfigurableEnvironment:
    """Active profiles plus the layered property sources of an application."""

    def __init__(
        self,
        active_profiles: Sequence[str] = (),
        property_sources: Optional[PropertySources] = None,
    ):
        self.active_profiles = tuple(active_profiles)
        self.property_sources = property_sources if property_sources is not None else PropertySources()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ConfigurableEnvironment":
        return cls(active_profiles=settings.active_profiles)

    def get_property(self, key: str, default: Any = None) -> Any:
        for source in self.property_sources:
            if key in source:
                return source.get(key)
        return default
