"""
Tests for the layered configuration model.
"""

from encryptedconfig.environment.property_sources import (
    CompositePropertySource,
    ConfigurableEnvironment,
    MapPropertySource,
    PropertySources,
)
from encryptedconfig.shared.infrastructure.config import Settings


class TestCompositePropertySource:
    """Test first-match lookup across members."""

    def test_first_member_wins(self):
        composite = CompositePropertySource("metatron")
        composite.add(MapPropertySource("a", {"key": "first"}))
        composite.add(MapPropertySource("b", {"key": "second", "other": 1}))

        assert composite.get("key") == "first"
        assert composite.get("other") == 1
        assert composite.get("missing") is None
        assert composite.keys() == ["key", "other"]
        assert "other" in composite
        assert len(composite) == 2

    def test_falsy_values_are_present(self):
        composite = CompositePropertySource("metatron")
        composite.add(MapPropertySource("a", {"flag": False}))
        composite.add(MapPropertySource("b", {"flag": True}))

        assert composite.get("flag") is False


class TestPropertySources:
    """Test precedence ordering."""

    def test_add_first_and_last(self):
        sources = PropertySources()
        sources.add_last(MapPropertySource("b", {}))
        sources.add_first(MapPropertySource("a", {}))
        sources.add_last(MapPropertySource("c", {}))

        assert sources.names() == ["a", "b", "c"]
        assert len(sources) == 3
        assert "b" in sources

    def test_adding_same_name_replaces(self):
        sources = PropertySources([MapPropertySource("a", {"v": 1}), MapPropertySource("b", {})])
        sources.add_last(MapPropertySource("a", {"v": 2}))

        assert sources.names() == ["b", "a"]
        assert sources.get("a").get("v") == 2

    def test_remove_and_get_missing(self):
        sources = PropertySources([MapPropertySource("a", {})])

        assert sources.remove("a").name == "a"
        assert sources.remove("a") is None
        assert sources.get("a") is None


class TestConfigurableEnvironment:
    """Test property lookup by precedence."""

    def test_get_property_by_precedence(self):
        environment = ConfigurableEnvironment(
            property_sources=PropertySources(
                [MapPropertySource("high", {"key": "high"}), MapPropertySource("low", {"key": "low", "x": 1})]
            )
        )

        assert environment.get_property("key") == "high"
        assert environment.get_property("x") == 1
        assert environment.get_property("missing", "fallback") == "fallback"

    def test_from_settings(self):
        settings = Settings(_env_file=None, spring_profiles_active="prod, local,")

        environment = ConfigurableEnvironment.from_settings(settings)

        assert environment.active_profiles == ("prod", "local")
        assert len(environment.property_sources) == 0
