"""Tests for the provider registry."""

import pytest
from pydantic import ValidationError

from dex_quoter.core.errors import UnsupportedProviderError
from dex_quoter.core.registry import ProviderDescriptor, ProviderRegistry
from dex_quoter.providers import KyberStrategy, OdosStrategy, build_default_registry, get_strategy_classes


def test_strategy_catalogue():
    """Test that strategies register on import."""
    registered = get_strategy_classes()

    assert set(registered) == {"kyber", "1inch", "odos", "0x", "okx"}
    assert registered["kyber"] is KyberStrategy


def test_default_registry_contents():
    """Test the bootstrap table is loaded in order."""
    registry = build_default_registry()

    assert registry.list_providers() == ["kyber", "kyberswap", "1inch", "lifi", "odos", "0x", "okx"]
    assert len(registry) == 7
    assert registry.resolve("0x").proxy_enabled is True
    assert registry.resolve("kyber").fallback_allowed is False


def test_resolve_is_case_insensitive():
    """Test lookups ignore case and surrounding whitespace."""
    registry = build_default_registry()

    assert registry.resolve("KYBER") is registry.resolve("kyber")
    assert registry.resolve(" Odos ").strategy.name == "odos"
    assert "OKX" in registry


def test_alias_resolves_to_target():
    """Test legacy aliases resolve to the target descriptor."""
    registry = build_default_registry()

    assert registry.get("kyberswap").alias_of == "kyber"
    assert registry.resolve("kyberswap") is registry.resolve("kyber")
    assert registry.resolve("LiFi").strategy.name == "1inch"


def test_unknown_provider():
    """Test unknown identifiers resolve to None."""
    registry = build_default_registry()

    assert registry.resolve("notarealdex") is None
    assert registry.get("notarealdex") is None
    assert "notarealdex" not in registry

    with pytest.raises(UnsupportedProviderError, match="notarealdex"):
        registry.require("notarealdex")


def test_register_overwrites_and_keeps_snapshots():
    """Test registration swaps in a new mapping."""
    registry = ProviderRegistry()
    first = registry.register("Kyber", ProviderDescriptor(strategy=KyberStrategy()))
    snapshot = registry._entries

    second = registry.register("kyber", ProviderDescriptor(strategy=OdosStrategy(), proxy_enabled=True))

    assert first.key == "kyber"
    assert registry.resolve("kyber") is second
    assert snapshot["kyber"] is first
    assert len(registry) == 1


def test_register_rejects_invalid_entries():
    """Test empty names and empty descriptors are refused."""
    registry = ProviderRegistry()

    with pytest.raises(ValueError):
        registry.register("  ", ProviderDescriptor(strategy=KyberStrategy()))

    with pytest.raises(ValueError):
        registry.register("empty", ProviderDescriptor())


def test_dangling_alias_resolves_to_none():
    """Test an alias whose target is missing resolves to None."""
    registry = ProviderRegistry()
    registry.register_alias("old", "gone")

    assert registry.get("old") is not None
    assert registry.resolve("old") is None


def test_alias_chain_is_followed():
    """Test aliases of aliases resolve to the final target."""
    registry = ProviderRegistry()
    registry.register("kyber", ProviderDescriptor(strategy=KyberStrategy()))
    registry.register_alias("kyberswap", "kyber")
    registry.register_alias("ks", "KyberSwap")

    assert registry.resolve("ks").strategy.name == "kyber"


def test_from_table_rejects_unknown_strategy():
    """Test a table row naming a missing strategy fails loudly."""
    with pytest.raises(ValueError, match="Unknown strategy"):
        ProviderRegistry.from_table({"paraswap": {"strategy": "paraswap"}}, {"kyber": KyberStrategy()})


def test_from_table_defaults_strategy_to_key():
    """Test the strategy name defaults to the provider key."""
    registry = ProviderRegistry.from_table({"Kyber": {"proxy": True}}, {"kyber": KyberStrategy()})

    descriptor = registry.resolve("kyber")
    assert descriptor.proxy_enabled is True
    assert descriptor.fallback_allowed is False
    assert isinstance(descriptor.strategy, KyberStrategy)


def test_descriptor_requires_a_quote_strategy():
    """Test descriptors only accept objects implementing the strategy interface."""
    with pytest.raises(ValidationError):
        ProviderDescriptor(strategy=object())

    descriptor = ProviderDescriptor(strategy=OdosStrategy())
    assert descriptor.strategy.label == "ODOS"
    assert ProviderDescriptor(alias_of="kyber").strategy is None
