"""Provider strategies for the supported DEX aggregators."""

from collections.abc import Mapping
from typing import Any

from dex_quoter.core.registry import ProviderRegistry
from dex_quoter.data import load_provider_table

# Import all strategies to trigger catalogue registration
from dex_quoter.providers.base import (
    BaseQuoteStrategy,
    QuoteContext,
    create_strategies,
    get_strategy_classes,
    register_strategy,
)
from dex_quoter.providers.kyber import KyberStrategy
from dex_quoter.providers.odos import OdosStrategy
from dex_quoter.providers.okx import OkxStrategy
from dex_quoter.providers.oneinch import OneInchStrategy
from dex_quoter.providers.zerox import ZeroXStrategy


def build_default_registry(table: Mapping[str, Mapping[str, Any]] | None = None) -> ProviderRegistry:
    """
    Build the process registry from the bootstrap table.

    Parameters
    ----------
    table : Mapping[str, Mapping[str, Any]] | None
        Bootstrap table, providers.yaml when None

    Returns
    -------
    ProviderRegistry
        Registry with every configured provider and alias

    """
    return ProviderRegistry.from_table(table if table is not None else load_provider_table(), create_strategies())


__all__ = [
    "BaseQuoteStrategy",
    "KyberStrategy",
    "OdosStrategy",
    "OkxStrategy",
    "OneInchStrategy",
    "QuoteContext",
    "ZeroXStrategy",
    "build_default_registry",
    "create_strategies",
    "get_strategy_classes",
    "register_strategy",
]
