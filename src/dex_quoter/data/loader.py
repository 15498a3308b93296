"""Static chain and provider table loader."""

from decimal import Decimal
from functools import cache
from pathlib import Path
from typing import Any

import yaml

_DATA_DIR = Path(__file__).parent


def _load_yaml(filename: str) -> dict[str, Any]:
    path = _DATA_DIR / filename
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@cache
def load_chains() -> dict[str, Any]:
    """
    Load the static chain table from chains.yaml.

    Returns
    -------
    dict[str, Any]
        Chain configuration including chain ids and fallback fees

    """
    return _load_yaml("chains.yaml")


@cache
def load_provider_table() -> dict[str, dict[str, Any]]:
    """
    Load the registry bootstrap table from providers.yaml.

    Returns
    -------
    dict[str, dict[str, Any]]
        ``{provider: {strategy, proxy, allow_fallback, alias_of}}``

    """
    # YAML keys such as 1inch/0x must stay strings
    return {str(name): row or {} for name, row in _load_yaml("providers.yaml").get("providers", {}).items()}


def get_all_supported_chains() -> list[str]:
    """
    Get list of all configured chain names.

    Returns
    -------
    list[str]
        Chain names

    """
    return list(load_chains()["chains"].keys())


def get_chain_config(chain: str) -> dict[str, Any]:
    """
    Get configuration for a specific chain.

    Parameters
    ----------
    chain : str
        Chain name (e.g., 'ethereum', 'bsc')

    Returns
    -------
    dict[str, Any]
        Chain configuration

    Raises
    ------
    KeyError
        If chain is not found in configuration

    """
    return load_chains()["chains"][chain.lower()]


def get_chain_id(chain: str) -> int:
    """Get the numeric chain id for a chain name."""
    return int(get_chain_config(chain)["chain_id"])


def get_fallback_fee(chain: str) -> Decimal:
    """
    Get the static fallback swap fee for a chain.

    Parameters
    ----------
    chain : str
        Chain name

    Returns
    -------
    Decimal
        Fee in USD, the table default for unknown chains

    """
    chains = load_chains()
    entry = chains["chains"].get(str(chain).lower())
    if entry is None:
        return Decimal(str(chains.get("default_fallback_fee_usd", "0")))
    return Decimal(str(entry["fallback_fee_usd"]))
