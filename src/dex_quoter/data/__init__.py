"""Static chain and provider configuration."""

from dex_quoter.data.loader import (
    get_all_supported_chains,
    get_chain_config,
    get_chain_id,
    get_fallback_fee,
    load_chains,
    load_provider_table,
)

__all__ = [
    "get_all_supported_chains",
    "get_chain_config",
    "get_chain_id",
    "get_fallback_fee",
    "load_chains",
    "load_provider_table",
]
