"""Environment-driven configuration and per-call scan settings."""

import os
from decimal import Decimal

from pydantic import BaseModel, Field

DEFAULT_FALLBACK_URL = "https://bzvwrjfhuefn.up.railway.app/swap"
DEFAULT_SCAN_SPEED_SECONDS = Decimal("4")


def _as_bool(value: str | None, default: bool = False) -> bool:
    """Parse a truthy/falsey string into a boolean."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_decimal(value: str | None, default: Decimal) -> Decimal:
    if value is None or not value.strip():
        return default
    return Decimal(value.strip())


class ScanSettings(BaseModel):
    """
    Settings snapshot taken at the start of a quote call.

    Attributes
    ----------
    scan_speed_seconds : Decimal
        Per-provider call timeout in seconds
    wallet_address : str | None
        Default sender address
    gas_price_gwei : Decimal
        Current gas price, forwarded to the fallback service

    """

    scan_speed_seconds: Decimal = Field(default=DEFAULT_SCAN_SPEED_SECONDS, gt=0)
    wallet_address: str | None = None
    gas_price_gwei: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def timeout_ms(self) -> int:
        """Per-call timeout in milliseconds."""
        return int((self.scan_speed_seconds * 1000).to_integral_value())


class EngineConfig(BaseModel):
    """
    Process-wide engine configuration.

    Attributes
    ----------
    proxy_prefix : str | None
        URL prefix of the CORS relay used by proxy-enabled providers
    fallback_url : str
        Endpoint of the fallback aggregation service
    dedupe_inflight : bool
        Share one transport call between concurrent identical requests
    fallback_for_unknown : bool
        Route providers without a strategy to the fallback service
    fallback_on_error : bool
        Consult the fallback service once when a fallback-allowed provider times out or errors
    credentials_file : str | None
        YAML file holding credential pools for signed providers
    log_level : str
        Logging level name

    """

    proxy_prefix: str | None = None
    fallback_url: str = DEFAULT_FALLBACK_URL
    dedupe_inflight: bool = False
    fallback_for_unknown: bool = False
    fallback_on_error: bool = False
    credentials_file: str | None = None
    log_level: str = "WARNING"


def load_scan_settings() -> ScanSettings:
    """
    Read the scan settings from the environment.

    Called once per quote call so a changed timeout or wallet is picked up
    by the next call, never in the middle of one.
    """
    return ScanSettings(
        scan_speed_seconds=_as_decimal(os.getenv("DEX_QUOTER_SCAN_SPEED"), DEFAULT_SCAN_SPEED_SECONDS),
        wallet_address=os.getenv("DEX_QUOTER_WALLET") or None,
        gas_price_gwei=_as_decimal(os.getenv("DEX_QUOTER_GAS_GWEI"), Decimal("0")),
    )


def load_engine_config() -> EngineConfig:
    """Read the engine configuration from the environment."""
    return EngineConfig(
        proxy_prefix=os.getenv("DEX_QUOTER_PROXY_PREFIX") or None,
        fallback_url=os.getenv("DEX_QUOTER_FALLBACK_URL", DEFAULT_FALLBACK_URL),
        dedupe_inflight=_as_bool(os.getenv("DEX_QUOTER_DEDUPE_INFLIGHT")),
        fallback_for_unknown=_as_bool(os.getenv("DEX_QUOTER_FALLBACK_FOR_UNKNOWN")),
        fallback_on_error=_as_bool(os.getenv("DEX_QUOTER_FALLBACK_ON_ERROR")),
        credentials_file=os.getenv("DEX_QUOTER_CREDENTIALS_FILE") or None,
        log_level=os.getenv("DEX_QUOTER_LOG_LEVEL", "WARNING").upper(),
    )
