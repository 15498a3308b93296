"""Base quote strategy with shared context and normalization helpers."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from dex_quoter.config import ScanSettings
from dex_quoter.core.amounts import from_minor_units, parse_usd, to_minor_units
from dex_quoter.core.errors import RequestBuildError, ResponseParseError
from dex_quoter.core.models import QuoteRequest, QuoteResult, TransportRequest
from dex_quoter.data import get_fallback_fee

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class QuoteContext(BaseModel):
    """
    Auxiliary context handed to request builders and response normalizers.

    Attributes
    ----------
    request : QuoteRequest
        Canonical request
    amount_in_minor : int
        Input amount in the source token's minor units
    wallet_address : str | None
        Sender (request wallet, else the settings wallet)
    chain_id : int
        Numeric chain identifier
    chain_name : str
        Lowercase chain name
    gas_price_gwei : Decimal
        Gas price from the settings snapshot
    signer : Any
        Signer capability for authenticated providers (None otherwise)
    source_url : str
        URL the request was built for, filled in before normalization

    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    request: QuoteRequest
    amount_in_minor: int
    wallet_address: str | None = None
    chain_id: int
    chain_name: str
    gas_price_gwei: Decimal = Decimal("0")
    signer: Any = None
    source_url: str = ""

    @classmethod
    def from_request(
        cls,
        request: QuoteRequest,
        settings: ScanSettings,
        signer: Any = None,
    ) -> "QuoteContext":
        """Build the context for one call from the request and a settings snapshot."""
        return cls(
            request=request,
            amount_in_minor=to_minor_units(request.amount_in, request.source_token.decimals),
            wallet_address=request.wallet_address or settings.wallet_address,
            chain_id=request.chain.id,
            chain_name=request.chain.name.lower(),
            gas_price_gwei=settings.gas_price_gwei,
            signer=signer,
        )

    @property
    def source_address(self) -> str:
        """Lowercased source token address."""
        return self.request.source_token.address.lower()

    @property
    def dest_address(self) -> str:
        """Lowercased destination token address."""
        return self.request.dest_token.address.lower()


def read_path(node: Any, path: Sequence[str | int]) -> Any:
    """
    Traverse nested dicts/lists using a path of keys and indices.

    Returns None as soon as a step is missing.
    """
    current = node
    for part in path:
        if isinstance(part, int):
            if isinstance(current, list) and 0 <= part < len(current):
                current = current[part]
            else:
                return None
        elif isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return None
    return current


class BaseQuoteStrategy(ABC):
    """
    Abstract base class for provider strategies.

    Every provider is one subclass implementing the request builder and the
    response normalizer. Adding a provider means adding a subclass.

    Attributes
    ----------
    name : str
        Strategy identifier (must be set in subclass)
    label : str
        Display label used in results and diagnostics

    """

    name: ClassVar[str] = ""
    label: ClassVar[str] = ""

    def __init__(self) -> None:
        if not self.name:
            msg = f"{self.__class__.__name__} must define 'name' attribute"
            raise ValueError(msg)

    @abstractmethod
    def build_request(self, ctx: QuoteContext) -> TransportRequest:
        """
        Build the transport request for one quote.

        Raises
        ------
        RequestBuildError
            If required canonical fields are absent

        """
        ...

    @abstractmethod
    def parse_response(self, raw: Any, ctx: QuoteContext) -> QuoteResult:
        """
        Normalize a raw provider response.

        Raises
        ------
        ResponseParseError
            If the expected output amount is absent

        """
        ...

    def deep_link(self, request: QuoteRequest) -> str | None:
        """Link to the trade on the provider's own app, None when not constructible."""
        return None

    def require_wallet(self, ctx: QuoteContext) -> str:
        """Return the sender address or fail the build."""
        if not ctx.wallet_address:
            msg = f"{self.label} requires a wallet address"
            raise RequestBuildError(msg)
        return ctx.wallet_address

    def require(self, raw: Any, path: Sequence[str | int], what: str) -> Any:
        """Read a mandatory field, raising a provider-specific parse error when absent."""
        value = read_path(raw, path)
        if value is None:
            msg = f"Invalid {self.label} response: {what} not found"
            raise ResponseParseError(msg)
        return value

    def make_result(self, ctx: QuoteContext, raw_amount: Any, fee_usd: Any = None) -> QuoteResult:
        """
        Assemble the canonical result.

        Parameters
        ----------
        ctx : QuoteContext
            Call context
        raw_amount : Any
            Output amount in destination minor units
        fee_usd : Any
            Provider fee estimate, the chain fallback fee is used when missing or zero

        Returns
        -------
        QuoteResult
            Normalized quote

        """
        request = ctx.request
        fee = parse_usd(fee_usd)
        return QuoteResult(
            provider_label=self.label,
            provider=request.provider,
            amount_out=from_minor_units(raw_amount, request.dest_token.decimals),
            fee_estimate_usd=fee if fee is not None else get_fallback_fee(ctx.chain_name),
            source_url=ctx.source_url,
            correlation_id=request.correlation_id,
            source_token=request.source_token,
            dest_token=request.dest_token,
        )


_STRATEGIES: dict[str, type[BaseQuoteStrategy]] = {}


def register_strategy(strategy_class: type[BaseQuoteStrategy]) -> type[BaseQuoteStrategy]:
    """
    Decorator adding a strategy variant to the catalogue.

    Parameters
    ----------
    strategy_class : type[BaseQuoteStrategy]
        Strategy class to register

    Returns
    -------
    type[BaseQuoteStrategy]
        The class itself (for decorator chaining)

    Examples
    --------
    >>> @register_strategy
    ... class KyberStrategy(BaseQuoteStrategy):
    ...     name = "kyber"

    """
    if not getattr(strategy_class, "name", ""):
        msg = f"Strategy {strategy_class.__name__} must define 'name' attribute"
        raise ValueError(msg)

    _STRATEGIES[strategy_class.name] = strategy_class
    return strategy_class


def get_strategy_classes() -> dict[str, type[BaseQuoteStrategy]]:
    """Return the registered strategy classes by name."""
    return dict(_STRATEGIES)


def create_strategies() -> dict[str, BaseQuoteStrategy]:
    """Instantiate every registered strategy."""
    return {name: strategy_class() for name, strategy_class in _STRATEGIES.items()}
