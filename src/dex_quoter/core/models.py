"""Data models for quote requests, transport requests, and quote outcomes."""

from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QuoteAction(StrEnum):
    """Direction of the quoted leg relative to the scanned pair."""

    TOKEN_TO_PAIR = "TokentoPair"
    PAIR_TO_TOKEN = "PairtoToken"


class ErrorClassification(StrEnum):
    """Taxonomy label attached to every failed quote call."""

    TIMEOUT = "Timeout"
    HTTP_ERROR = "HttpError"
    PARSE_ERROR = "ParseError"
    BUILD_ERROR = "BuildError"
    UNSUPPORTED_PROVIDER = "UnsupportedProvider"


class Token(BaseModel):
    """
    Token reference on a single chain.

    Attributes
    ----------
    address : str
        Token contract address (or mint on non-EVM chains)
    decimals : int
        Number of decimal places

    """

    model_config = ConfigDict(frozen=True)

    address: str = Field(min_length=1)
    decimals: int = Field(ge=0)


class Chain(BaseModel):
    """
    Chain the quote is requested on.

    Attributes
    ----------
    id : int
        Numeric chain identifier (e.g., 1 for Ethereum)
    name : str
        Chain name (e.g., 'ethereum', 'bsc')

    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class QuoteRequest(BaseModel):
    """
    Canonical, provider-independent quote request.

    Attributes
    ----------
    source_token : Token
        Token being sold
    dest_token : Token
        Token being bought
    amount_in : Decimal
        Human-readable amount of the source token
    chain : Chain
        Chain the swap is quoted on
    provider : str
        Provider identifier (case-insensitive)
    action : QuoteAction
        Route direction, selects sub-modes on some providers
    wallet_address : str | None
        Sender address, falls back to the settings wallet when absent
    slippage_percent : Decimal
        Slippage tolerance in percent for providers that take one
    slippage_bps : int
        Slippage tolerance in basis points for the fallback service
    correlation_id : str | None
        Opaque caller token, passed through untouched
    source_symbol : str | None
        Display symbol of the source token
    dest_symbol : str | None
        Display symbol of the destination token

    """

    model_config = ConfigDict(frozen=True)

    source_token: Token
    dest_token: Token
    amount_in: Decimal = Field(gt=0)
    chain: Chain
    provider: str = Field(min_length=1)
    action: QuoteAction = QuoteAction.TOKEN_TO_PAIR
    wallet_address: str | None = None
    slippage_percent: Decimal = Decimal("0.3")
    slippage_bps: int = 100
    correlation_id: str | None = None
    source_symbol: str | None = None
    dest_symbol: str | None = None


class TransportRequest(BaseModel):
    """
    Provider-specific HTTP request description.

    Attributes
    ----------
    url : str
        Absolute URL including the query string
    method : str
        HTTP method
    headers : dict[str, str] | None
        Extra request headers
    body : dict | None
        JSON body for POST requests

    """

    model_config = ConfigDict(frozen=True)

    url: str
    method: str = "GET"
    headers: dict[str, str] | None = None
    body: dict[str, Any] | None = None


class QuoteResult(BaseModel):
    """
    Normalized quote returned by every provider.

    Attributes
    ----------
    provider_label : str
        Display label of the provider (e.g., 'KYBER')
    provider : str
        Provider identifier the request was made with
    amount_out : Decimal
        Output amount, already divided by 10^dest_decimals
    fee_estimate_usd : Decimal
        Swap fee estimate in USD (chain default when the provider gives none)
    source_url : str
        Provider URL the quote was fetched from (before proxy rewrite)
    correlation_id : str | None
        Caller token copied from the request
    source_token : Token | None
        Token sold
    dest_token : Token | None
        Token bought

    """

    provider_label: str
    provider: str = ""
    amount_out: Decimal
    fee_estimate_usd: Decimal
    source_url: str = ""
    correlation_id: str | None = None
    source_token: Token | None = None
    dest_token: Token | None = None


class QuoteError(BaseModel):
    """
    Structured failure of a single quote call.

    Attributes
    ----------
    status_code : int
        HTTP status, 0 when no transport response was received
    classification : ErrorClassification
        Taxonomy label
    message : str
        Human-readable diagnostic
    provider_label : str
        Display label of the provider
    provider_deep_link : str | None
        Link to the same trade on the provider's own app
    status_token : str | None
        Raw transport status token (e.g., 'timeout'), passed through verbatim
    response_text : str | None
        Raw response body when one was received
    correlation_id : str | None
        Caller token copied from the request

    """

    status_code: int = 0
    classification: ErrorClassification
    message: str
    provider_label: str
    provider_deep_link: str | None = None
    status_token: str | None = None
    response_text: str | None = None
    correlation_id: str | None = None


QuoteOutcome = QuoteResult | QuoteError
