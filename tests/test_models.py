"""Tests for data models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from dex_quoter.core.models import (
    Chain,
    ErrorClassification,
    QuoteAction,
    QuoteError,
    QuoteRequest,
    QuoteResult,
    Token,
    TransportRequest,
)


def test_token_model():
    """Test Token model creation and validation."""
    token = Token(address="0xabc", decimals=18)
    assert token.address == "0xabc"
    assert token.decimals == 18

    with pytest.raises(ValidationError):
        Token(address="", decimals=18)

    with pytest.raises(ValidationError):
        Token(address="0xabc", decimals=-1)


def test_quote_request_defaults():
    """Test QuoteRequest default values."""
    request = QuoteRequest(
        source_token=Token(address="0xa", decimals=18),
        dest_token=Token(address="0xb", decimals=6),
        amount_in=Decimal("1.5"),
        chain=Chain(id=1, name="ethereum"),
        provider="kyber",
    )

    assert request.action == QuoteAction.TOKEN_TO_PAIR
    assert request.action == "TokentoPair"
    assert request.wallet_address is None
    assert request.slippage_percent == Decimal("0.3")
    assert request.slippage_bps == 100
    assert request.correlation_id is None


def test_quote_request_rejects_non_positive_amount():
    """Test that amount_in must be positive."""
    for amount in ("0", "-1"):
        with pytest.raises(ValidationError):
            QuoteRequest(
                source_token=Token(address="0xa", decimals=18),
                dest_token=Token(address="0xb", decimals=6),
                amount_in=Decimal(amount),
                chain=Chain(id=1, name="ethereum"),
                provider="kyber",
            )


def test_quote_request_is_immutable():
    """Test that requests cannot be mutated after creation."""
    request = QuoteRequest(
        source_token=Token(address="0xa", decimals=18),
        dest_token=Token(address="0xb", decimals=6),
        amount_in=Decimal("1"),
        chain=Chain(id=1, name="ethereum"),
        provider="kyber",
    )

    with pytest.raises(ValidationError):
        request.provider = "odos"


def test_transport_request_defaults():
    """Test TransportRequest defaults to a bare GET."""
    request = TransportRequest(url="https://api.example/quote")
    assert request.method == "GET"
    assert request.headers is None
    assert request.body is None


def test_quote_outcome_serialization():
    """Test JSON serialization of results and errors."""
    result = QuoteResult(
        provider_label="KYBER",
        amount_out=Decimal("2500"),
        fee_estimate_usd=Decimal("3.2"),
        correlation_id="row-1",
    )
    error = QuoteError(
        status_code=404,
        classification=ErrorClassification.HTTP_ERROR,
        message="KYBER: [HTTP 404] Not Found - Resource does not exist",
        provider_label="KYBER",
    )

    result_data = result.model_dump(mode="json")
    error_data = error.model_dump(mode="json")

    assert result_data["amount_out"] == "2500"
    assert result_data["correlation_id"] == "row-1"
    assert error_data["classification"] == "HttpError"
    assert error_data["provider_deep_link"] is None
