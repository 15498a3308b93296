"""Tests for HMAC signing and credential pools."""

import base64
import hashlib
import hmac
import random
from datetime import UTC, datetime

import pytest

from dex_quoter.auth.signer import (
    ApiCredential,
    HmacSigner,
    iso_timestamp,
    load_credential_pools,
    select_credential,
    sign,
)
from dex_quoter.core.errors import CredentialPoolError


def test_sign_matches_reference_hmac():
    """Test signatures are base64 HMAC-SHA256."""
    expected = base64.b64encode(hmac.new(b"secret", b"payload", hashlib.sha256).digest()).decode()
    assert sign("secret", "payload") == expected


def test_sign_request_payload():
    """Test the canonical string is timestamp + METHOD + path ? query."""
    credential = ApiCredential(api_key="k", secret_key="s", passphrase="p")
    signer = HmacSigner([credential])

    signed = signer.sign_request(
        "get",
        "/api/v5/dex/aggregator/quote",
        "amount=1",
        timestamp="2024-01-01T00:00:00.000Z",
    )

    assert signed.timestamp == "2024-01-01T00:00:00.000Z"
    assert signed.signature == sign("s", "2024-01-01T00:00:00.000ZGET/api/v5/dex/aggregator/quote?amount=1")
    assert signed.api_key == "k"
    assert signed.passphrase == "p"


def test_sign_request_without_query():
    """Test no '?' is appended for an empty query."""
    signer = HmacSigner([ApiCredential(api_key="k", secret_key="s")])

    signed = signer.sign_request("GET", "/path", timestamp="T")

    assert signed.signature == sign("s", "TGET/path")


def test_select_credential():
    """Test selection draws from the pool and refuses an empty one."""
    pool = [ApiCredential(api_key=f"k{i}", secret_key="s") for i in range(3)]

    picked = {select_credential(pool, random.Random(seed)).api_key for seed in range(20)}

    assert picked <= {"k0", "k1", "k2"}
    assert len(picked) > 1

    with pytest.raises(CredentialPoolError):
        select_credential([])


def test_empty_signer_fails():
    """Test signing with an empty pool raises."""
    with pytest.raises(CredentialPoolError):
        HmacSigner([]).sign_request("GET", "/path")


def test_iso_timestamp():
    """Test timestamps carry milliseconds and a Z suffix."""
    stamp = iso_timestamp(datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=UTC))
    assert stamp == "2024-05-06T07:08:09.123Z"


def test_credential_secrets_are_hidden():
    """Test secrets do not leak through repr."""
    credential = ApiCredential(api_key="k", secret_key="top-secret", passphrase="pp")
    assert "top-secret" not in repr(credential)


def test_load_credential_pools(tmp_path):
    """Test credential pools load from YAML."""
    path = tmp_path / "credentials.yaml"
    path.write_text(
        "OKX:\n"
        "  - api_key: a\n"
        "    secret_key: s1\n"
        "    passphrase: p1\n"
        "  - api_key: b\n"
        "    secret_key: s2\n"
        "    passphrase: p2\n"
    )

    pools = load_credential_pools(path)

    assert list(pools) == ["okx"]
    assert [c.api_key for c in pools["okx"]] == ["a", "b"]
    assert pools["okx"][1].secret_key.get_secret_value() == "s2"
