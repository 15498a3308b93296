"""Request signing for authenticated providers."""

from dex_quoter.auth.signer import (
    ApiCredential,
    HmacSigner,
    SignedHeaders,
    load_credential_pools,
    select_credential,
    sign,
)

__all__ = [
    "ApiCredential",
    "HmacSigner",
    "SignedHeaders",
    "load_credential_pools",
    "select_credential",
    "sign",
]
