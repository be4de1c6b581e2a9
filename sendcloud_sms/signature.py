"""Request signing.

Two schemes are available behind the ``Signer`` protocol:

- ``DoubleMd5Signer`` (default): the legacy scheme.  Concatenate ``key +
  value`` for every parameter in key order, wrap with the secret on both
  ends, MD5 it, then MD5 the lowercase hex digest again.
- ``SendCloudSigner``: the gateway's published scheme,
  ``md5(secret&k1=v1&k2=v2&secret)``.

Both are pure functions of ``(secret, params)``.  The ``signature`` key is
never part of its own input.
"""

from __future__ import annotations

import hashlib
from enum import Enum
from typing import Mapping, Protocol

SIGNATURE_KEY = "signature"


def _md5_hex(source: str) -> str:
    return hashlib.md5(source.encode("utf-8")).hexdigest()


def _unsigned_items(params: Mapping[str, str]) -> list[tuple[str, str]]:
    return sorted((k, v) for k, v in params.items() if k != SIGNATURE_KEY)


def canonicalize(params: Mapping[str, str]) -> str:
    """``k1v1k2v2...`` over the key-sorted, unsigned parameters."""
    return "".join(key + value for key, value in _unsigned_items(params))


class Signer(Protocol):
    def sign(self, secret: str, params: Mapping[str, str]) -> str: ...


class DoubleMd5Signer:
    """Legacy double-MD5 signature; kept bit-for-bit for compatibility."""

    def sign(self, secret: str, params: Mapping[str, str]) -> str:
        source = secret + canonicalize(params) + secret
        return _md5_hex(_md5_hex(source))


class SendCloudSigner:
    """Signature as documented at https://www.sendcloud.net/doc/sms/api/."""

    def sign(self, secret: str, params: Mapping[str, str]) -> str:
        joined = "&".join(f"{key}={value}" for key, value in _unsigned_items(params))
        return _md5_hex(f"{secret}&{joined}&{secret}")


class SignatureScheme(str, Enum):
    DOUBLE_MD5 = "double_md5"
    SENDCLOUD = "sendcloud"


_SIGNERS: dict[SignatureScheme, type] = {
    SignatureScheme.DOUBLE_MD5: DoubleMd5Signer,
    SignatureScheme.SENDCLOUD: SendCloudSigner,
}


def get_signer(scheme: SignatureScheme | str = SignatureScheme.DOUBLE_MD5) -> Signer:
    """Instantiate the signer for *scheme*.

    Raises:
        ValueError: If *scheme* is not a known ``SignatureScheme`` value.
    """
    return _SIGNERS[SignatureScheme(scheme)]()


def sign(secret: str, params: Mapping[str, str]) -> str:
    """Sign *params* with the default (double-MD5) scheme."""
    return DoubleMd5Signer().sign(secret, params)


def sign_request(
    secret: str,
    params: Mapping[str, str],
    signer: Signer | None = None,
) -> dict[str, str]:
    """Return a copy of *params* with ``signature`` appended last."""
    signed = {key: value for key, value in params.items() if key != SIGNATURE_KEY}
    signed[SIGNATURE_KEY] = (signer or DoubleMd5Signer()).sign(secret, signed)
    return signed
