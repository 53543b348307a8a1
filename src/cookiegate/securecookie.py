"""Authenticated, encrypted cookie values.

Values are serialised as JSON, encrypted with AES-GCM under a block key and
signed with a timestamped HMAC under a hash key. The logical cookie name is
mixed into both the signature salt and the AEAD associated data, so a token
issued for one cookie never validates as another.
"""

from __future__ import annotations

import dataclasses as dc
import hashlib
import os
import secrets
import typing

import msgspec
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from itsdangerous import BadData, TimestampSigner
from itsdangerous.encoding import base64_decode, base64_encode
from msgspec import json as msgspec_json

if typing.TYPE_CHECKING:  # pragma: no cover
    import collections.abc as cabc

__all__ = [
    "DEFAULT_MAX_AGE",
    "DEFAULT_MAX_LENGTH",
    "CookieDecodeError",
    "CookieEncodeError",
    "SecureCookieCodec",
    "SigningKeys",
]

DEFAULT_MAX_AGE = 86400 * 30
DEFAULT_MAX_LENGTH = 4096

_BLOCK_KEY_SIZES = frozenset({16, 24, 32})
_NONCE_SIZE = 12
_TOKEN_SEGMENTS = 3

_ENCODER = msgspec_json.Encoder()
_DECODER = msgspec_json.Decoder(dict[str, str])


class CookieEncodeError(Exception):
    """Raised when a payload cannot be turned into a cookie value."""


class CookieDecodeError(Exception):
    """Raised when a cookie value fails validation."""


@dc.dataclass(frozen=True, slots=True)
class SigningKeys:
    """Key material for :class:`SecureCookieCodec`.

    Parameters
    ----------
    hash_key : bytes
        Secret for the HMAC signature. Must not be empty.
    block_key : bytes or None
        AES key of 16, 24 or 32 bytes. ``None`` disables encryption and
        leaves the payload signed but readable.
    """

    hash_key: bytes
    block_key: bytes | None = None

    def __post_init__(self) -> None:
        if not self.hash_key:
            raise ValueError("hash key must not be empty")
        if self.block_key is not None and len(self.block_key) not in _BLOCK_KEY_SIZES:
            raise ValueError(
                f"block key must be 16, 24 or 32 bytes, got {len(self.block_key)}"
            )

    @classmethod
    def generate(cls, hash_size: int = 64, block_size: int = 32) -> SigningKeys:
        """Return a fresh random key pair."""
        return cls(secrets.token_bytes(hash_size), secrets.token_bytes(block_size))


class SecureCookieCodec:
    """Encode and decode tamper-evident cookie values."""

    def __init__(
        self,
        keys: SigningKeys,
        *,
        max_age: int | None = DEFAULT_MAX_AGE,
        max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        """Create a codec bound to ``keys``.

        Parameters
        ----------
        keys : SigningKeys
            Hash and block keys shared by every request.
        max_age : int or None
            Maximum token age in seconds. ``None`` disables the expiry check.
        max_length : int
            Longest token accepted or produced.
        """
        self._keys = keys
        self._aead = AESGCM(keys.block_key) if keys.block_key is not None else None
        self.max_age = max_age
        self.max_length = max_length

    def _signer(self, name: str) -> TimestampSigner:
        return TimestampSigner(
            self._keys.hash_key,
            salt=f"cookiegate.securecookie.{name}",
            digest_method=hashlib.sha256,
        )

    def encode(self, name: str, payload: cabc.Mapping[str, str]) -> str:
        """Return a signed token for ``payload`` under the logical ``name``.

        Raises
        ------
        CookieEncodeError
            If the payload cannot be serialised or the token is too long.
        """
        try:
            blob = _ENCODER.encode(dict(payload))
        except (TypeError, ValueError) as exc:
            raise CookieEncodeError(f"cannot serialise cookie payload: {exc}") from exc
        if self._aead is not None:
            nonce = os.urandom(_NONCE_SIZE)
            blob = nonce + self._aead.encrypt(nonce, blob, name.encode())
        token = self._signer(name).sign(base64_encode(blob)).decode("ascii")
        if len(token) > self.max_length:
            raise CookieEncodeError("cookie value is too long")
        return token

    def decode(self, name: str, token: str) -> dict[str, str]:
        """Validate ``token`` and return its payload.

        The signature and age are checked before anything is decrypted or
        parsed.

        Raises
        ------
        CookieDecodeError
            If the token is malformed, forged, issued for another name or
            expired, or if its payload is not a mapping of strings.
        """
        if len(token) > self.max_length:
            raise CookieDecodeError("cookie value is too long")
        try:
            raw = token.encode("ascii")
        except UnicodeEncodeError:
            raise CookieDecodeError("cookie value is not ASCII") from None
        segments = raw.split(b".")
        if len(segments) != _TOKEN_SEGMENTS or not all(
            _is_canonical(seg) for seg in segments
        ):
            raise CookieDecodeError("cookie value is malformed")
        try:
            data = self._signer(name).unsign(raw, max_age=self.max_age)
            blob = base64_decode(data)
        except BadData as exc:
            raise CookieDecodeError(str(exc)) from exc
        if self._aead is not None:
            if len(blob) <= _NONCE_SIZE:
                raise CookieDecodeError("cookie value is truncated")
            nonce, ciphertext = blob[:_NONCE_SIZE], blob[_NONCE_SIZE:]
            try:
                blob = self._aead.decrypt(nonce, ciphertext, name.encode())
            except InvalidTag:
                raise CookieDecodeError("cookie value failed decryption") from None
        try:
            return _DECODER.decode(blob)
        except msgspec.DecodeError as exc:
            raise CookieDecodeError(f"invalid cookie payload: {exc}") from exc


def _is_canonical(segment: bytes) -> bool:
    """Return whether ``segment`` is the canonical base64url form of its bytes."""
    try:
        return bool(segment) and base64_encode(base64_decode(segment)) == segment
    except BadData:
        return False
