"""
SECP256K1 signing and public key recovery.

Signatures are ``(r, s, v)`` with the recovery byte pinned to

    v = 27 + recovery_index

where ``recovery_index`` is the parity of the y coordinate of the signing
nonce point R (0 = even, 1 = odd). Only ``v`` in {27, 28} is accepted; the
rare case of an R whose x coordinate exceeds the curve order is not
representable and never produced.

Public keys are the 64-byte raw concatenation ``x || y``.
"""

from __future__ import annotations
import hashlib
import logging
import os
from typing import Optional, Tuple

from ecdsa import SigningKey, VerifyingKey, SECP256k1
from ecdsa import numbertheory
from ecdsa.ecdsa import InvalidPointError
from ecdsa.keys import BadDigestError, BadSignatureError, MalformedPointError
from ecdsa.util import sigdecode_strings, sigencode_strings

from ..runtime.errors import ErrorCode, InvalidKey, LedgerError, ValidationError
from .base import SignatureEngine

logger = logging.getLogger(__name__)

CURVE_ORDER = SECP256k1.order

V_OFFSET = 27
PRIVATE_KEY_LENGTH = 32
DIGEST_LENGTH = 32
SCALAR_LENGTH = 32


def _scalar_in_range(value: int) -> bool:
    return 1 <= value < CURVE_ORDER


def _scalar_bytes(value: int) -> bytes:
    return value.to_bytes(SCALAR_LENGTH, "big")


def _check_private_key(private_key: bytes) -> None:
    if not isinstance(private_key, (bytes, bytearray)):
        raise InvalidKey(f"Private key must be bytes, got {type(private_key).__name__}")
    if len(private_key) != PRIVATE_KEY_LENGTH:
        raise InvalidKey(f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(private_key)}")
    if not _scalar_in_range(int.from_bytes(private_key, "big")):
        raise InvalidKey("Private key scalar is outside [1, n-1]")


def private_key_to_public_key(private_key: bytes) -> bytes:
    """
    Derive the raw public key for a private key.

    Args:
        private_key: 32-byte private key

    Returns:
        64-byte raw public key

    Raises:
        InvalidKey: If the key is malformed or out of range
    """
    _check_private_key(private_key)
    signing_key = SigningKey.from_string(bytes(private_key), curve=SECP256k1, hashfunc=hashlib.sha256)
    return signing_key.get_verifying_key().to_string()


def recover_public_key(digest: bytes, r: int, s: int, v: int) -> Optional[bytes]:
    """
    Recover the public key that produced a signature.

    Args:
        digest: 32-byte message digest that was signed
        r: Signature r component
        s: Signature s component
        v: Recovery byte (27 or 28)

    Returns:
        64-byte raw public key, or None if the signature does not determine one
    """
    if not (_scalar_in_range(r) and _scalar_in_range(s)):
        return None
    if v not in (V_OFFSET, V_OFFSET + 1) or len(digest) != DIGEST_LENGTH:
        return None

    try:
        # Candidates are ordered by the parity of R.y, even first
        candidates = VerifyingKey.from_public_key_recovery_with_digest(
            (_scalar_bytes(r), _scalar_bytes(s)),
            digest,
            SECP256k1,
            hashfunc=hashlib.sha256,
            sigdecode=sigdecode_strings,
        )
    except numbertheory.Error:
        logger.debug("Signature r is not the x coordinate of a curve point")
        return None
    except (InvalidPointError, MalformedPointError, BadSignatureError) as e:
        logger.debug(f"Signature does not determine a public key: {e}")
        return None
    if len(candidates) != 2:
        return None
    return candidates[v - V_OFFSET].to_string()


def verify(public_key: bytes, digest: bytes, r: int, s: int) -> bool:
    """
    Verify an ECDSA signature.

    Args:
        public_key: 64-byte raw (or 65-byte 0x04 prefixed) public key
        digest: 32-byte message digest
        r: Signature r component
        s: Signature s component

    Returns:
        True if the signature is valid
    """
    if not (_scalar_in_range(r) and _scalar_in_range(s)):
        return False
    if len(digest) != DIGEST_LENGTH:
        return False
    try:
        verifying_key = VerifyingKey.from_string(bytes(public_key), curve=SECP256k1, hashfunc=hashlib.sha256)
        return verifying_key.verify_digest(
            (_scalar_bytes(r), _scalar_bytes(s)), digest, sigdecode=sigdecode_strings
        )
    except (BadSignatureError, BadDigestError, MalformedPointError):
        return False


def sign(digest: bytes, private_key: bytes) -> Tuple[int, int, int]:
    """
    Sign a digest with RFC 6979 deterministic nonces.

    Args:
        digest: 32-byte message digest
        private_key: 32-byte private key

    Returns:
        ``(r, s, v)``

    Raises:
        InvalidKey: If the private key is malformed or out of range
        ValidationError: If the digest is not 32 bytes
    """
    _check_private_key(private_key)
    if len(digest) != DIGEST_LENGTH:
        raise ValidationError(f"Digest must be {DIGEST_LENGTH} bytes, got {len(digest)}")

    signing_key = SigningKey.from_string(bytes(private_key), curve=SECP256k1, hashfunc=hashlib.sha256)
    r_bytes, s_bytes = signing_key.sign_digest_deterministic(
        digest, hashfunc=hashlib.sha256, sigencode=sigencode_strings
    )
    r = int.from_bytes(r_bytes, "big")
    s = int.from_bytes(s_bytes, "big")

    public_key = signing_key.get_verifying_key().to_string()
    for recovery_index in (0, 1):
        v = V_OFFSET + recovery_index
        if recover_public_key(digest, r, s, v) == public_key:
            return r, s, v
    # Only reachable when R.x >= n, which has negligible probability
    raise LedgerError("Signature has no recovery byte in {27, 28}", ErrorCode.INTERNAL)


class Secp256k1SignatureEngine(SignatureEngine):
    """Signature engine backed by the ecdsa library."""

    def sign(self, digest: bytes, private_key: bytes) -> Tuple[int, int, int]:
        return sign(digest, private_key)

    def recover_public_key(self, digest: bytes, r: int, s: int, v: int) -> Optional[bytes]:
        return recover_public_key(digest, r, s, v)

    def verify(self, public_key: bytes, digest: bytes, r: int, s: int) -> bool:
        return verify(public_key, digest, r, s)


class Secp256k1PrivateKey:
    """
    SECP256K1 private key.

    Thin holder around 32 key bytes with helpers for deriving the public key
    and account address.
    """

    def __init__(self, private_key_bytes: Optional[bytes] = None):
        """
        Initialize private key.

        Args:
            private_key_bytes: 32-byte private key; a random one is generated if omitted
        """
        if private_key_bytes is None:
            private_key_bytes = os.urandom(PRIVATE_KEY_LENGTH)
            while not _scalar_in_range(int.from_bytes(private_key_bytes, "big")):
                private_key_bytes = os.urandom(PRIVATE_KEY_LENGTH)
        _check_private_key(private_key_bytes)
        self._private_key_bytes = bytes(private_key_bytes)
        self._public_key_bytes = private_key_to_public_key(self._private_key_bytes)

    @classmethod
    def generate(cls) -> Secp256k1PrivateKey:
        """Generate a new random private key."""
        return cls()

    @classmethod
    def from_hex(cls, private_key_hex: str) -> Secp256k1PrivateKey:
        """Create private key from hex string."""
        if private_key_hex.startswith(("0x", "0X")):
            private_key_hex = private_key_hex[2:]
        try:
            private_key_bytes = bytes.fromhex(private_key_hex)
        except ValueError as e:
            raise InvalidKey(f"Invalid hex string: {e}", cause=e)
        return cls(private_key_bytes)

    def public_key(self) -> bytes:
        """Get the 64-byte raw public key."""
        return self._public_key_bytes

    def address(self) -> bytes:
        """Get the 20-byte account address."""
        from .hashes import public_key_to_address
        return public_key_to_address(self._public_key_bytes)

    def sign(self, digest: bytes) -> Tuple[int, int, int]:
        """Sign a 32-byte digest, returning ``(r, s, v)``."""
        return sign(digest, self._private_key_bytes)

    def to_bytes(self) -> bytes:
        """Get private key as bytes."""
        return self._private_key_bytes

    def to_hex(self) -> str:
        """Get private key as hex string."""
        return self._private_key_bytes.hex()

    def __repr__(self) -> str:
        return f"Secp256k1PrivateKey(public={self._public_key_bytes.hex()[:16]}...)"


__all__ = [
    "CURVE_ORDER",
    "V_OFFSET",
    "Secp256k1PrivateKey",
    "Secp256k1SignatureEngine",
    "private_key_to_public_key",
    "recover_public_key",
    "sign",
    "verify",
]
