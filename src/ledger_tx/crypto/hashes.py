"""
Keccak-256 hashing and address derivation.

Keccak-256 is the original Keccak submission (0x01 padding), not the
standardised SHA3-256.
"""

from Crypto.Hash import keccak

from ..runtime.errors import InvalidKey
from .base import Hasher

ADDRESS_LENGTH = 20


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash.

    Args:
        data: Input data to hash

    Returns:
        32-byte digest
    """
    return keccak.new(digest_bits=256).update(bytes(data)).digest()


def public_key_to_address(public_key_bytes: bytes) -> bytes:
    """
    Derive an account address from a public key.

    Args:
        public_key_bytes: Raw 64-byte public key, or the 65-byte form starting with 0x04

    Returns:
        Last 20 bytes of the Keccak-256 digest of the raw key

    Raises:
        InvalidKey: If the key has neither form
    """
    if len(public_key_bytes) == 65 and public_key_bytes[0] == 0x04:
        public_key_bytes = public_key_bytes[1:]
    elif len(public_key_bytes) != 64:
        raise InvalidKey(f"Invalid public key length: {len(public_key_bytes)}")
    return keccak256(public_key_bytes)[-ADDRESS_LENGTH:]


class Keccak256Hasher(Hasher):
    """Hash object for injection into the transaction record."""

    def digest(self, data: bytes) -> bytes:
        return keccak256(data)

    def address(self, public_key_bytes: bytes) -> bytes:
        return public_key_to_address(public_key_bytes)


__all__ = ["ADDRESS_LENGTH", "Keccak256Hasher", "keccak256", "public_key_to_address"]
