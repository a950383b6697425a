"""
Interfaces for the cryptographic collaborators of a transaction record.

The record depends only on these, so tests and alternative backends can
substitute their own implementations.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Tuple


class Hasher(ABC):
    """Deterministic 256-bit digest plus address derivation."""

    @abstractmethod
    def digest(self, data: bytes) -> bytes:
        """
        Hash a byte string.

        Args:
            data: Input bytes

        Returns:
            32-byte digest
        """
        pass

    @abstractmethod
    def address(self, public_key_bytes: bytes) -> bytes:
        """
        Derive the 20-byte account address of a public key.

        Args:
            public_key_bytes: Public key as returned by the signature engine

        Returns:
            20-byte address
        """
        pass


class SignatureEngine(ABC):
    """Elliptic-curve signing with public key recovery."""

    @abstractmethod
    def sign(self, digest: bytes, private_key: bytes) -> Tuple[int, int, int]:
        """
        Sign a digest.

        Args:
            digest: 32-byte message digest
            private_key: 32-byte private key

        Returns:
            ``(r, s, v)`` where ``v`` identifies the public key to recover

        Raises:
            InvalidKey: If the private key is not a valid scalar
        """
        pass

    @abstractmethod
    def recover_public_key(self, digest: bytes, r: int, s: int, v: int) -> Optional[bytes]:
        """
        Recover the signer's public key.

        Returns:
            Public key bytes, or None if no key can be recovered
        """
        pass

    @abstractmethod
    def verify(self, public_key: bytes, digest: bytes, r: int, s: int) -> bool:
        """Check ``(r, s)`` against a public key and digest."""
        pass


__all__ = ["Hasher", "SignatureEngine"]
