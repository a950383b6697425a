"""
Cryptographic primitives for ledger transactions.

Provides Keccak-256 hashing, address derivation and SECP256K1 signing with
public key recovery.
"""

from .base import Hasher, SignatureEngine
from .hashes import Keccak256Hasher, keccak256, public_key_to_address
from .secp256k1 import (
    Secp256k1PrivateKey,
    Secp256k1SignatureEngine,
    private_key_to_public_key,
    recover_public_key,
    sign,
    verify,
)

__all__ = [
    "Hasher",
    "SignatureEngine",
    "Keccak256Hasher",
    "keccak256",
    "public_key_to_address",
    "Secp256k1PrivateKey",
    "Secp256k1SignatureEngine",
    "private_key_to_public_key",
    "recover_public_key",
    "sign",
    "verify",
]
