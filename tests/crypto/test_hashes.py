"""
Keccak-256 and address derivation tests.
"""

import pytest

from ledger_tx.crypto.hashes import Keccak256Hasher, keccak256, public_key_to_address
from ledger_tx.runtime.errors import InvalidKey

G_X = "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
G_Y = "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"


class TestKeccak256:

    def test_empty_input(self):
        assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"

    def test_differs_from_sha3_256(self):
        import hashlib
        assert keccak256(b"") != hashlib.sha3_256(b"").digest()

    def test_deterministic_and_sized(self):
        assert keccak256(b"ledger") == keccak256(bytearray(b"ledger"))
        assert len(keccak256(b"ledger")) == 32


class TestAddress:

    def test_generator_point_address(self):
        public_key = bytes.fromhex(G_X + G_Y)
        assert public_key_to_address(public_key).hex() == "7e5f4552091a69125d5dfcb7b8c2659029395bdf"

    def test_prefixed_form(self):
        public_key = bytes.fromhex(G_X + G_Y)
        assert public_key_to_address(b"\x04" + public_key) == public_key_to_address(public_key)

    def test_invalid_length(self):
        with pytest.raises(InvalidKey):
            public_key_to_address(b"\x02" + bytes.fromhex(G_X))

    def test_hasher_object(self):
        hasher = Keccak256Hasher()
        public_key = bytes.fromhex(G_X + G_Y)
        assert hasher.digest(b"") == keccak256(b"")
        assert hasher.address(public_key) == public_key_to_address(public_key)
