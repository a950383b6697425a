"""
Shared fixtures: deterministic keys and a signed reference transaction.
"""

import pytest

from ledger_tx.crypto.secp256k1 import Secp256k1PrivateKey
from ledger_tx.fees import FeeSchedule, FeeScheduleConfig
from ledger_tx.transaction import Transaction

# Well-known test key whose address is 0x9d8a62f656a8d1615c1294fd71e9cfb3e4855a4f
PRIVATE_KEY = bytes.fromhex("46" * 32)
RECIPIENT = bytes.fromhex("3535353535353535353535353535353535353535")


@pytest.fixture
def private_key():
    return PRIVATE_KEY


@pytest.fixture
def key_pair():
    return Secp256k1PrivateKey(PRIVATE_KEY)


@pytest.fixture
def fee_schedule():
    return FeeSchedule(FeeScheduleConfig())


@pytest.fixture
def unsigned_tx(fee_schedule):
    """Value transfer draft with a gas limit that exactly covers the base fee."""
    return Transaction(
        [9, 20 * 10**9, 500, RECIPIENT, 10**18, b""],
        fee_schedule=fee_schedule,
    )


@pytest.fixture
def signed_tx(unsigned_tx, private_key):
    unsigned_tx.sign(private_key)
    return unsigned_tx
