"""
ledger-tx

Canonical encoding, hashing, signing and validation of account-based ledger
transactions.
"""

from .runtime.errors import *
from .codec import RLPCodec, decode, encode
from .crypto import (
    Hasher,
    Keccak256Hasher,
    Secp256k1PrivateKey,
    Secp256k1SignatureEngine,
    SignatureEngine,
    keccak256,
    public_key_to_address,
)
from .fees import FeeSchedule, FeeScheduleConfig, fee_for, get_fee_schedule
from .transaction import Transaction, TransactionType, TransactionView
from .storage import InMemoryTransactionStore, TransactionStore, load_transaction, save_transaction
from .wire import MessageType, announce_transactions, decode_message, encode_message, transactions_from_message

__version__ = "0.1.0"
