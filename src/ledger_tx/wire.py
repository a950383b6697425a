"""
Wire message envelopes.

A message is the encoded list ``[type, *payload]``. This module only tags
and untags payloads; framing, sockets and peer handling live elsewhere.
"""

from __future__ import annotations
import logging
from enum import IntEnum
from typing import Any, Iterable, List, Tuple

from .codec import big_endian_to_int, decode, encode
from .runtime.errors import MalformedEncoding
from .transaction import Transaction

logger = logging.getLogger(__name__)


class MessageType(IntEnum):
    """Peer message types."""
    HELLO = 0x00
    DISCONNECT = 0x01
    PING = 0x02
    PONG = 0x03
    GET_PEERS = 0x10
    PEERS = 0x11
    TRANSACTIONS = 0x12
    BLOCKS = 0x13
    GET_CHAIN = 0x14
    NOT_IN_CHAIN = 0x15
    GET_TRANSACTIONS = 0x16


def encode_message(message_type: MessageType, payloads: Iterable[Any] = ()) -> bytes:
    """Encode a tagged message."""
    return encode([int(message_type), *payloads])


def decode_message(data: bytes) -> Tuple[MessageType, List[Any]]:
    """
    Decode a tagged message.

    Raises:
        MalformedEncoding: If the bytes do not decode or the type is unknown
    """
    item = decode(data)
    if not isinstance(item, list) or not item or not isinstance(item[0], bytes):
        raise MalformedEncoding("Message must be a list starting with its type")
    code = big_endian_to_int(item[0])
    try:
        message_type = MessageType(code)
    except ValueError:
        raise MalformedEncoding(f"Unknown message type: {code:#x}") from None
    return message_type, item[1:]


def announce_transactions(transactions: Iterable[Transaction]) -> bytes:
    """Build a transaction announcement carrying each transaction's fields."""
    return encode_message(MessageType.TRANSACTIONS, [tx.raw for tx in transactions])


def transactions_from_message(data: bytes, **kwargs: Any) -> List[Transaction]:
    """
    Extract transactions from an announcement.

    Raises:
        MalformedEncoding: If the message is not a transaction announcement
        ValidationError: If an entry is not a well-formed transaction
    """
    message_type, payloads = decode_message(data)
    if message_type is not MessageType.TRANSACTIONS:
        raise MalformedEncoding(f"Expected TRANSACTIONS message, got {message_type.name}")
    transactions = [Transaction.from_bytes(encode(fields), **kwargs) for fields in payloads]
    logger.debug(f"Received {len(transactions)} transactions")
    return transactions


__all__ = [
    "MessageType",
    "announce_transactions",
    "decode_message",
    "encode_message",
    "transactions_from_message",
]
