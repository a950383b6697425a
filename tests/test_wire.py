"""
Wire envelope tests.
"""

import pytest

from ledger_tx.codec import encode
from ledger_tx.runtime.errors import InvalidFieldCount, MalformedEncoding
from ledger_tx.wire import (
    MessageType,
    announce_transactions,
    decode_message,
    encode_message,
    transactions_from_message,
)


class TestEnvelope:

    def test_ping(self):
        assert encode_message(MessageType.PING) == b"\xc1\x02"
        assert decode_message(b"\xc1\x02") == (MessageType.PING, [])

    def test_hello_zero_type(self):
        message_type, payloads = decode_message(encode_message(MessageType.HELLO, [b"node-1"]))
        assert message_type is MessageType.HELLO
        assert payloads == [b"node-1"]

    def test_unknown_type(self):
        with pytest.raises(MalformedEncoding):
            decode_message(encode([0x7f]))

    @pytest.mark.parametrize("item", [b"\x12", [], [[b"\x12"]]])
    def test_not_an_envelope(self, item):
        with pytest.raises(MalformedEncoding):
            decode_message(encode(item))


class TestTransactionAnnouncement:

    def test_roundtrip(self, signed_tx, unsigned_tx):
        message = announce_transactions([signed_tx])
        received = transactions_from_message(message)
        assert len(received) == 1
        assert received[0].serialize() == signed_tx.serialize()
        assert received[0].verify_signature()

    def test_starts_with_transactions_type(self, signed_tx):
        message_type, payloads = decode_message(announce_transactions([signed_tx, signed_tx]))
        assert message_type is MessageType.TRANSACTIONS
        assert payloads == [signed_tx.raw, signed_tx.raw]

    def test_wrong_message_type(self):
        with pytest.raises(MalformedEncoding):
            transactions_from_message(encode_message(MessageType.BLOCKS, []))

    def test_bad_entry(self):
        message = encode_message(MessageType.TRANSACTIONS, [[b"", b""]])
        with pytest.raises(InvalidFieldCount):
            transactions_from_message(message)
