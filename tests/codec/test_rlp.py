"""
Canonical codec tests.

Known-answer encodings for each prefix range, strict rejection of
non-canonical input, and round-trips of transaction-shaped lists.
"""

import pytest

from ledger_tx.codec import big_endian_to_int, decode, encode, int_to_big_endian
from ledger_tx.runtime.errors import EncodingError, MalformedEncoding

LOREM = b"Lorem ipsum dolor sit amet, consectetur adipisicing elit"


def nested_lists(depth):
    """Encoding of ``depth`` empty lists each wrapped in the next."""
    data = b"\xc0"
    for _ in range(depth - 1):
        if len(data) <= 55:
            data = bytes([0xC0 + len(data)]) + data
        else:
            length = int_to_big_endian(len(data))
            data = bytes([0xF7 + len(length)]) + length + data
    return data


class TestEncodeKnownAnswers:
    """Encodings fixed by the wire format."""

    @pytest.mark.parametrize("item, expected", [
        (b"", "80"),
        (b"\x00", "00"),
        (b"\x0f", "0f"),
        (b"\x7f", "7f"),
        (b"\x80", "8180"),
        (b"dog", "83646f67"),
        ([], "c0"),
        ([b"cat", b"dog"], "c88363617483646f67"),
        (0, "80"),
        (15, "0f"),
        (1024, "820400"),
        ([[], [[]], [[], [[]]]], "c7c0c1c0c3c0c1c0"),
    ])
    def test_short_forms(self, item, expected):
        assert encode(item).hex() == expected

    def test_long_string(self):
        assert len(LOREM) == 56
        assert encode(LOREM) == b"\xb8\x38" + LOREM

    def test_string_of_55_bytes_uses_short_form(self):
        value = b"a" * 55
        assert encode(value) == b"\xb7" + value

    def test_long_list(self):
        items = [b"a" * 30, b"b" * 30]
        payload = b"\x9e" + b"a" * 30 + b"\x9e" + b"b" * 30
        assert encode(items) == b"\xf8" + bytes([len(payload)]) + payload

    def test_tuple_encodes_like_list(self):
        assert encode((b"cat", b"dog")) == encode([b"cat", b"dog"])

    def test_large_length_prefix(self):
        value = b"x" * 1024
        assert encode(value)[:3] == b"\xb9\x04\x00"


class TestEncodeRejects:
    """Only byte strings, non-negative ints and lists are encodable."""

    @pytest.mark.parametrize("item", [-1, "text", 1.5, None, True, {"a": 1}])
    def test_unsupported(self, item):
        with pytest.raises(EncodingError):
            encode(item)

    def test_unsupported_deep_inside_list(self):
        item = [b"ok"]
        for _ in range(3000):
            item = [item]
        item.append(-1)
        with pytest.raises(EncodingError):
            encode(item)

    def test_nesting_too_deep(self):
        item = []
        for _ in range(3000):
            item = [item]
        with pytest.raises(EncodingError):
            encode(item)


class TestDecode:
    """Decoding of well-formed input."""

    def test_roundtrip_transaction_fields(self):
        fields = [b"", b"\x04\xa8\x17\xc8\x00", b"R\x08", b"\x35" * 20, b"\x01", LOREM * 3,
                  b"\x1b", b"\x11" * 32, b"\x22" * 32]
        assert decode(encode(fields)) == fields

    def test_nested(self):
        item = [b"a", [b"b", [b"c", []]], b""]
        assert decode(encode(item)) == item

    def test_accepts_bytearray(self):
        assert decode(bytearray(b"\x83dog")) == b"dog"


class TestDecodeMalformed:
    """Every grammar violation raises MalformedEncoding."""

    @pytest.mark.parametrize("data", [
        b"",
        b"\x83do",            # truncated string payload
        b"\xb8",              # missing long length
        b"\xb9\x04",          # truncated long length
        b"\xc8\x83cat\x83do",  # truncated list payload
        b"\x83dog\x00",       # trailing byte
        b"\x81\x05",          # single small byte wrapped in a prefix
        b"\xb8\x05hello",     # long form for a short string
        b"\xb9\x00\x38" + LOREM,  # length with leading zero
        b"\xf8\x01\x80",      # long form for a short list
        b"\x81",              # prefix with no payload
    ])
    def test_rejected(self, data):
        with pytest.raises(MalformedEncoding):
            decode(data)

    def test_non_bytes_input(self):
        with pytest.raises(MalformedEncoding):
            decode("83646f67")

    def test_shallow_nesting_decodes(self):
        value = decode(nested_lists(10))
        for _ in range(9):
            assert len(value) == 1
            value = value[0]
        assert value == []

    def test_nesting_too_deep(self):
        with pytest.raises(MalformedEncoding):
            decode(nested_lists(3000))

    def test_error_code(self):
        with pytest.raises(MalformedEncoding) as exc_info:
            decode(b"\x83do")
        assert exc_info.value.to_dict()["code"] == 102


class TestIntegerHelpers:

    def test_zero_is_empty(self):
        assert int_to_big_endian(0) == b""
        assert big_endian_to_int(b"") == 0

    def test_minimal(self):
        assert int_to_big_endian(256) == b"\x01\x00"
        assert big_endian_to_int(b"\x00\x01\x00") == 256

    def test_arbitrary_precision(self):
        value = 2**300 + 7
        assert big_endian_to_int(int_to_big_endian(value)) == value

    def test_negative(self):
        with pytest.raises(EncodingError):
            int_to_big_endian(-5)
