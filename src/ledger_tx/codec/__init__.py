"""
Canonical binary codec.

Recursive length prefix encoding of nested byte-string lists, backed by the
``rlp`` package in strict mode. Exactly one byte sequence is accepted for
each logical value; peers rely on this for hashing and signing.

Key components:
- writer.py: ``encode`` and the integer-to-bytes helper
- reader.py: strict ``decode`` and the bytes-to-integer helper
"""

from .reader import big_endian_to_int, decode
from .writer import encode, int_to_big_endian


class RLPCodec:
    """Codec object for injection into components that encode and decode."""

    @staticmethod
    def encode(item) -> bytes:
        return encode(item)

    @staticmethod
    def decode(data: bytes):
        return decode(data)


__all__ = [
    "RLPCodec",
    "big_endian_to_int",
    "decode",
    "encode",
    "int_to_big_endian",
]
