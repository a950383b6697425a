"""
Recursive length prefix decoding.

Strict mode of the ``rlp`` package: every accepted input is the canonical
encoding of the value it decodes to, so ``encode(decode(data)) == data``.
Any rejection, including nesting too deep to decode, surfaces as
``MalformedEncoding`` so callers handling peer data never see another
exception type.
"""

import logging
from typing import List, Union

import rlp
from rlp.exceptions import DecodingError

from ..runtime.errors import MalformedEncoding

logger = logging.getLogger(__name__)

Decoded = Union[bytes, List["Decoded"]]


def big_endian_to_int(value: bytes) -> int:
    """Interpret bytes as an unsigned big-endian integer (empty is zero)."""
    return int.from_bytes(value, "big")


def decode(data: bytes) -> Decoded:
    """
    Decode a single item occupying all of ``data``.

    Args:
        data: Encoded bytes

    Returns:
        ``bytes`` or a (nested) ``list`` of them

    Raises:
        MalformedEncoding: On empty, truncated, trailing, non-canonical or
            too deeply nested input
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedEncoding(f"Cannot decode object of type {type(data).__name__}")
    data = bytes(data)
    if not data:
        raise MalformedEncoding("Cannot decode empty input")
    try:
        return rlp.decode(data, strict=True)
    except DecodingError as e:
        logger.debug(f"Rejected encoding of {len(data)} bytes: {e}")
        raise MalformedEncoding(str(e), details={"length": len(data)}) from None
    except IndexError:
        raise MalformedEncoding("Truncated input", details={"length": len(data)}) from None
    except RecursionError:
        logger.warning(f"Rejected encoding of {len(data)} bytes: nesting too deep")
        raise MalformedEncoding("Nesting too deep", details={"length": len(data)}) from None
