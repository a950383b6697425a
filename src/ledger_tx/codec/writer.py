"""
Recursive length prefix encoding.

Thin layer over the ``rlp`` package that narrows the accepted item types to
byte strings, non-negative ints and lists, and reports failures as
``EncodingError``.
"""

from typing import Sequence, Union

import rlp
from rlp.exceptions import EncodingError as RLPEncodingError, SerializationError
from rlp.sedes import big_endian_int

from ..runtime.errors import EncodingError

Item = Union[bytes, bytearray, int, Sequence["Item"]]


def int_to_big_endian(value: int) -> bytes:
    """
    Minimal big-endian bytes of a non-negative integer.

    Zero maps to the empty string.
    """
    try:
        return big_endian_int.serialize(value)
    except SerializationError as e:
        raise EncodingError(f"Cannot encode integer {value}", cause=e) from None


def _check_item(item: Item) -> None:
    # Explicit stack, so type errors are reported whatever the nesting depth
    pending = [item]
    while pending:
        value = pending.pop()
        if isinstance(value, (bytes, bytearray)):
            continue
        if isinstance(value, bool):
            raise EncodingError("Cannot encode bool; use an int or bytes")
        if isinstance(value, int):
            if value < 0:
                raise EncodingError(f"Cannot encode negative integer: {value}")
            continue
        if isinstance(value, (list, tuple)):
            pending.extend(value)
            continue
        raise EncodingError(f"Cannot encode object of type {type(value).__name__}")


def encode(item: Item) -> bytes:
    """
    Encode an item.

    Args:
        item: Byte string, non-negative int, or (nested) list/tuple of items

    Returns:
        Canonical encoding

    Raises:
        EncodingError: If the item contains an unsupported type or a negative int
    """
    _check_item(item)
    try:
        return rlp.encode(item)
    except (RLPEncodingError, SerializationError) as e:
        raise EncodingError(f"Cannot encode item: {e}", cause=e) from None
    except RecursionError:
        raise EncodingError("Nesting too deep to encode") from None
