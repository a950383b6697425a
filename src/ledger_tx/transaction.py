"""
Signed value-transfer transaction record.

A transaction is nine byte-string fields::

    [nonce, gasPrice, gasLimit, to, value, data, v, r, s]

The first six form the signing pre-image; ``v, r, s`` authenticate the
sender, whose address is never transmitted and is instead recovered from the
signature. A six-field list is an unsigned draft and is padded with empty
``v, r, s`` placeholders.

Fields are canonicalised on entry so that equal logical values always
serialize to identical bytes:

- numeric fields (``nonce, gasPrice, gasLimit, value, v``) are minimal
  big-endian; zero, including the ``[0x00]`` sentinel, is the empty string;
- ``r`` and ``s`` are empty (unsigned) or exactly 32 bytes;
- ``to`` is empty (contract creation) or a 20-byte address;
- ``data`` is kept verbatim.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field

from .codec import RLPCodec, big_endian_to_int, int_to_big_endian
from .crypto.base import Hasher, SignatureEngine
from .crypto.hashes import ADDRESS_LENGTH, Keccak256Hasher
from .crypto.secp256k1 import Secp256k1SignatureEngine, V_OFFSET
from .fees import FeeSchedule, get_fee_schedule
from .runtime.errors import (
    InvalidAddressLength,
    InvalidFieldCount,
    InvalidFieldError,
    InvalidKey,
)

logger = logging.getLogger(__name__)

FIELDS = (
    "nonce",
    "gasPrice",
    "gasLimit",
    "to",
    "value",
    "data",
    "v",
    "r",
    "s",
)
NUMERIC_FIELDS = frozenset(("nonce", "gasPrice", "gasLimit", "value", "v"))
SIGNATURE_FIELDS = frozenset(("r", "s"))

UNSIGNED_FIELD_COUNT = 6
SIGNED_FIELD_COUNT = 9
SCALAR_LENGTH = 32

FieldValue = Union[bytes, bytearray, str, int, None]


class TransactionType(str, Enum):
    """Derived kind of a transaction."""
    CONTRACT = "contract"
    MESSAGE = "message"


class TransactionView(BaseModel):
    """Readable projection of a transaction's fields."""
    nonce: int
    gas_price: int = Field(alias="gasPrice")
    gas_limit: int = Field(alias="gasLimit")
    to: str
    value: int
    data: str
    v: int
    r: str
    s: str

    model_config = {"populate_by_name": True, "frozen": True}


def _hex_to_bytes(name: str, value: str) -> bytes:
    if value.startswith(("0x", "0X")):
        value = value[2:]
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise InvalidFieldError(f"Field `{name}` is not valid hex: {e}", cause=e)


def _field_bytes(name: str, value: FieldValue) -> bytes:
    """Coerce a supplied field value to bytes before width checks."""
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return _hex_to_bytes(name, value)
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise InvalidFieldError(f"Field `{name}` must be non-negative, got {value}")
        if name == "to":
            try:
                return value.to_bytes(ADDRESS_LENGTH, "big")
            except OverflowError:
                raise InvalidAddressLength(details={"value": hex(value)}) from None
        if name == "data":
            raise InvalidFieldError("Field `data` must be bytes or hex, not int")
        return int_to_big_endian(value)
    raise InvalidFieldError(f"Field `{name}` has unsupported type {type(value).__name__}")


def _canonical_field(name: str, value: bytes) -> bytes:
    if name in NUMERIC_FIELDS:
        return value.lstrip(b"\x00")
    if name in SIGNATURE_FIELDS:
        if not value:
            return value
        if len(value) > SCALAR_LENGTH:
            raise InvalidFieldError(
                f"Field `{name}` exceeds {SCALAR_LENGTH} bytes",
                details={"length": len(value)},
            )
        return value.lstrip(b"\x00").rjust(SCALAR_LENGTH, b"\x00")
    if name == "to" and len(value) not in (0, ADDRESS_LENGTH):
        raise InvalidAddressLength(details={"length": len(value)})
    return value


class Transaction:
    """
    A transaction record.

    Construct from ``None`` (all defaults), a 6- or 9-element field list, or
    encoded bytes. Hashing, signing and fee lookups go through injected
    collaborators, defaulting to Keccak-256, SECP256K1 and the process-wide
    fee schedule.
    """

    def __init__(
        self,
        data: Union[bytes, bytearray, str, Sequence[FieldValue], None] = None,
        *,
        codec: Optional[RLPCodec] = None,
        hasher: Optional[Hasher] = None,
        signature_engine: Optional[SignatureEngine] = None,
        fee_schedule: Optional[FeeSchedule] = None,
    ):
        """
        Initialize a transaction.

        Args:
            data: Field list, encoded bytes (or their hex), or None for defaults
            codec: Binary codec
            hasher: Digest and address derivation
            signature_engine: Signing and public key recovery
            fee_schedule: Fee constants

        Raises:
            MalformedEncoding: If encoded input cannot be decoded
            InvalidFieldCount: If the field list has neither 6 nor 9 entries
            InvalidFieldError: If a field has the wrong type, sign or width
            InvalidAddressLength: If ``to`` is neither empty nor 20 bytes
        """
        self._codec = codec or RLPCodec()
        self._hasher = hasher or Keccak256Hasher()
        self._signature_engine = signature_engine or Secp256k1SignatureEngine()
        self._fee_schedule = fee_schedule or get_fee_schedule()

        if data is None:
            fields: List[FieldValue] = [
                b"", b"", b"", b"", b"", b"",
                bytes([V_OFFSET + 1]),
                bytes(SCALAR_LENGTH),
                bytes(SCALAR_LENGTH),
            ]
        elif isinstance(data, (bytes, bytearray, str)):
            encoded = _hex_to_bytes("transaction", data) if isinstance(data, str) else bytes(data)
            decoded = self._codec.decode(encoded)
            if not isinstance(decoded, list):
                raise InvalidFieldCount("Encoded transaction is not a list")
            fields = decoded
        else:
            fields = list(data)

        self._raw = self._parse(fields)
        self._signer_public_key: Optional[bytes] = None

    @staticmethod
    def _parse(fields: Sequence[FieldValue]) -> List[bytes]:
        if len(fields) == UNSIGNED_FIELD_COUNT:
            fields = list(fields) + [None, None, None]
        if len(fields) != SIGNED_FIELD_COUNT:
            raise InvalidFieldCount(details={"count": len(fields)})
        return [
            _canonical_field(name, _field_bytes(name, value))
            for name, value in zip(FIELDS, fields)
        ]

    @classmethod
    def from_bytes(cls, data: bytes, **kwargs: Any) -> Transaction:
        """Decode a transaction from its serialized form."""
        return cls(bytes(data), **kwargs)

    @classmethod
    def from_fields(cls, fields: Sequence[FieldValue], **kwargs: Any) -> Transaction:
        """Build a transaction from a 6- or 9-element field list."""
        return cls(list(fields), **kwargs)

    # Field access

    @property
    def raw(self) -> List[bytes]:
        """Copy of the nine canonical fields."""
        return list(self._raw)

    @property
    def nonce(self) -> bytes:
        return self._raw[0]

    @property
    def gas_price(self) -> bytes:
        return self._raw[1]

    @property
    def gas_limit(self) -> bytes:
        return self._raw[2]

    @property
    def to(self) -> bytes:
        return self._raw[3]

    @property
    def value(self) -> bytes:
        return self._raw[4]

    @property
    def data(self) -> bytes:
        return self._raw[5]

    @property
    def v(self) -> bytes:
        return self._raw[6]

    @property
    def r(self) -> bytes:
        return self._raw[7]

    @property
    def s(self) -> bytes:
        return self._raw[8]

    def field_as_int(self, name: str) -> int:
        """Interpret a field as an unsigned big-endian integer."""
        return big_endian_to_int(self._raw[FIELDS.index(name)])

    @property
    def type(self) -> TransactionType:
        """``CONTRACT`` when ``to`` is empty, else ``MESSAGE``."""
        return TransactionType.MESSAGE if self._raw[3] else TransactionType.CONTRACT

    @property
    def is_signed(self) -> bool:
        """True once ``r`` and ``s`` hold non-zero values."""
        return bool(big_endian_to_int(self._raw[7]) and big_endian_to_int(self._raw[8]))

    # Validated setters

    def _pin_signer(self) -> None:
        # Remember who signed before the first edit so later edits are detectable
        if self._signer_public_key is None and self.is_signed:
            self._signer_public_key = self.get_sender_public_key()

    def _set(self, name: str, value: FieldValue) -> None:
        self._pin_signer()
        self._raw[FIELDS.index(name)] = _canonical_field(name, _field_bytes(name, value))

    def set_nonce(self, value: FieldValue) -> None:
        self._set("nonce", value)

    def set_gas_price(self, value: FieldValue) -> None:
        self._set("gasPrice", value)

    def set_gas_limit(self, value: FieldValue) -> None:
        self._set("gasLimit", value)

    def set_value(self, value: FieldValue) -> None:
        self._set("value", value)

    def set_data(self, value: FieldValue) -> None:
        self._set("data", value)

    def set_to(self, value: Union[bytes, bytearray, str, int]) -> None:
        """
        Set the recipient address.

        Args:
            value: 20-byte address as bytes, hex string or integer

        Raises:
            InvalidAddressLength: If the value is not 20 bytes once normalised
        """
        address = _field_bytes("to", value)
        if len(address) != ADDRESS_LENGTH:
            raise InvalidAddressLength(details={"length": len(address)})
        self._pin_signer()
        self._raw[3] = address

    # Encoding and hashing

    def serialize(self) -> bytes:
        """Encode all nine fields."""
        return self._codec.encode(self._raw)

    def hash(self, include_signature: bool = True) -> bytes:
        """
        Hash the transaction.

        Args:
            include_signature: Hash all nine fields if True, otherwise only
                ``nonce`` through ``data`` (the signing pre-image)

        Returns:
            32-byte digest
        """
        fields = self._raw if include_signature else self._raw[:UNSIGNED_FIELD_COUNT]
        return self._hasher.digest(self._codec.encode(fields))

    # Signatures

    def sign(self, private_key: Union[bytes, str, Any]) -> None:
        """
        Sign the transaction, replacing any existing ``v, r, s``.

        Args:
            private_key: 32-byte key, its hex, or an object with ``to_bytes()``

        Raises:
            InvalidKey: If the private key is not a valid scalar
        """
        if isinstance(private_key, str):
            try:
                private_key = _hex_to_bytes("privateKey", private_key)
            except InvalidFieldError as e:
                raise InvalidKey(e.message, cause=e) from None
        elif hasattr(private_key, "to_bytes") and not isinstance(private_key, (bytes, bytearray, int)):
            private_key = private_key.to_bytes()

        r, s, v = self._signature_engine.sign(self.hash(False), private_key)
        self._raw[6] = int_to_big_endian(v)
        self._raw[7] = r.to_bytes(SCALAR_LENGTH, "big")
        self._raw[8] = s.to_bytes(SCALAR_LENGTH, "big")
        self._signer_public_key = self.get_sender_public_key()
        logger.debug(f"Signed transaction {self.hash().hex()}")

    def get_sender_public_key(self) -> Optional[bytes]:
        """
        Recover the sender's public key from the signature.

        Returns:
            Public key bytes, or None if the signature does not yield one
        """
        public_key = self._signature_engine.recover_public_key(
            self.hash(False),
            big_endian_to_int(self._raw[7]),
            big_endian_to_int(self._raw[8]),
            big_endian_to_int(self._raw[6]),
        )
        if public_key is None:
            logger.debug("Sender public key recovery failed")
        return public_key

    def get_sender_address(self) -> Optional[bytes]:
        """20-byte sender address, or None if recovery failed."""
        public_key = self.get_sender_public_key()
        if public_key is None:
            return None
        return self._hasher.address(public_key)

    def verify_signature(self) -> bool:
        """
        True if a public key is recovered and ``r, s`` verify against it.

        Recovery yields some key for almost any digest, so the record also
        requires the recovered key to match the signer it remembered, either
        at ``sign()`` or before its first field edit. Edits made through the
        setters then fail verification. Bytes altered before decoding have no
        remembered signer and show up as a different sender address.
        """
        public_key = self.get_sender_public_key()
        if public_key is None:
            return False
        if self._signer_public_key is not None and public_key != self._signer_public_key:
            logger.debug("Recovered key differs from the signing key")
            return False
        return self._signature_engine.verify(
            public_key,
            self.hash(False),
            big_endian_to_int(self._raw[7]),
            big_endian_to_int(self._raw[8]),
        )

    # Costs

    def get_data_fee(self) -> int:
        """Gas charged for the payload; the ``[0x00]`` sentinel counts as empty."""
        data = self._raw[5]
        if not data or data == b"\x00":
            return 0
        return len(data) * self._fee_schedule.fee_for("TXDATA")

    def get_base_fee(self) -> int:
        """Minimum gas a transaction must allow to be valid."""
        return self.get_data_fee() + self._fee_schedule.fee_for("TRANSACTION")

    def get_upfront_cost(self) -> int:
        """Balance the sender must hold: ``gasLimit * gasPrice + value``."""
        return (
            big_endian_to_int(self.gas_limit) * big_endian_to_int(self.gas_price)
            + big_endian_to_int(self.value)
        )

    def validate(self) -> bool:
        """True if the signature is valid and the gas limit covers the base fee."""
        if self.get_base_fee() > big_endian_to_int(self.gas_limit):
            logger.debug("Gas limit below base fee")
            return False
        return self.verify_signature()

    # Projections

    def to_model(self) -> TransactionView:
        return TransactionView(
            nonce=big_endian_to_int(self.nonce),
            gas_price=big_endian_to_int(self.gas_price),
            gas_limit=big_endian_to_int(self.gas_limit),
            to="0x" + self.to.hex(),
            value=big_endian_to_int(self.value),
            data="0x" + self.data.hex(),
            v=big_endian_to_int(self.v),
            r="0x" + self.r.hex(),
            s="0x" + self.s.hex(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Readable field mapping with the wire names as keys."""
        return self.to_model().model_dump(by_alias=True)

    def __repr__(self) -> str:
        return f"Transaction(type={self.type.value}, hash={self.hash().hex()[:16]}...)"


__all__ = [
    "FIELDS",
    "Transaction",
    "TransactionType",
    "TransactionView",
]
