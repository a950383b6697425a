"""
Ledger transaction error model.

Structural and caller errors are raised as exceptions. Data-derived outcomes
from untrusted input (unrecoverable signatures, underfunded gas) are plain
``None``/``False`` results and never appear here.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes for ledger transaction failures."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2
    NOT_FOUND = 4

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    MALFORMED_ENCODING = 102

    # Validation errors (400-499)
    INVALID_TRANSACTION = 400
    INVALID_FIELD_COUNT = 401
    INVALID_FIELD = 402
    INVALID_ADDRESS_LENGTH = 403

    # Key errors (700-799)
    INVALID_KEY = 700

    # Configuration errors (800-899)
    UNKNOWN_FEE = 800

    # Storage errors (900-999)
    STORAGE_ERROR = 900


class LedgerError(Exception):
    """
    Base class for all ledger-tx errors.

    Carries a machine-readable code alongside the message so callers that
    relay rejections to peers can report them uniformly.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a ledger error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class EncodingError(LedgerError):
    """Data encoding/decoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class MalformedEncoding(EncodingError):
    """Encoded input violates the length-prefix grammar."""

    def __init__(self, message: str = "Malformed encoding",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MALFORMED_ENCODING, details, cause)


class ValidationError(LedgerError):
    """Transaction structure validation errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_TRANSACTION,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class InvalidFieldCount(ValidationError):
    """Field list is neither a 6-field draft nor a full 9-field record."""

    def __init__(self, message: str = "Invalid number of fields in transaction data",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_FIELD_COUNT, details, cause)


class InvalidFieldError(ValidationError):
    """A single field has the wrong type, sign or width."""

    def __init__(self, message: str = "Invalid field",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_FIELD, details, cause)


class InvalidAddressLength(ValidationError):
    """Recipient address is not 20 bytes."""

    def __init__(self, message: str = "The field `to` must have byte length of 20",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_ADDRESS_LENGTH, details, cause)


class InvalidKey(LedgerError):
    """Private key is not a valid secp256k1 scalar."""

    def __init__(self, message: str = "Invalid private key",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_KEY, details, cause)


class UnknownFeeError(LedgerError, KeyError):
    """Lookup of a fee name the schedule does not define."""

    def __init__(self, name: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Unknown fee name: {name}", ErrorCode.UNKNOWN_FEE, details)
        self.name = name

    def __str__(self) -> str:
        return LedgerError.__str__(self)


class StorageError(LedgerError):
    """Storage collaborator failures."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STORAGE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class NotFoundError(StorageError):
    """Key not present in the store."""

    def __init__(self, message: str = "Key not found",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NOT_FOUND, details, cause)


__all__ = [
    "ErrorCode",
    "LedgerError",
    "EncodingError",
    "MalformedEncoding",
    "ValidationError",
    "InvalidFieldCount",
    "InvalidFieldError",
    "InvalidAddressLength",
    "InvalidKey",
    "UnknownFeeError",
    "StorageError",
    "NotFoundError",
]
