"""
Error model tests.
"""

from ledger_tx.runtime.errors import (
    ErrorCode,
    InvalidAddressLength,
    LedgerError,
    MalformedEncoding,
    ValidationError,
)


class TestErrors:

    def test_str_includes_code_and_details(self):
        error = InvalidAddressLength(details={"length": 3})
        assert str(error).startswith("[INVALID_ADDRESS_LENGTH]")
        assert "length" in str(error)

    def test_hierarchy(self):
        assert issubclass(InvalidAddressLength, ValidationError)
        assert issubclass(MalformedEncoding, LedgerError)

    def test_to_dict_with_cause(self):
        cause = ValueError("boom")
        error = LedgerError("failed", ErrorCode.INTERNAL, cause=cause)
        assert error.to_dict() == {"code": 2, "message": "failed", "cause": "boom"}
