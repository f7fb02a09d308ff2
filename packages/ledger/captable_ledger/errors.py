"""Exception hierarchy for the cap table ledger client.

Every error raised by this package derives from ``LedgerError`` and carries an
``ErrorCode`` so callers can branch on the failure class without string
matching:

- ValidationError: bad input, raised before any network access
- ConflictError: the targeted aggregate version was already consumed
- NotFoundError: an expected creation event or resource is absent
- InsufficientResourceError: value resources cannot cover an amount
- ProtocolError: malformed proofs or an unexpected execution-result shape
  (BatchResultMismatchError when the update committed anyway)

None of these are retried inside the package. Retry is a caller decision.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_FORMAT = "INVALID_FORMAT"
    UNKNOWN_ENUM_VALUE = "UNKNOWN_ENUM_VALUE"
    EMPTY_BATCH = "EMPTY_BATCH"
    STALE_VERSION = "STALE_VERSION"
    RESULT_NOT_FOUND = "RESULT_NOT_FOUND"
    CONTRACT_NOT_FOUND = "CONTRACT_NOT_FOUND"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    INVALID_DISCLOSURE = "INVALID_DISCLOSURE"


class LedgerError(Exception):
    """Base exception for all cap table ledger errors."""

    default_code = ErrorCode.INVALID_RESPONSE

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        self.code = code or self.default_code
        super().__init__(message)


# --- Input ---
class ValidationError(LedgerError):
    """Input data failed validation at ``field_path``."""

    default_code = ErrorCode.REQUIRED_FIELD_MISSING

    def __init__(
        self,
        field_path: str,
        message: str,
        *,
        expected_type: Optional[str] = None,
        received_value: Any = None,
        code: Optional[ErrorCode] = None,
    ):
        self.field_path = field_path
        self.expected_type = expected_type
        self.received_value = received_value
        super().__init__(f"Validation error at '{field_path}': {message}", code)


class EmptyBatchError(ValidationError):
    """A batch was compiled with no accumulated operations."""

    default_code = ErrorCode.EMPTY_BATCH

    def __init__(self):
        super().__init__(
            "batch",
            "Cannot build empty batch - add at least one create, edit, or delete operation",
        )


# --- Ledger state ---
class ConflictError(LedgerError):
    """The targeted aggregate version has been superseded by another writer."""

    default_code = ErrorCode.STALE_VERSION

    def __init__(self, message: str, resource_id: Optional[str] = None):
        self.resource_id = resource_id
        super().__init__(message)


class NotFoundError(LedgerError):
    """An expected creation event or referenced resource is absent."""

    default_code = ErrorCode.RESULT_NOT_FOUND

    def __init__(
        self,
        message: str,
        *,
        resource_id: Optional[str] = None,
        resource_kind: Optional[str] = None,
        code: Optional[ErrorCode] = None,
    ):
        self.resource_id = resource_id
        self.resource_kind = resource_kind
        super().__init__(message, code)


# --- Funding ---
class InsufficientResourceError(LedgerError):
    """Value resources do not cover the required amount."""

    default_code = ErrorCode.INSUFFICIENT_FUNDS

    def __init__(self, required: Decimal, available: Decimal, principal: Optional[str] = None):
        self.required = required
        self.available = available
        self.shortfall = required - available
        self.principal = principal
        owner = f" for {principal}" if principal else ""
        super().__init__(
            f"Insufficient value resources{owner}: required {required}, "
            f"available {available}, shortfall {self.shortfall}"
        )


# --- Protocol ---
class ProtocolError(LedgerError):
    """Malformed disclosure proof or unexpected execution-result shape."""

    default_code = ErrorCode.INVALID_RESPONSE


class BatchResultMismatchError(ProtocolError):
    """The update was committed but its result does not match the batch.

    The aggregate version was consumed regardless, so the successor handle is
    attached for the caller to continue from.
    """

    def __init__(self, message: str, *, updated_aggregate: Any = None, update_id: Optional[str] = None):
        self.updated_aggregate = updated_aggregate
        self.update_id = update_id
        super().__init__(message)
