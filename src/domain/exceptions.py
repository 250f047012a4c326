"""Typed error taxonomy for the invoicing domain

Every error carries a machine-readable ``code`` and structured attributes so
callers branch on type, never on message text.

    BillingError
    +-- InputError                  malformed input / programmer error
    |   +-- ValidationError
    |   +-- InvalidPayment
    +-- BusinessRuleViolation       expected, user-facing
    |   +-- ImmutableStateError
    |   +-- InvalidStateTransition
    |   +-- InvalidOperation
    |   +-- InsufficientBalance
    +-- ConcurrencyError
    |   +-- VersionConflict
    +-- NotFound
"""

from decimal import Decimal
from typing import Any, Optional


class BillingError(Exception):
    """Base class for all domain errors"""

    code = "BILLING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InputError(BillingError):
    """A command or constructor received malformed input"""

    code = "INPUT_ERROR"


class BusinessRuleViolation(BillingError):
    """An expected domain rule rejected the operation"""

    code = "BUSINESS_RULE_VIOLATION"


class ConcurrencyError(BillingError):
    """The operation raced with another writer"""

    code = "CONCURRENCY_ERROR"


class ValidationError(InputError):
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class InvalidPayment(InputError):
    code = "INVALID_PAYMENT"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class ImmutableStateError(BusinessRuleViolation):
    code = "INVOICE_IMMUTABLE"

    def __init__(self, invoice_id: str, status: str, message: Optional[str] = None):
        super().__init__(
            message or f"Invoice {invoice_id} is {status}; only Draft invoices can be modified"
        )
        self.invoice_id = invoice_id
        self.status = status


class InvalidStateTransition(BusinessRuleViolation):
    code = "INVALID_STATE_TRANSITION"

    def __init__(self, invoice_id: str, from_status: str, to_status: str, message: str):
        super().__init__(message)
        self.invoice_id = invoice_id
        self.from_status = from_status
        self.to_status = to_status


class InvalidOperation(BusinessRuleViolation):
    code = "INVALID_OPERATION"

    def __init__(self, invoice_id: str, status: str, message: str):
        super().__init__(message)
        self.invoice_id = invoice_id
        self.status = status


class InsufficientBalance(BusinessRuleViolation):
    code = "INSUFFICIENT_BALANCE"

    def __init__(self, invoice_id: str, requested: Decimal, available: Decimal):
        super().__init__(
            f"Payment amount {requested} exceeds invoice balance {available}"
        )
        self.invoice_id = invoice_id
        self.requested = requested
        self.available = available

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "requested": str(self.requested),
            "available": str(self.available),
        }


class VersionConflict(ConcurrencyError):
    code = "VERSION_CONFLICT"

    def __init__(self, aggregate_id: str, expected_version: int, actual_version: Optional[int]):
        super().__init__(
            f"Invoice {aggregate_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version}); reload and retry"
        )
        self.aggregate_id = aggregate_id
        self.expected_version = expected_version
        self.actual_version = actual_version

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "expected_version": self.expected_version,
            "actual_version": self.actual_version,
        }


class NotFound(BillingError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
        self.code = f"{entity.upper()}_NOT_FOUND"
