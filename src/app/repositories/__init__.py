from .invoice_repository import InvoiceRepository
from .payment_repository import PaymentRepository
from .idempotency_repository import IdempotencyRepository, DuplicateIdempotencyKey

__all__ = [
    "InvoiceRepository",
    "PaymentRepository",
    "IdempotencyRepository",
    "DuplicateIdempotencyKey",
]
