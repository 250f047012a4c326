from .tables import InvoiceRow, PaymentRow, IdempotencyRow
from .invoice_repository import SqlAlchemyInvoiceRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .idempotency_repository import SqlAlchemyIdempotencyRepository

__all__ = [
    "InvoiceRow",
    "PaymentRow",
    "IdempotencyRow",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyIdempotencyRepository",
]
