from .base import BaseModel, generate_uuid, utcnow
from .line_item import LineItem
from .invoice import Invoice, InvoiceStatus
from .payment import Payment, PaymentMethod
from .idempotency_record import IdempotencyRecord
from .events import (
    DomainEvent,
    InvoiceCreated,
    LineItemAdded,
    LineItemRemoved,
    LineItemUpdated,
    InvoiceStatusChanged,
    PaymentRecorded,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "utcnow",
    "LineItem",
    "Invoice",
    "InvoiceStatus",
    "Payment",
    "PaymentMethod",
    "IdempotencyRecord",
    "DomainEvent",
    "InvoiceCreated",
    "LineItemAdded",
    "LineItemRemoved",
    "LineItemUpdated",
    "InvoiceStatusChanged",
    "PaymentRecorded",
]
