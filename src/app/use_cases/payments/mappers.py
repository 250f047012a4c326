"""Mapping between payment domain objects and DTOs"""

from decimal import Decimal
from typing import Optional
from src.domain.invoice import Invoice
from src.domain.payment import Payment
from src.domain.reconciliation import PaymentHistoryEntry
from .dtos import PaymentResponseDTO


def to_payment_response(
    payment: Payment,
    invoice: Optional[Invoice] = None,
    running_balance: Optional[Decimal] = None,
    payment_type: Optional[str] = None,
) -> PaymentResponseDTO:
    response = PaymentResponseDTO(
        payment_id=payment.id,
        invoice_id=payment.invoice_id,
        payment_date=payment.payment_date,
        amount=payment.amount,
        method=payment.method.value,
        method_display=payment.method.display_name,
        reference=payment.reference,
        notes=payment.notes,
        created_at=payment.created_at,
        created_by=payment.created_by,
        running_balance=running_balance,
        payment_type=payment_type,
    )
    if invoice is not None:
        response.invoice_number = invoice.invoice_number
        response.invoice_total = invoice.total_amount
        response.remaining_balance = invoice.balance
        response.invoice_status = invoice.status.value
        response.invoice_version = invoice.version
    return response


def to_history_response(entry: PaymentHistoryEntry, invoice: Invoice) -> PaymentResponseDTO:
    return to_payment_response(
        entry.payment,
        invoice,
        running_balance=entry.running_balance,
        payment_type=entry.payment_type.value,
    )
