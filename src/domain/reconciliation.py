"""Read-side reductions over payments and invoices

Everything here is recomputed from the stored records on each call; none of
it is persisted.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Sequence
from src.domain.base import BaseModel
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.money import ZERO, round2, sum_money
from src.domain.payment import Payment, PaymentMethod


class PaymentType(str, Enum):
    FULL = "full"
    PARTIAL = "partial"


class PaymentHistoryEntry(BaseModel):
    payment: Payment
    running_balance: Decimal
    payment_type: PaymentType


class PaymentStatistics(BaseModel):
    total_collected: Decimal
    collected_today: Decimal
    collected_this_month: Decimal
    collected_this_year: Decimal
    total_payment_count: int
    by_method: dict[PaymentMethod, Decimal]


class InvoiceDashboardStats(BaseModel):
    total_invoices: int
    draft_invoices: int
    sent_invoices: int
    paid_invoices: int
    total_revenue: Decimal
    outstanding_amount: Decimal
    overdue_amount: Decimal


def classify_payment(running_balance: Decimal) -> PaymentType:
    return PaymentType.FULL if running_balance == 0 else PaymentType.PARTIAL


def chronological(payments: Iterable[Payment]) -> list[Payment]:
    """Order by payment_date; ties keep creation order"""
    indexed = list(enumerate(payments))
    indexed.sort(key=lambda pair: (pair[1].payment_date, pair[1].created_at, pair[0]))
    return [payment for _, payment in indexed]


def build_payment_history(
    total_amount: Decimal, payments: Iterable[Payment]
) -> list[PaymentHistoryEntry]:
    """
    Running balance after each payment, oldest first

    Starts at total_amount and subtracts every payment in chronological order,
    so the result does not depend on the order payments were handed in.
    """
    running = round2(total_amount)
    history: list[PaymentHistoryEntry] = []
    for payment in chronological(payments):
        running = round2(running - payment.amount)
        history.append(
            PaymentHistoryEntry(
                payment=payment,
                running_balance=running,
                payment_type=classify_payment(running),
            )
        )
    return history


def summarize_payments(payments: Sequence[Payment], today: date) -> PaymentStatistics:
    by_method = {method: ZERO for method in PaymentMethod}
    for payment in payments:
        by_method[payment.method] = round2(by_method[payment.method] + payment.amount)

    return PaymentStatistics(
        total_collected=sum_money(p.amount for p in payments),
        collected_today=sum_money(p.amount for p in payments if p.payment_date == today),
        collected_this_month=sum_money(
            p.amount
            for p in payments
            if p.payment_date.year == today.year and p.payment_date.month == today.month
        ),
        collected_this_year=sum_money(
            p.amount for p in payments if p.payment_date.year == today.year
        ),
        total_payment_count=len(payments),
        by_method=by_method,
    )


def summarize_invoices(invoices: Sequence[Invoice], today: date) -> InvoiceDashboardStats:
    def count(status: InvoiceStatus) -> int:
        return sum(1 for invoice in invoices if invoice.status == status)

    sent = [invoice for invoice in invoices if invoice.status == InvoiceStatus.SENT]
    return InvoiceDashboardStats(
        total_invoices=len(invoices),
        draft_invoices=count(InvoiceStatus.DRAFT),
        sent_invoices=len(sent),
        paid_invoices=count(InvoiceStatus.PAID),
        total_revenue=sum_money(
            invoice.total_amount for invoice in invoices if invoice.status == InvoiceStatus.PAID
        ),
        outstanding_amount=sum_money(invoice.balance for invoice in sent),
        overdue_amount=sum_money(invoice.balance for invoice in sent if invoice.is_overdue(today)),
    )
