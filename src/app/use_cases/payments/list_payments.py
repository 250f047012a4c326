"""
Payment listing use cases

Payment history for one invoice (with running balances) and a filtered,
paginated listing across invoices.
"""
from datetime import date
from typing import Dict, Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.invoice import Invoice
from src.domain.payment import PaymentMethod
from src.domain.reconciliation import build_payment_history
from ..errors import not_found
from .dtos import ListPaymentsResponseDTO, PaymentHistoryResponseDTO
from .mappers import to_history_response, to_payment_response


class ListPaymentsByInvoice:
    """
    Use case: Payment history of an invoice

    Payments are returned oldest first. Each carries the balance remaining
    after it, computed from the invoice total by subtracting payments in
    payment_date order.
    """

    def __init__(self, payment_repo: PaymentRepository, invoice_repo: InvoiceRepository):
        """
        Initialize with payment and invoice repositories.

        Args:
            payment_repo: PaymentRepository instance
            invoice_repo: InvoiceRepository instance
        """
        self.payment_repo = payment_repo
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str) -> Result[PaymentHistoryResponseDTO]:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(not_found("invoice", invoice_id))

        payments = await self.payment_repo.list_by_invoice_id(invoice_id)
        history = build_payment_history(invoice.total_amount, payments)

        return Return.ok(
            PaymentHistoryResponseDTO(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                invoice_total=invoice.total_amount,
                remaining_balance=invoice.balance,
                invoice_status=invoice.status.value,
                payments=[to_history_response(entry, invoice) for entry in history],
            )
        )


class ListPayments:
    """
    Use case: List payments across invoices

    Filtered by invoice, method and an inclusive payment_date range.
    Payments are ordered by payment_date DESC (most recent first).
    """

    def __init__(self, payment_repo: PaymentRepository, invoice_repo: InvoiceRepository):
        """
        Initialize with payment and invoice repositories.

        Args:
            payment_repo: PaymentRepository instance
            invoice_repo: InvoiceRepository instance
        """
        self.payment_repo = payment_repo
        self.invoice_repo = invoice_repo

    async def execute(
        self,
        invoice_id: Optional[str] = None,
        method: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListPaymentsResponseDTO]:
        """
        List payments with filters and pagination.

        Args:
            invoice_id: Optional invoice filter
            method: Optional payment method filter
            start_date: Optional inclusive lower bound on payment_date
            end_date: Optional inclusive upper bound on payment_date
            limit: Maximum number of payments to return (default 20)
            offset: Number of payments to skip (default 0)

        Returns:
            Result[ListPaymentsResponseDTO]: Paginated payment list
        """
        method_filter = None
        if method is not None:
            try:
                method_filter = PaymentMethod(method)
            except ValueError:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message=f"Unknown payment method: {method}",
                        reason="field=method",
                    )
                )
        if start_date and end_date and start_date > end_date:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message="start_date must be on or before end_date",
                    reason="field=start_date",
                )
            )

        filters = dict(
            invoice_id=invoice_id,
            method=method_filter,
            start_date=start_date,
            end_date=end_date,
        )
        payments = await self.payment_repo.list(limit=limit, offset=offset, **filters)
        total = await self.payment_repo.count(**filters)

        invoices: Dict[str, Optional[Invoice]] = {}
        for payment in payments:
            if payment.invoice_id not in invoices:
                invoices[payment.invoice_id] = await self.invoice_repo.get_by_id(payment.invoice_id)

        return Return.ok(
            ListPaymentsResponseDTO(
                payments=[
                    to_payment_response(payment, invoices[payment.invoice_id])
                    for payment in payments
                ],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
