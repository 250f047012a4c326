"""Invoice query use cases"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.clock import Clock, SystemClock
from src.domain.invoice import InvoiceStatus
from ..errors import not_found
from .dtos import InvoiceResponseDTO, ListInvoicesResponseDTO
from .mappers import to_invoice_response


class GetInvoice:
    """
    Get Invoice Use Case

    Read-only lookup by id or by invoice number.

    Errors:
        INVOICE_NOT_FOUND: no invoice matches
    """

    def __init__(self, invoice_repo: InvoiceRepository, clock: Optional[Clock] = None):
        """
        Initialize GetInvoice use case

        Args:
            invoice_repo: Repository for accessing invoices
            clock: Source of "today" for days_overdue
        """
        self.invoice_repo = invoice_repo
        self.clock = clock or SystemClock()

    async def execute(self, invoice_id: str) -> Result[InvoiceResponseDTO]:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(not_found("invoice", invoice_id))
        return Return.ok(to_invoice_response(invoice, self.clock.today()))

    async def by_number(self, invoice_number: str) -> Result[InvoiceResponseDTO]:
        invoice = await self.invoice_repo.get_by_invoice_number(invoice_number)
        if not invoice:
            return Return.err(
                Error(
                    code="INVOICE_NOT_FOUND",
                    message=f"Invoice with number {invoice_number} not found",
                )
            )
        return Return.ok(to_invoice_response(invoice, self.clock.today()))


class ListInvoices:
    """
    List Invoices Use Case

    Paginated invoice listing, newest first, optionally filtered by status
    and customer.
    """

    def __init__(self, invoice_repo: InvoiceRepository, clock: Optional[Clock] = None):
        """
        Initialize with invoice repository.

        Args:
            invoice_repo: InvoiceRepository instance
            clock: Source of "today" for days_overdue
        """
        self.invoice_repo = invoice_repo
        self.clock = clock or SystemClock()

    async def execute(
        self,
        status: Optional[str] = None,
        customer_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListInvoicesResponseDTO]:
        """
        List invoices with pagination.

        Args:
            status: Optional status filter (draft, sent, paid)
            customer_id: Optional customer filter
            limit: Maximum number of invoices to return (default 20)
            offset: Number of invoices to skip (default 0)

        Returns:
            Result[ListInvoicesResponseDTO]: Paginated invoice list
        """
        status_filter = None
        if status is not None:
            try:
                status_filter = InvoiceStatus(status)
            except ValueError:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message=f"Unknown invoice status: {status}",
                        reason="field=status",
                    )
                )

        invoices = await self.invoice_repo.list(
            status=status_filter,
            customer_id=customer_id,
            limit=limit,
            offset=offset,
        )
        total = await self.invoice_repo.count(status=status_filter, customer_id=customer_id)

        today = self.clock.today()
        return Return.ok(
            ListInvoicesResponseDTO(
                invoices=[to_invoice_response(invoice, today) for invoice in invoices],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
