"""CreateInvoice Use Case

Creates a draft invoice with its initial line items.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.clock import Clock
from src.app.services.event_dispatcher import EventDispatcher
from src.app.services.idempotency_guard import IdempotencyGuard
from src.app.services.invoice_number_generator import InvoiceNumberGenerator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import ValidationError
from src.domain.invoice import Invoice
from .base import InvoiceCommand
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO
from .mappers import to_invoice_response, to_line_items

logger = logging.getLogger(__name__)


class CreateInvoice(InvoiceCommand):
    """
    Use Case: Create draft invoice

    Business Rules:
    1. Idempotency: a repeated idempotency_key returns the first response
    2. Invoice number is generated (PREFIX-YYYY-NNNNNN) and never reused
    3. At least one line item is required
    4. due_date defaults to issue_date and may not precede it
    5. Invoice is created with status=draft at version 0

    Flow:
    1. Check idempotency (return cached response if found)
    2. Generate unique invoice number
    3. Build the aggregate and add line items
    4. Insert invoice and commit
    5. Store idempotency record, dispatch events
    """

    failure_code = "CREATE_INVOICE_FAILED"
    failure_message = "Failed to create invoice"

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        number_generator: InvoiceNumberGenerator,
        clock: Optional[Clock] = None,
        idempotency_guard: Optional[IdempotencyGuard] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
    ):
        super().__init__(uow, invoice_repo, clock, event_dispatcher)
        self.number_generator = number_generator
        self.idempotency_guard = idempotency_guard

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with customer, dates and line items

        Returns:
            Result[InvoiceResponseDTO]: Success with the draft invoice or error
        """
        try:
            # Step 1: Check idempotency
            if self.idempotency_guard is not None:
                cached = await self.idempotency_guard.check(
                    command.idempotency_key, InvoiceResponseDTO
                )
                if cached is not None:
                    return Return.ok(cached)

            # Step 2: Generate unique invoice number
            invoice_number = await self.number_generator.next_invoice_number()
            if await self.invoice_repo.exists_by_invoice_number(invoice_number):
                return Return.err(
                    Error(
                        code="INVOICE_NUMBER_EXISTS",
                        message=f"Invoice number already exists: {invoice_number}",
                        reason="Invoice number generator returned a used number",
                    )
                )

            # Step 3: Build the aggregate
            now = self.clock.now()
            invoice = Invoice.create(
                customer_id=command.customer_id,
                issue_date=command.issue_date,
                due_date=command.due_date or command.issue_date,
                payment_terms=command.payment_terms,
                invoice_number=invoice_number,
                notes=command.notes,
                now=now,
            )
            if not command.line_items:
                raise ValidationError("line_items", "At least one line item is required")
            for line_item in to_line_items(command.line_items):
                invoice.add_line_item(line_item, now=now)

            # Step 4: Persist and commit
            await self.invoice_repo.create(invoice)
            await self.uow.commit()

        except Exception as e:
            return await self._fail(e)

        # Step 5: Bookkeeping after commit
        response = to_invoice_response(invoice, self.clock.today())
        logger.info(
            f"Created invoice {invoice.invoice_number} for customer {invoice.customer_id} "
            f"total={invoice.total_amount}"
        )
        if self.idempotency_guard is not None:
            await self.idempotency_guard.store(command.idempotency_key, response)
        await self._dispatch(invoice.drain_domain_events())
        return Return.ok(response)
