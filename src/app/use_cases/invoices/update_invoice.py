"""UpdateInvoice Use Case

Replaces the header fields and line items of a draft invoice.
"""

import logging
from libs.result import Result, Return
from .base import InvoiceCommand
from .dtos import UpdateInvoiceCommandDTO, InvoiceResponseDTO
from .mappers import to_line_items

logger = logging.getLogger(__name__)


class UpdateInvoice(InvoiceCommand):
    """
    Use Case: Update a draft invoice

    Business Rules:
    1. The caller must pass the version it last read; a stale version is rejected
    2. Only draft invoices can be updated
    3. Line items are replaced wholesale, all validated before any change
    """

    failure_code = "UPDATE_INVOICE_FAILED"
    failure_message = "Failed to update invoice"

    async def execute(self, command: UpdateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self._load(command.invoice_id, command.version)

            now = self.clock.now()
            line_items = to_line_items(command.line_items)
            invoice.update_fields(
                customer_id=command.customer_id,
                issue_date=command.issue_date,
                due_date=command.due_date or command.issue_date,
                payment_terms=command.payment_terms,
                notes=command.notes,
                now=now,
            )
            invoice.replace_line_items(line_items, now=now)

            response = await self._save_and_commit(invoice)

        except Exception as e:
            return await self._fail(e)

        logger.info(f"Updated invoice {invoice.invoice_number} to version {invoice.version}")
        return Return.ok(response)
