"""MarkInvoicePaid Use Case

Explicit sent -> paid transition for an invoice whose balance is already zero.
"""

import logging
from libs.result import Result, Return
from .base import InvoiceCommand
from .dtos import InvoiceTransitionCommandDTO, InvoiceResponseDTO

logger = logging.getLogger(__name__)


class MarkInvoicePaid(InvoiceCommand):
    """
    Use Case: Mark invoice as paid

    Business Rules:
    1. Only sent invoices can be marked paid
    2. The balance must already be zero; payments are the only way to reduce it
    """

    failure_code = "MARK_INVOICE_PAID_FAILED"
    failure_message = "Failed to mark invoice as paid"

    async def execute(self, command: InvoiceTransitionCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self._load(command.invoice_id, command.expected_version)
            invoice.mark_paid(now=self.clock.now())
            response = await self._save_and_commit(invoice)

        except Exception as e:
            return await self._fail(e)

        logger.info(f"Marked invoice {invoice.invoice_number} as paid")
        return Return.ok(response)
