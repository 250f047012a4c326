"""SendInvoice Use Case

Transitions a draft invoice to sent, freezing its line items.
"""

import logging
from libs.result import Result, Return
from .base import InvoiceCommand
from .dtos import InvoiceTransitionCommandDTO, InvoiceResponseDTO

logger = logging.getLogger(__name__)


class SendInvoice(InvoiceCommand):
    """
    Use Case: Send invoice

    Business Rules:
    1. Only draft invoices can be sent
    2. The invoice needs at least one line item and a positive total
    3. After sending, line items and header fields are immutable
    """

    failure_code = "SEND_INVOICE_FAILED"
    failure_message = "Failed to send invoice"

    async def execute(self, command: InvoiceTransitionCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self._load(command.invoice_id, command.expected_version)
            invoice.send(now=self.clock.now())
            response = await self._save_and_commit(invoice)

        except Exception as e:
            return await self._fail(e)

        logger.info(f"Sent invoice {invoice.invoice_number} total={invoice.total_amount}")
        return Return.ok(response)
