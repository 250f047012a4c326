"""Line item use cases

Add, update and remove individual line items on a draft invoice.
"""

import logging
from libs.result import Result, Return
from .base import InvoiceCommand
from .dtos import (
    AddLineItemCommandDTO,
    InvoiceResponseDTO,
    RemoveLineItemCommandDTO,
    UpdateLineItemCommandDTO,
)
from .mappers import to_invoice_response, to_line_item

logger = logging.getLogger(__name__)


class AddLineItem(InvoiceCommand):
    """Use Case: Append a line item to a draft invoice"""

    failure_code = "ADD_LINE_ITEM_FAILED"
    failure_message = "Failed to add line item"

    async def execute(self, command: AddLineItemCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self._load(command.invoice_id, command.expected_version)
            line_item = to_line_item(command.line_item)
            invoice.add_line_item(line_item, now=self.clock.now())
            response = await self._save_and_commit(invoice)

        except Exception as e:
            return await self._fail(e)

        logger.info(f"Added line item {line_item.id} to invoice {invoice.invoice_number}")
        return Return.ok(response)


class UpdateLineItem(InvoiceCommand):
    """Use Case: Replace one line item of a draft invoice, keeping its id"""

    failure_code = "UPDATE_LINE_ITEM_FAILED"
    failure_message = "Failed to update line item"

    async def execute(self, command: UpdateLineItemCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self._load(command.invoice_id, command.expected_version)
            line_item = to_line_item(command.line_item)
            if invoice.update_line_item(command.line_item_id, line_item, now=self.clock.now()):
                response = await self._save_and_commit(invoice)
            else:
                response = to_invoice_response(invoice, self.clock.today())

        except Exception as e:
            return await self._fail(e)

        logger.info(f"Updated line item {command.line_item_id} on invoice {invoice.invoice_number}")
        return Return.ok(response)


class RemoveLineItem(InvoiceCommand):
    """
    Use Case: Remove a line item from a draft invoice

    Removing an id that is not on the invoice succeeds without saving, so
    the version stays the same.
    """

    failure_code = "REMOVE_LINE_ITEM_FAILED"
    failure_message = "Failed to remove line item"

    async def execute(self, command: RemoveLineItemCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self._load(command.invoice_id, command.expected_version)
            if invoice.remove_line_item(command.line_item_id, now=self.clock.now()):
                response = await self._save_and_commit(invoice)
            else:
                response = to_invoice_response(invoice, self.clock.today())

        except Exception as e:
            return await self._fail(e)

        logger.info(f"Removed line item {command.line_item_id} from invoice {invoice.invoice_number}")
        return Return.ok(response)
