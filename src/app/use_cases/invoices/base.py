"""Shared plumbing for invoice commands

Every mutating invoice command follows the same steps: load the aggregate,
compare the caller's expected version, mutate, save with a version check,
commit, then hand the drained events to the dispatcher.
"""

import logging
from typing import Optional, Sequence
from libs.result import Error, Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.clock import Clock, SystemClock
from src.app.services.event_dispatcher import EventDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.events import DomainEvent
from src.domain.exceptions import BillingError, NotFound, VersionConflict
from src.domain.invoice import Invoice
from ..errors import domain_error
from .dtos import InvoiceResponseDTO
from .mappers import to_invoice_response

logger = logging.getLogger(__name__)


class InvoiceCommand:
    """Base class for use cases that change a stored invoice"""

    failure_code = "INVOICE_COMMAND_FAILED"
    failure_message = "Failed to update invoice"

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        clock: Optional[Clock] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.clock = clock or SystemClock()
        self.event_dispatcher = event_dispatcher

    async def _load(self, invoice_id: str, expected_version: Optional[int] = None) -> Invoice:
        """
        Fetch the invoice and verify the caller's view of it is current

        Raises:
            NotFound: no invoice with this id
            VersionConflict: expected_version given and stale
        """
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            raise NotFound("Invoice", invoice_id)
        if expected_version is not None and invoice.version != expected_version:
            raise VersionConflict(invoice.id, expected_version, invoice.version)
        return invoice

    async def _save_and_commit(
        self, invoice: Invoice, extra_events: Sequence[DomainEvent] = ()
    ) -> InvoiceResponseDTO:
        await self.invoice_repo.save(invoice)
        await self.uow.commit()

        response = to_invoice_response(invoice, self.clock.today())
        await self._dispatch([*invoice.drain_domain_events(), *extra_events])
        return response

    async def _dispatch(self, events: Sequence[DomainEvent]) -> None:
        """Publish committed events; failures never undo the commit"""
        if not events or self.event_dispatcher is None:
            return
        try:
            delivered = await self.event_dispatcher.dispatch(events)
        except Exception as e:
            logger.error(f"Failed to dispatch {len(events)} domain events: {e}")
            return
        if not delivered:
            logger.warning(f"Some of {len(events)} domain events were not delivered")

    async def _fail(self, exc: Exception) -> Result:
        await self.uow.rollback()
        if isinstance(exc, BillingError):
            logger.warning(f"{type(self).__name__} rejected: [{exc.code}] {exc.message}")
            return Return.err(domain_error(exc))

        logger.error(f"{type(self).__name__} failed unexpectedly: {exc}")
        return Return.err(
            Error(
                code=self.failure_code,
                message=self.failure_message,
                reason=str(exc),
            )
        )
