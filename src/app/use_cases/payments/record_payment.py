"""RecordPayment Use Case

Records a payment against a sent invoice, reducing its balance and marking
it paid once the balance reaches zero.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.clock import Clock, SystemClock
from src.app.services.event_dispatcher import EventDispatcher
from src.app.services.idempotency_guard import IdempotencyGuard
from src.app.services.unit_of_work import UnitOfWork
from src.domain.events import PaymentRecorded
from src.domain.exceptions import BillingError, InvalidOperation, NotFound, VersionConflict
from src.domain.invoice import InvoiceStatus
from src.domain.payment import Payment
from ..errors import domain_error
from .dtos import RecordPaymentCommandDTO, PaymentResponseDTO
from .mappers import to_payment_response

logger = logging.getLogger(__name__)


class RecordPayment:
    """
    Use Case: Record a payment against an invoice

    Business Rules:
    1. Idempotency: a repeated idempotency_key returns the first response
    2. Invoice must be sent
    3. Payment amount must not exceed the balance
    4. Payment insert and invoice update commit together, guarded by the
       invoice version
    5. Balance reaching zero moves the invoice to paid

    Flow:
    1. Check idempotency (return cached response if found)
    2. Load invoice and compare expected version
    3. Validate invoice can accept payments
    4. Create Payment entity
    5. Apply payment to invoice
    6. Persist payment, save invoice (version check), commit
    7. Store idempotency record, dispatch events
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        idempotency_guard: IdempotencyGuard,
        clock: Optional[Clock] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.idempotency_guard = idempotency_guard
        self.clock = clock or SystemClock()
        self.event_dispatcher = event_dispatcher

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        """
        Execute payment recording

        Args:
            command: RecordPaymentCommandDTO with invoice_id, amount, method, idempotency_key

        Returns:
            Result[PaymentResponseDTO]: Payment with the updated invoice balance, or error
        """
        try:
            # Step 1: Check idempotency
            cached = await self.idempotency_guard.check(
                command.idempotency_key, PaymentResponseDTO
            )
            if cached is not None:
                return Return.ok(cached)

            # Step 2: Load invoice
            invoice = await self.invoice_repo.get_by_id(command.invoice_id) if command.invoice_id else None
            if invoice is None:
                raise NotFound("Invoice", command.invoice_id)
            if command.expected_version is not None and invoice.version != command.expected_version:
                raise VersionConflict(invoice.id, command.expected_version, invoice.version)

            # Step 3: Invoice must be sent
            if not invoice.can_accept_payment():
                raise InvalidOperation(
                    invoice.id,
                    invoice.status.value,
                    f"Invoice must be in sent status to accept payments "
                    f"(current: {invoice.status.value})",
                )

            # Step 4: Create Payment entity
            now = self.clock.now()
            payment = Payment.create(
                invoice_id=command.invoice_id,
                payment_date=command.payment_date,
                amount=command.amount,
                method=command.method,
                reference=command.reference,
                notes=command.notes,
                created_by=command.created_by,
                now=now,
            )

            # Step 5: Apply to invoice (auto-transitions to paid at zero balance)
            invoice.apply_payment(payment.amount, now=now)

            # Step 6: Persist both under the invoice version check
            await self.payment_repo.create(payment)
            await self.invoice_repo.save(invoice)
            await self.uow.commit()

        except BillingError as e:
            await self.uow.rollback()
            logger.warning(
                f"Payment rejected for invoice {command.invoice_id}: [{e.code}] {e.message}"
            )
            return Return.err(domain_error(e))
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record payment for invoice {command.invoice_id}: {e}")
            return Return.err(
                Error(
                    code="RECORD_PAYMENT_FAILED",
                    message="Failed to record payment",
                    reason=str(e),
                )
            )

        # Step 7: Bookkeeping after commit
        response = to_payment_response(payment, invoice)
        logger.info(
            f"Payment recorded: payment_id={payment.id}, invoice={invoice.invoice_number}, "
            f"amount={payment.amount}, new_balance={invoice.balance}, status={invoice.status.value}"
        )
        if invoice.status == InvoiceStatus.PAID:
            logger.info(f"Invoice {invoice.invoice_number} marked as paid due to zero balance")

        await self.idempotency_guard.store(command.idempotency_key, response)

        events = invoice.drain_domain_events()
        events.append(
            PaymentRecorded(
                invoice_id=invoice.id,
                payment_id=payment.id,
                amount=payment.amount,
                payment_date=payment.payment_date,
                new_balance=invoice.balance,
                new_status=invoice.status.value,
                idempotency_key=command.idempotency_key,
                occurred_at=now,
            )
        )
        await self._dispatch(events)
        return Return.ok(response)

    async def _dispatch(self, events) -> None:
        if self.event_dispatcher is None:
            return
        try:
            delivered = await self.event_dispatcher.dispatch(events)
        except Exception as e:
            logger.error(f"Failed to dispatch payment events: {e}")
            return
        if not delivered:
            logger.warning(f"Some of {len(events)} payment events were not delivered")
