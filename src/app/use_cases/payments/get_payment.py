"""Get Payment Use Case

Retrieves one payment with the context of its invoice.
"""

from libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from ..errors import not_found
from .dtos import PaymentResponseDTO
from .mappers import to_payment_response


class GetPayment:
    """
    Get Payment Use Case

    Errors:
        PAYMENT_NOT_FOUND: no payment with this id
    """

    def __init__(self, payment_repo: PaymentRepository, invoice_repo: InvoiceRepository):
        """
        Initialize GetPayment use case

        Args:
            payment_repo: Repository for accessing payments
            invoice_repo: Repository used to enrich the response with invoice data
        """
        self.payment_repo = payment_repo
        self.invoice_repo = invoice_repo

    async def execute(self, payment_id: str) -> Result[PaymentResponseDTO]:
        payment = await self.payment_repo.get_by_id(payment_id)
        if not payment:
            return Return.err(not_found("payment", payment_id))

        invoice = await self.invoice_repo.get_by_id(payment.invoice_id)
        return Return.ok(to_payment_response(payment, invoice))
