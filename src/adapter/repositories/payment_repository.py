"""SQLAlchemy Payment Repository Implementation"""

from datetime import date
from typing import Optional, List
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment, PaymentMethod
from .tables import PaymentRow, from_db, to_utc


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Append-only: payments are inserted and never updated.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Args:
            payment: Payment entity to persist

        Returns:
            The persisted Payment
        """
        row = PaymentRow(
            id=payment.id,
            invoice_id=payment.invoice_id,
            payment_date=payment.payment_date,
            amount=payment.amount,
            method=payment.method.value,
            reference=payment.reference,
            notes=payment.notes,
            created_at=to_utc(payment.created_at),
            created_by=payment.created_by,
        )
        self.session.add(row)
        await self.session.flush()
        return payment

    async def get_by_id(self, payment_id: str) -> Optional[Payment]:
        statement = select(PaymentRow).where(PaymentRow.id == payment_id)
        result = await self.session.execute(statement)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def list_by_invoice_id(self, invoice_id: str) -> List[Payment]:
        """
        Retrieve an invoice's payments, oldest first

        Args:
            invoice_id: Invoice ID

        Returns:
            Payments ordered by payment_date, then created_at
        """
        statement = (
            select(PaymentRow)
            .where(PaymentRow.invoice_id == invoice_id)
            .order_by(PaymentRow.payment_date, PaymentRow.created_at)
        )
        result = await self.session.execute(statement)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def list(
        self,
        invoice_id: Optional[str] = None,
        method: Optional[PaymentMethod] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Payment]:
        """
        List payments newest first

        Args:
            invoice_id: Optional filter by invoice
            method: Optional filter by payment method
            start_date: Optional inclusive lower bound on payment_date
            end_date: Optional inclusive upper bound on payment_date
            limit: Maximum number of payments to return
            offset: Offset for pagination

        Returns:
            List of payments
        """
        statement = self._filtered(select(PaymentRow), invoice_id, method, start_date, end_date)
        statement = statement.order_by(PaymentRow.payment_date.desc(), PaymentRow.created_at.desc())
        statement = statement.limit(limit).offset(offset)
        result = await self.session.execute(statement)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def count(
        self,
        invoice_id: Optional[str] = None,
        method: Optional[PaymentMethod] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        statement = self._filtered(
            select(func.count()).select_from(PaymentRow),
            invoice_id, method, start_date, end_date,
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def get_all(self) -> List[Payment]:
        statement = select(PaymentRow).order_by(PaymentRow.payment_date, PaymentRow.created_at)
        result = await self.session.execute(statement)
        return [self._to_domain(row) for row in result.scalars().all()]

    @staticmethod
    def _filtered(statement, invoice_id, method, start_date, end_date):
        if invoice_id:
            statement = statement.where(PaymentRow.invoice_id == invoice_id)
        if method:
            statement = statement.where(PaymentRow.method == PaymentMethod(method).value)
        if start_date:
            statement = statement.where(PaymentRow.payment_date >= start_date)
        if end_date:
            statement = statement.where(PaymentRow.payment_date <= end_date)
        return statement

    @staticmethod
    def _to_domain(row: PaymentRow) -> Payment:
        return Payment.rehydrate(
            id=row.id,
            invoice_id=row.invoice_id,
            payment_date=row.payment_date,
            amount=row.amount,
            method=row.method,
            reference=row.reference,
            notes=row.notes,
            created_at=from_db(row.created_at),
            created_by=row.created_by,
        )
