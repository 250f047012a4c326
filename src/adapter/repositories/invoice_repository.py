"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Any, Dict, Optional, List
from sqlalchemy import update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.exceptions import NotFound, VersionConflict
from src.domain.invoice import Invoice, InvoiceStatus
from .tables import InvoiceRow, from_db, to_utc


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Updates are a compare-and-swap on the version column:
    UPDATE invoices SET ..., version = version + 1 WHERE id = :id AND version = :expected
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Insert a new invoice

        Args:
            invoice: Invoice aggregate to persist

        Returns:
            The same Invoice, now at version 0
        """
        invoice.version = 0
        self.session.add(InvoiceRow(**self._to_values(invoice), version=0))
        await self.session.flush()
        return invoice

    async def save(self, invoice: Invoice) -> Invoice:
        """
        Write the aggregate if nobody else has since it was read

        Raises:
            VersionConflict: stored version differs from invoice.version
            NotFound: the row is gone
        """
        statement = (
            update(InvoiceRow)
            .where(InvoiceRow.id == invoice.id)
            .where(InvoiceRow.version == invoice.version)
            .values(**self._to_values(invoice), version=invoice.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)

        if result.rowcount == 0:
            current = await self.session.execute(
                select(InvoiceRow.version).where(InvoiceRow.id == invoice.id)
            )
            actual_version = current.scalar_one_or_none()
            if actual_version is None:
                raise NotFound("Invoice", invoice.id)
            raise VersionConflict(invoice.id, invoice.version, actual_version)

        invoice.version += 1
        return invoice

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(InvoiceRow).where(InvoiceRow.id == invoice_id)
        return await self._fetch_one(statement)

    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        """
        Retrieve invoice by invoice number

        Args:
            invoice_number: Unique invoice number

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(InvoiceRow).where(InvoiceRow.invoice_number == invoice_number)
        return await self._fetch_one(statement)

    async def exists_by_invoice_number(self, invoice_number: str) -> bool:
        statement = (
            select(func.count())
            .select_from(InvoiceRow)
            .where(InvoiceRow.invoice_number == invoice_number)
        )
        result = await self.session.execute(statement)
        return result.scalar_one() > 0

    async def list(
        self,
        status: Optional[InvoiceStatus] = None,
        customer_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Invoice]:
        """
        List invoices, newest first

        Args:
            status: Optional filter by status
            customer_id: Optional filter by customer
            limit: Maximum number of invoices to return
            offset: Offset for pagination

        Returns:
            List of invoices
        """
        statement = self._filtered(select(InvoiceRow), status, customer_id)
        statement = statement.order_by(InvoiceRow.created_at.desc(), InvoiceRow.invoice_number.desc())
        statement = statement.limit(limit).offset(offset)
        return await self._fetch_all(statement)

    async def count(
        self, status: Optional[InvoiceStatus] = None, customer_id: Optional[str] = None
    ) -> int:
        statement = self._filtered(
            select(func.count()).select_from(InvoiceRow), status, customer_id
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def get_all(self) -> List[Invoice]:
        statement = select(InvoiceRow).order_by(InvoiceRow.created_at)
        return await self._fetch_all(statement)

    @staticmethod
    def _filtered(statement, status: Optional[InvoiceStatus], customer_id: Optional[str]):
        if status:
            statement = statement.where(InvoiceRow.status == InvoiceStatus(status).value)
        if customer_id:
            statement = statement.where(InvoiceRow.customer_id == customer_id)
        return statement

    async def _fetch_one(self, statement) -> Optional[Invoice]:
        # rows updated through save() bypass the identity map
        result = await self.session.execute(statement.execution_options(populate_existing=True))
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def _fetch_all(self, statement) -> List[Invoice]:
        result = await self.session.execute(statement.execution_options(populate_existing=True))
        return [self._to_domain(row) for row in result.scalars().all()]

    @staticmethod
    def _to_values(invoice: Invoice) -> Dict[str, Any]:
        return {
            "id": invoice.id,
            "invoice_number": invoice.invoice_number,
            "customer_id": invoice.customer_id,
            "issue_date": invoice.issue_date,
            "due_date": invoice.due_date,
            "status": invoice.status.value,
            "payment_terms": invoice.payment_terms,
            "line_items": [item.to_storage() for item in invoice.line_items],
            "subtotal": invoice.subtotal,
            "total_discount": invoice.total_discount,
            "total_tax": invoice.total_tax,
            "total_amount": invoice.total_amount,
            "balance": invoice.balance,
            "notes": invoice.notes,
            "created_at": to_utc(invoice.created_at),
            "updated_at": to_utc(invoice.updated_at),
            "sent_at": to_utc(invoice.sent_at),
            "paid_at": to_utc(invoice.paid_at),
        }

    @staticmethod
    def _to_domain(row: InvoiceRow) -> Invoice:
        return Invoice.rehydrate(
            id=row.id,
            invoice_number=row.invoice_number,
            customer_id=row.customer_id,
            issue_date=row.issue_date,
            due_date=row.due_date,
            status=row.status,
            payment_terms=row.payment_terms,
            line_items=list(row.line_items or []),
            subtotal=row.subtotal,
            total_discount=row.total_discount,
            total_tax=row.total_tax,
            total_amount=row.total_amount,
            balance=row.balance,
            notes=row.notes,
            version=row.version,
            created_at=from_db(row.created_at),
            updated_at=from_db(row.updated_at),
            sent_at=from_db(row.sent_at),
            paid_at=from_db(row.paid_at),
        )
