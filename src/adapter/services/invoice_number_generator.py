"""Sequential Invoice Number Generator

Numbers have the form PREFIX-YYYY-NNNNNN and restart at 1 every year.
"""

from typing import Optional
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.tables import InvoiceRow
from src.app.services.clock import Clock, SystemClock
from src.app.services.invoice_number_generator import InvoiceNumberGenerator


class SequentialInvoiceNumberGenerator(InvoiceNumberGenerator):
    """
    Derives the next number from the highest one stored for the current year

    Two concurrent creations can draw the same number; the unique constraint
    on invoices.invoice_number rejects the second insert.
    """

    def __init__(self, session: AsyncSession, prefix: str = "INV", clock: Optional[Clock] = None):
        self.session = session
        self.prefix = prefix
        self.clock = clock or SystemClock()

    async def next_invoice_number(self) -> str:
        """
        Generate a unique invoice number

        Format: PREFIX-YYYY-NNNNNN (e.g., INV-2024-000001)

        Returns:
            Unique invoice number string
        """
        year = self.clock.now().year
        prefix = f"{self.prefix}-{year}-"

        # Get the highest invoice number for this year
        statement = (
            select(func.max(InvoiceRow.invoice_number))
            .where(InvoiceRow.invoice_number.like(f"{prefix}%"))
        )
        result = await self.session.execute(statement)
        max_number = result.scalar_one_or_none()

        if max_number:
            # Extract the sequence number and increment
            sequence = int(max_number.split("-")[-1]) + 1
        else:
            sequence = 1

        return f"{prefix}{sequence:06d}"
