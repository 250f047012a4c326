"""Invoice Number Generator Interface"""

from abc import ABC, abstractmethod


class InvoiceNumberGenerator(ABC):
    """
    Supplies globally unique invoice numbers

    The aggregate never generates its own number; it receives one at creation.
    """

    @abstractmethod
    async def next_invoice_number(self) -> str:
        """
        Generate the next invoice number

        Returns:
            Unique invoice number string (e.g., INV-2024-000001)
        """
        pass
