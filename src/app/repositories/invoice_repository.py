"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from src.domain.invoice import Invoice, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for the Invoice aggregate

    Concurrency control is optimistic: save() compares the aggregate's version
    with the stored one and refuses to overwrite a newer row.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Insert a new invoice at version 0

        Args:
            invoice: Freshly created Invoice aggregate

        Returns:
            The persisted Invoice
        """
        pass

    @abstractmethod
    async def save(self, invoice: Invoice) -> Invoice:
        """
        Persist changes to an existing invoice

        The invoice's version must equal the stored version. On success the
        stored version and invoice.version are both incremented by one.

        Args:
            invoice: Invoice loaded earlier and mutated since

        Returns:
            The persisted Invoice with its new version

        Raises:
            VersionConflict: stored version differs from invoice.version
            NotFound: invoice row no longer exists
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        """
        Retrieve invoice by invoice number

        Args:
            invoice_number: Unique invoice number

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def exists_by_invoice_number(self, invoice_number: str) -> bool:
        """
        Check whether an invoice number is already taken

        Args:
            invoice_number: Invoice number to check

        Returns:
            True if an invoice with this number exists, False otherwise
        """
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def count(
        self, status: Optional[InvoiceStatus] = None, customer_id: Optional[str] = None
    ) -> int:
        pass

    @abstractmethod
    async def get_all(self) -> List[Invoice]:
        """
        Retrieve every invoice

        Used by dashboard statistics.
        """
        pass
