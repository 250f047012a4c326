"""Payment Repository Interface

Defines the contract for payment persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List
from src.domain.payment import Payment, PaymentMethod


class PaymentRepository(ABC):
    """
    Repository interface for Payment persistence

    Payments are immutable and append-only.
    """

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Persist a new payment

        Args:
            payment: Payment built by Payment.create

        Returns:
            The persisted Payment
        """
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: str) -> Optional[Payment]:
        pass

    @abstractmethod
    async def list_by_invoice_id(self, invoice_id: str) -> List[Payment]:
        """
        Retrieve an invoice's payments ordered by payment_date, then creation

        Args:
            invoice_id: Invoice ID

        Returns:
            Payments oldest first
        """
        pass

    @abstractmethod
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
        List payments newest first with optional filters

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
        pass

    @abstractmethod
    async def count(
        self,
        invoice_id: Optional[str] = None,
        method: Optional[PaymentMethod] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        pass

    @abstractmethod
    async def get_all(self) -> List[Payment]:
        """Retrieve every payment (used by payment statistics)"""
        pass
