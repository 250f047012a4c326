"""Payment Domain Entity

A payment applied to an invoice. Built only through Payment.create and
never changed afterwards.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional
from pydantic import ConfigDict, Field
from src.domain.base import BaseModel, generate_uuid, utcnow
from src.domain.exceptions import InvalidPayment
from src.domain.money import round2, to_decimal


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class Payment(BaseModel):
    """
    Payment - immutable record of money received against an invoice

    Domain Rules:
    - invoice_id is required (reference only, no containment)
    - payment_date is required and not in the future
    - amount > 0, normalized to 2 decimals
    - method is one of PaymentMethod
    - created_by is non-blank
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_uuid)
    invoice_id: str
    payment_date: date
    amount: Decimal
    method: PaymentMethod
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    created_by: str

    @classmethod
    def create(
        cls,
        invoice_id: Optional[str],
        payment_date: Optional[date],
        amount: Any,
        method: Any,
        reference: Optional[str],
        notes: Optional[str],
        created_by: Optional[str],
        *,
        now: Optional[datetime] = None,
    ) -> "Payment":
        """
        Validate inputs and build a Payment

        Raises:
            InvalidPayment: naming the first field that violates a rule
        """
        now = now or utcnow()

        if invoice_id is None or (isinstance(invoice_id, str) and not invoice_id.strip()):
            raise InvalidPayment("invoice_id", "Invoice ID is required")

        if payment_date is None:
            raise InvalidPayment("payment_date", "Payment date is required")
        if payment_date > now.date():
            raise InvalidPayment("payment_date", "Payment date cannot be in the future")

        if amount is None:
            raise InvalidPayment("amount", "Payment amount is required")
        try:
            amount = round2(to_decimal(amount))
        except InvalidOperation:
            raise InvalidPayment("amount", "Payment amount must be a finite number") from None
        if amount <= 0:
            raise InvalidPayment("amount", "Payment amount must be positive")

        if method is None:
            raise InvalidPayment("method", "Payment method is required")
        try:
            method = PaymentMethod(method)
        except ValueError:
            raise InvalidPayment("method", f"Unknown payment method: {method}") from None

        if created_by is None or not created_by.strip():
            raise InvalidPayment("created_by", "Created by is required")

        return cls(
            invoice_id=invoice_id,
            payment_date=payment_date,
            amount=amount,
            method=method,
            reference=reference,
            notes=notes,
            created_at=now,
            created_by=created_by,
        )

    @classmethod
    def rehydrate(cls, **fields: Any) -> "Payment":
        """Rebuild a stored payment without re-running creation rules"""
        return cls.model_validate(fields)
