"""Data Transfer Objects for Payment Use Cases"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class RecordPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a payment

    Used as input to RecordPayment use case.
    """

    invoice_id: Optional[str] = Field(default=None, description="Invoice to pay")
    payment_date: Optional[date] = Field(default=None, description="Date received (not in the future)")
    amount: Optional[Decimal] = Field(default=None, description="Amount received (> 0)")
    method: Optional[str] = Field(
        default=None,
        description="Payment method (credit_card, bank_transfer, check, cash)"
    )
    reference: Optional[str] = Field(default=None, description="External reference, e.g. check number")
    notes: Optional[str] = None
    created_by: Optional[str] = Field(default=None, description="User recording the payment")
    idempotency_key: Optional[str] = Field(
        default=None,
        description="Client token used to deduplicate retried requests"
    )
    expected_version: Optional[int] = Field(
        default=None,
        description="Invoice version the caller last read"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": "0d6f3c1e-8f0c-4c55-9a52-6f7b1f0c2a10",
                "payment_date": "2024-01-15",
                "amount": "200.00",
                "method": "bank_transfer",
                "reference": "WIRE-4411",
                "created_by": "clerk@example.com",
                "idempotency_key": "pay-7c2e9a"
            }
        }


class PaymentResponseDTO(BaseModel):
    """
    Payment with the context of the invoice it was applied to

    remaining_balance is the invoice balance at the time of the response.
    running_balance and payment_type are only set in payment histories.
    """

    payment_id: str = Field(..., description="Payment ID")
    invoice_id: str
    payment_date: date
    amount: Decimal
    method: str = Field(..., description="Payment method value")
    method_display: str = Field(..., description="Human readable payment method")
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    created_by: str
    invoice_number: Optional[str] = None
    invoice_total: Optional[Decimal] = None
    remaining_balance: Optional[Decimal] = None
    invoice_status: Optional[str] = None
    invoice_version: Optional[int] = None
    running_balance: Optional[Decimal] = None
    payment_type: Optional[str] = Field(default=None, description="full or partial")


class PaymentHistoryResponseDTO(BaseModel):
    """Payments of one invoice, oldest first, with running balances"""

    invoice_id: str
    invoice_number: str
    invoice_total: Decimal
    remaining_balance: Decimal
    invoice_status: str
    payments: List[PaymentResponseDTO]


class ListPaymentsResponseDTO(BaseModel):
    payments: List[PaymentResponseDTO]
    total: int
    limit: int
    offset: int


class PaymentStatisticsResponseDTO(BaseModel):
    """Collection totals across all payments"""

    total_collected: Decimal
    collected_today: Decimal
    collected_this_month: Decimal
    collected_this_year: Decimal
    total_payment_count: int
    by_method: Dict[str, Decimal] = Field(
        ...,
        description="Total per payment method; every method is present"
    )
