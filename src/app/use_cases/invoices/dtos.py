"""Data Transfer Objects for Invoice Use Cases

Pydantic models for command inputs and response outputs. Field rules are
enforced by the domain, not here, so callers get typed domain errors.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class LineItemInputDTO(BaseModel):
    """Line item as supplied by a command"""

    id: Optional[str] = Field(
        default=None,
        description="Existing line item id; generated when omitted"
    )
    description: Optional[str] = Field(default=None, description="Line item description")
    quantity: Optional[int] = Field(default=None, description="Quantity (must be > 0)")
    unit_price: Optional[Decimal] = Field(default=None, description="Price per unit (>= 0)")
    discount_percent: Optional[Decimal] = Field(
        default=None,
        description="Discount as a fraction between 0 and 1"
    )
    tax_rate: Optional[Decimal] = Field(default=None, description="Tax rate as a fraction (>= 0)")

    class Config:
        json_schema_extra = {
            "example": {
                "description": "Consulting hours",
                "quantity": 10,
                "unit_price": "100.00",
                "discount_percent": "0.10",
                "tax_rate": "0.08"
            }
        }


class LineItemResponseDTO(BaseModel):
    """Line item with its derived breakdown"""

    id: str
    description: str
    quantity: int
    unit_price: Decimal
    discount_percent: Decimal
    tax_rate: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total: Decimal


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    customer_id: Optional[str] = Field(default=None, description="Customer reference")
    issue_date: Optional[date] = Field(default=None, description="Issue date")
    due_date: Optional[date] = Field(
        default=None,
        description="Due date (defaults to issue_date, must be >= issue_date)"
    )
    payment_terms: Optional[str] = Field(default=None, description="Payment terms, e.g. 'Net 30'")
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    line_items: List[LineItemInputDTO] = Field(
        default_factory=list,
        description="At least one line item"
    )
    idempotency_key: Optional[str] = Field(
        default=None,
        description="Client token used to deduplicate retried requests"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cus_123",
                "issue_date": "2024-01-01",
                "due_date": "2024-01-31",
                "payment_terms": "Net 30",
                "line_items": [
                    {"description": "Consulting hours", "quantity": 10, "unit_price": "100.00"}
                ],
                "idempotency_key": "create-invoice-5f1c"
            }
        }


class UpdateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for updating a draft invoice

    Replaces header fields and the whole line item collection.
    """

    invoice_id: str = Field(..., description="Invoice ID")
    version: int = Field(..., description="Version the caller last read")
    customer_id: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    line_items: List[LineItemInputDTO] = Field(default_factory=list)


class AddLineItemCommandDTO(BaseModel):
    invoice_id: str
    line_item: LineItemInputDTO
    expected_version: Optional[int] = None


class UpdateLineItemCommandDTO(BaseModel):
    invoice_id: str
    line_item_id: str
    line_item: LineItemInputDTO
    expected_version: Optional[int] = None


class RemoveLineItemCommandDTO(BaseModel):
    invoice_id: str
    line_item_id: str
    expected_version: Optional[int] = None


class InvoiceTransitionCommandDTO(BaseModel):
    """Command DTO for send / mark-paid transitions"""

    invoice_id: str
    expected_version: Optional[int] = None


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for invoice operations

    Returned by every invoice command and query.
    """

    invoice_id: str = Field(..., description="Invoice ID")
    invoice_number: str = Field(..., description="Unique invoice number")
    customer_id: str = Field(..., description="Customer reference")
    issue_date: date
    due_date: date
    status: str = Field(..., description="Invoice status (draft, sent, paid)")
    payment_terms: Optional[str] = None
    line_items: List[LineItemResponseDTO] = Field(default_factory=list)
    subtotal: Decimal
    total_discount: Decimal
    total_tax: Decimal
    total_amount: Decimal
    balance: Decimal
    notes: Optional[str] = None
    version: int = Field(..., description="Version to pass back on the next update")
    created_at: datetime
    updated_at: datetime
    sent_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    days_overdue: Optional[int] = Field(
        default=None,
        description="Days past due date; None when paid or not yet due"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": "0d6f3c1e-8f0c-4c55-9a52-6f7b1f0c2a10",
                "invoice_number": "INV-2024-000001",
                "customer_id": "cus_123",
                "issue_date": "2024-01-01",
                "due_date": "2024-01-31",
                "status": "sent",
                "subtotal": "1000.00",
                "total_discount": "100.00",
                "total_tax": "72.00",
                "total_amount": "972.00",
                "balance": "972.00",
                "version": 2
            }
        }


class ListInvoicesResponseDTO(BaseModel):
    invoices: List[InvoiceResponseDTO]
    total: int
    limit: int
    offset: int


class DashboardStatsResponseDTO(BaseModel):
    """Aggregate invoice figures for dashboards"""

    total_invoices: int
    draft_invoices: int
    sent_invoices: int
    paid_invoices: int
    total_revenue: Decimal = Field(..., description="Sum of paid invoice totals")
    outstanding_amount: Decimal = Field(..., description="Sum of sent invoice balances")
    overdue_amount: Decimal = Field(..., description="Sum of overdue sent invoice balances")
