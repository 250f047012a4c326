"""Database Tables

SQLModel row definitions for the invoice, payment and idempotency stores.
Domain objects never touch these directly; repositories map between them.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional
from sqlmodel import Field, Column, Index, SQLModel
from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, Numeric, String, Text


class InvoiceRow(SQLModel, table=True):
    """
    Stored invoice aggregate

    - line_items holds each item's stored fields with decimals as strings
    - version is compared and bumped on every update
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_customer_id', 'customer_id'),
        Index('ix_invoices_status', 'status'),
    )

    id: str = Field(
        sa_column=Column(String(36), primary_key=True),
        description="Invoice UUID"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-2024-000001)"
    )

    customer_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Customer reference"
    )

    issue_date: date = Field(sa_column=Column(Date, nullable=False))
    due_date: date = Field(sa_column=Column(Date, nullable=False))

    status: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="Invoice status (draft, sent, paid)"
    )

    payment_terms: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True)
    )

    line_items: List[Any] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Line items, decimals stored as strings"
    )

    subtotal: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))
    total_discount: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))
    total_tax: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))
    total_amount: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))
    balance: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Remaining amount due (precision: 18,2)"
    )

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    version: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False),
        description="Optimistic concurrency version"
    )

    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    sent_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    paid_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )


class PaymentRow(SQLModel, table=True):
    """Stored payment; rows are never updated"""

    __tablename__ = "payments"
    __table_args__ = (
        Index('ix_payments_invoice_id', 'invoice_id'),
        Index('ix_payments_payment_date', 'payment_date'),
    )

    id: str = Field(sa_column=Column(String(36), primary_key=True))

    invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id"), nullable=False),
        description="Invoice the payment was applied to"
    )

    payment_date: date = Field(sa_column=Column(Date, nullable=False))

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Payment amount (precision: 18,2)"
    )

    method: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="Payment method (credit_card, bank_transfer, check, cash)"
    )

    reference: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    created_by: str = Field(sa_column=Column(String(255), nullable=False))


class IdempotencyRow(SQLModel, table=True):
    """Cached command result keyed by idempotency key"""

    __tablename__ = "idempotency_records"
    __table_args__ = (
        Index('ix_idempotency_records_expires_at', 'expires_at'),
    )

    key: str = Field(
        sa_column=Column(String(255), primary_key=True),
        description="Client-supplied idempotency key"
    )

    serialized_result: str = Field(
        sa_column=Column(Text, nullable=False),
        description="JSON serialized command response"
    )

    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC datetime for storage"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def from_db(value: Optional[datetime]) -> Optional[datetime]:
    """Backends without timezone support hand back naive UTC values"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
