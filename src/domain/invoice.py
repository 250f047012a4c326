"""Invoice Aggregate Root

Owns the line items, the cached totals, the balance and the
Draft -> Sent -> Paid lifecycle.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation as DecimalError
from enum import Enum
from typing import Any, Iterable, Optional
from pydantic import Field, PrivateAttr
from src.domain.base import BaseModel, generate_uuid, utcnow
from src.domain.events import (
    DomainEvent,
    InvoiceCreated,
    InvoiceStatusChanged,
    LineItemAdded,
    LineItemRemoved,
    LineItemUpdated,
)
from src.domain.exceptions import (
    ImmutableStateError,
    InsufficientBalance,
    InvalidOperation,
    InvalidStateTransition,
    ValidationError,
)
from src.domain.line_item import LineItem
from src.domain.money import ZERO, Number, round2, sum_money, to_decimal


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class Invoice(BaseModel):
    """
    Invoice - aggregate root for line items, totals and payment balance

    Domain Rules:
    - invoice_number is assigned once at creation and never regenerated
    - due_date >= issue_date
    - line items can only change while status is draft
    - every line item change recomputes the totals and resets balance = total_amount
    - draft -> sent requires at least one line item and total_amount > 0
    - sent -> paid happens when balance reaches zero
    - 0 <= balance <= total_amount; balance only decreases through apply_payment
    - version is bumped by the repository on every successful save
    """

    id: str = Field(default_factory=generate_uuid)
    invoice_number: str
    customer_id: str
    issue_date: date
    due_date: date
    status: InvoiceStatus = InvoiceStatus.DRAFT
    payment_terms: Optional[str] = None
    line_items: list[LineItem] = Field(default_factory=list)
    subtotal: Decimal = ZERO
    total_discount: Decimal = ZERO
    total_tax: Decimal = ZERO
    total_amount: Decimal = ZERO
    balance: Decimal = ZERO
    notes: Optional[str] = None
    version: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    sent_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    _events: list[DomainEvent] = PrivateAttr(default_factory=list)

    @classmethod
    def create(
        cls,
        customer_id: Optional[str],
        issue_date: Optional[date],
        due_date: Optional[date],
        payment_terms: Optional[str],
        invoice_number: Optional[str],
        *,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "Invoice":
        """
        Create a new draft invoice with no line items

        Raises:
            ValidationError: if a required field is missing or due_date < issue_date
        """
        cls._validate_header(customer_id, issue_date, due_date, invoice_number)
        now = now or utcnow()
        invoice = cls(
            invoice_number=invoice_number,
            customer_id=customer_id,
            issue_date=issue_date,
            due_date=due_date,
            payment_terms=payment_terms,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        invoice._record(
            InvoiceCreated(
                invoice_id=invoice.id,
                customer_id=customer_id,
                invoice_number=invoice_number,
                occurred_at=now,
            )
        )
        return invoice

    @classmethod
    def rehydrate(cls, **fields: Any) -> "Invoice":
        """Rebuild an aggregate from stored state; no events are recorded"""
        return cls.model_validate(fields)

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def add_line_item(self, line_item: LineItem, *, now: Optional[datetime] = None) -> None:
        self._ensure_draft()
        self._check_line_item(line_item)
        if self._index_of(line_item.id) is not None:
            raise ValidationError("line_item_id", f"Line item {line_item.id} already exists")

        self.line_items = [*self.line_items, line_item]
        self._recalculate_totals()
        self._touch(now)
        self._record(LineItemAdded(invoice_id=self.id, line_item=line_item))

    def remove_line_item(self, line_item_id: str, *, now: Optional[datetime] = None) -> bool:
        """Remove a line item; unknown ids are ignored and False is returned"""
        self._ensure_draft()
        index = self._index_of(line_item_id)
        if index is None:
            return False

        self.line_items = [item for item in self.line_items if item.id != line_item_id]
        self._recalculate_totals()
        self._touch(now)
        self._record(LineItemRemoved(invoice_id=self.id, line_item_id=line_item_id))
        return True

    def update_line_item(
        self, line_item_id: str, line_item: LineItem, *, now: Optional[datetime] = None
    ) -> bool:
        """Replace the item stored under line_item_id, keeping that id; False if nothing changed"""
        self._ensure_draft()
        self._check_line_item(line_item)
        index = self._index_of(line_item_id)
        if index is None:
            raise ValidationError("line_item_id", f"Line item not found: {line_item_id}")

        replacement = line_item.with_id(line_item_id)
        if replacement == self.line_items[index]:
            return False

        items = list(self.line_items)
        items[index] = replacement
        self.line_items = items
        self._recalculate_totals()
        self._touch(now)
        self._record(LineItemUpdated(invoice_id=self.id, line_item=replacement))
        return True

    def clear_line_items(self, *, now: Optional[datetime] = None) -> None:
        self._ensure_draft()
        if not self.line_items:
            return

        removed = self.line_items
        self.line_items = []
        self._recalculate_totals()
        self._touch(now)
        for item in removed:
            self._record(LineItemRemoved(invoice_id=self.id, line_item_id=item.id))

    def replace_line_items(
        self, line_items: Iterable[LineItem], *, now: Optional[datetime] = None
    ) -> None:
        """Swap the whole collection; every new item is checked before anything changes"""
        self._ensure_draft()
        new_items = list(line_items)
        seen: set[str] = set()
        for item in new_items:
            self._check_line_item(item)
            if item.id in seen:
                raise ValidationError("line_item_id", f"Duplicate line item id {item.id}")
            seen.add(item.id)

        self.clear_line_items(now=now)
        for item in new_items:
            self.add_line_item(item, now=now)

    # ------------------------------------------------------------------
    # Header fields
    # ------------------------------------------------------------------

    def update_fields(
        self,
        customer_id: Optional[str],
        issue_date: Optional[date],
        due_date: Optional[date],
        payment_terms: Optional[str],
        notes: Optional[str],
        *,
        now: Optional[datetime] = None,
    ) -> None:
        self._ensure_draft()
        self._validate_header(customer_id, issue_date, due_date, self.invoice_number)

        self.customer_id = customer_id
        self.issue_date = issue_date
        self.due_date = due_date
        self.payment_terms = payment_terms
        self.notes = notes
        self._touch(now)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def send(self, *, now: Optional[datetime] = None) -> None:
        """Transition draft -> sent; line items are frozen from here on"""
        if self.status != InvoiceStatus.DRAFT:
            raise InvalidStateTransition(
                self.id, self.status.value, InvoiceStatus.SENT.value,
                f"Cannot send invoice in {self.status.value} status; only draft invoices can be sent",
            )
        if not self.line_items:
            raise InvalidStateTransition(
                self.id, self.status.value, InvoiceStatus.SENT.value,
                "Cannot send invoice without line items",
            )
        if self.total_amount <= 0:
            raise InvalidStateTransition(
                self.id, self.status.value, InvoiceStatus.SENT.value,
                "Cannot send invoice with zero total amount",
            )

        now = now or utcnow()
        self.sent_at = now
        self._change_status(InvoiceStatus.SENT, now)

    def mark_paid(self, *, now: Optional[datetime] = None) -> None:
        if self.status != InvoiceStatus.SENT:
            raise InvalidStateTransition(
                self.id, self.status.value, InvoiceStatus.PAID.value,
                "Can only mark sent invoices as paid",
            )
        if self.balance > 0:
            raise InvalidStateTransition(
                self.id, self.status.value, InvoiceStatus.PAID.value,
                f"Cannot mark as paid with outstanding balance {self.balance}",
            )

        now = now or utcnow()
        self.paid_at = now
        self._change_status(InvoiceStatus.PAID, now)

    def apply_payment(self, amount: Optional[Number], *, now: Optional[datetime] = None) -> None:
        """
        Reduce the balance by amount; reaching zero marks the invoice paid

        Raises:
            InvalidOperation: invoice is not sent
            ValidationError: amount missing, not a number or not positive
            InsufficientBalance: amount exceeds the balance
        """
        if not self.can_accept_payment():
            raise InvalidOperation(
                self.id, self.status.value,
                f"Invoice must be in sent status to accept payments (current: {self.status.value})",
            )
        if amount is None:
            raise ValidationError("amount", "Payment amount is required")
        try:
            amount = round2(to_decimal(amount))
        except DecimalError:
            raise ValidationError("amount", "Payment amount must be a finite number") from None
        if amount <= 0:
            raise ValidationError("amount", "Payment amount must be positive")
        if amount > self.balance:
            raise InsufficientBalance(self.id, amount, self.balance)

        now = now or utcnow()
        self.balance = round2(self.balance - amount)
        self._touch(now)
        if self.balance == 0:
            self.mark_paid(now=now)

    # ------------------------------------------------------------------
    # Predicates and read helpers
    # ------------------------------------------------------------------

    def can_be_sent(self) -> bool:
        return (
            self.status == InvoiceStatus.DRAFT
            and bool(self.line_items)
            and self.total_amount > 0
        )

    def can_accept_payment(self) -> bool:
        return self.status == InvoiceStatus.SENT

    def can_be_paid(self) -> bool:
        return self.status == InvoiceStatus.SENT and self.balance > 0

    def is_overdue(self, today: date) -> bool:
        return self.days_overdue(today) is not None

    def days_overdue(self, today: date) -> Optional[int]:
        """Days past due_date, or None when paid or not yet due"""
        if self.status == InvoiceStatus.PAID or today <= self.due_date:
            return None
        return (today - self.due_date).days

    def get_line_item(self, line_item_id: str) -> Optional[LineItem]:
        index = self._index_of(line_item_id)
        return None if index is None else self.line_items[index]

    def drain_domain_events(self) -> list[DomainEvent]:
        """Return pending events and clear them"""
        events = list(self._events)
        self._events.clear()
        return events

    @property
    def has_pending_events(self) -> bool:
        return bool(self._events)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_header(
        customer_id: Optional[str],
        issue_date: Optional[date],
        due_date: Optional[date],
        invoice_number: Optional[str],
    ) -> None:
        if customer_id is None or (isinstance(customer_id, str) and not customer_id.strip()):
            raise ValidationError("customer_id", "Customer ID is required")
        if issue_date is None:
            raise ValidationError("issue_date", "Issue date is required")
        if due_date is None:
            raise ValidationError("due_date", "Due date is required")
        if due_date < issue_date:
            raise ValidationError("due_date", "Due date must be on or after issue date")
        if invoice_number is None or not invoice_number.strip():
            raise ValidationError("invoice_number", "Invoice number is required")

    @staticmethod
    def _check_line_item(line_item: Any) -> None:
        if not isinstance(line_item, LineItem):
            raise ValidationError("line_item", "Line item is required")

    def _ensure_draft(self) -> None:
        if self.status != InvoiceStatus.DRAFT:
            raise ImmutableStateError(self.id, self.status.value)

    def _index_of(self, line_item_id: str) -> Optional[int]:
        for index, item in enumerate(self.line_items):
            if item.id == line_item_id:
                return index
        return None

    def _recalculate_totals(self) -> None:
        # sums of per-item rounded values, never a re-rounding of raw sums
        self.subtotal = sum_money(item.subtotal for item in self.line_items)
        self.total_discount = sum_money(item.discount_amount for item in self.line_items)
        self.total_tax = sum_money(item.tax_amount for item in self.line_items)
        self.total_amount = sum_money(item.total for item in self.line_items)
        self.balance = self.total_amount

    def _change_status(self, new_status: InvoiceStatus, now: datetime) -> None:
        old_status = self.status
        self.status = new_status
        self._touch(now)
        self._record(
            InvoiceStatusChanged(
                invoice_id=self.id,
                old_status=old_status.value,
                new_status=new_status.value,
                occurred_at=now,
            )
        )

    def _touch(self, now: Optional[datetime]) -> None:
        self.updated_at = now or utcnow()

    def _record(self, event: DomainEvent) -> None:
        self._events.append(event)
