"""Domain Events

Records accumulated by the Invoice aggregate during a unit of work and
drained by the caller after a successful commit.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, ClassVar, Optional
from pydantic import ConfigDict, Field
from src.domain.base import BaseModel, generate_uuid, utcnow
from src.domain.line_item import LineItem


class DomainEvent(BaseModel):
    """Base record for every domain event"""

    model_config = ConfigDict(frozen=True)

    event_type: ClassVar[str] = "DomainEvent"

    event_id: str = Field(default_factory=generate_uuid)
    occurred_at: datetime = Field(default_factory=utcnow)
    invoice_id: str

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe representation for dispatchers"""
        return {"event_type": self.event_type, **self.model_dump(mode="json")}


class InvoiceCreated(DomainEvent):
    event_type: ClassVar[str] = "InvoiceCreated"

    customer_id: str
    invoice_number: str


class LineItemAdded(DomainEvent):
    event_type: ClassVar[str] = "LineItemAdded"

    line_item: LineItem


class LineItemRemoved(DomainEvent):
    event_type: ClassVar[str] = "LineItemRemoved"

    line_item_id: str


class LineItemUpdated(DomainEvent):
    event_type: ClassVar[str] = "LineItemUpdated"

    line_item: LineItem


class InvoiceStatusChanged(DomainEvent):
    event_type: ClassVar[str] = "InvoiceStatusChanged"

    old_status: str
    new_status: str


class PaymentRecorded(DomainEvent):
    event_type: ClassVar[str] = "PaymentRecorded"

    payment_id: str
    amount: Decimal
    payment_date: date
    new_balance: Decimal
    new_status: str
    idempotency_key: Optional[str] = None
