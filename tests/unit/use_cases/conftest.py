import pytest
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from src.app.services.clock import FixedClock
from src.domain.invoice import Invoice
from src.domain.line_item import LineItem

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


async def _bump_version(invoice):
    invoice.version += 1
    return invoice


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def mock_invoice_repo():
    """Mock invoice repository whose save() bumps the version like the real one"""
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=lambda invoice: invoice)
    repo.save = AsyncMock(side_effect=_bump_version)
    repo.exists_by_invoice_number = AsyncMock(return_value=False)
    return repo


@pytest.fixture
def mock_event_dispatcher():
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(return_value=True)
    return dispatcher


@pytest.fixture
def make_invoice():
    """Factory for a stored invoice with one 500.00 line item"""

    def _make(status="draft", version=3, invoice_id="inv-1", paid=False):
        invoice = Invoice.create(
            customer_id="cus_123",
            issue_date=date(2024, 1, 1),
            due_date=date(2024, 1, 31),
            payment_terms="Net 30",
            invoice_number="INV-2024-000001",
            now=NOW,
        )
        invoice.add_line_item(
            LineItem(id="li-1", description="Widget", quantity=5, unit_price="100.00"), now=NOW
        )
        if status in ("sent", "paid"):
            invoice.send(now=NOW)
        if status == "paid":
            invoice.apply_payment("500.00", now=NOW)
        invoice.drain_domain_events()
        return Invoice.rehydrate(**{**invoice.model_dump(), "id": invoice_id, "version": version})

    return _make
