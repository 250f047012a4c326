"""Integration tests for the SQLAlchemy payment repository"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from src.adapter.repositories import SqlAlchemyInvoiceRepository, SqlAlchemyPaymentRepository
from src.domain.invoice import Invoice
from src.domain.line_item import LineItem
from src.domain.payment import Payment, PaymentMethod
from tests.integration.conftest import NOW


async def stored_invoice(session) -> Invoice:
    invoice = Invoice.create(
        customer_id="cus_123",
        issue_date=date(2024, 1, 1),
        due_date=date(2024, 1, 31),
        payment_terms=None,
        invoice_number="INV-2024-000001",
        now=NOW,
    )
    invoice.add_line_item(LineItem(description="Widget", quantity=10, unit_price="100.00"))
    await SqlAlchemyInvoiceRepository(session).create(invoice)
    return invoice


def payment(invoice_id, amount, method="bank_transfer", payment_date=date(2024, 1, 10), created_at=NOW):
    return Payment.create(
        invoice_id=invoice_id,
        payment_date=payment_date,
        amount=amount,
        method=method,
        reference="REF",
        notes=None,
        created_by="clerk",
        now=created_at,
    )


@pytest.mark.asyncio
class TestPaymentRepository:

    async def test_round_trip(self, db_session):
        invoice = await stored_invoice(db_session)
        repo = SqlAlchemyPaymentRepository(db_session)
        original = payment(invoice.id, "250.50", method="check")

        await repo.create(original)
        await db_session.commit()
        loaded = await repo.get_by_id(original.id)

        assert loaded == original
        assert loaded.amount == Decimal("250.50")
        assert loaded.method == PaymentMethod.CHECK
        assert loaded.created_at.tzinfo is not None
        assert await repo.get_by_id("missing") is None

    async def test_history_is_oldest_first(self, db_session):
        """
        Given: Payments recorded out of date order
        When: The invoice's history is listed
        Then: They come back by payment_date, ties broken by created_at
        """
        # Arrange
        invoice = await stored_invoice(db_session)
        repo = SqlAlchemyPaymentRepository(db_session)
        late = payment(invoice.id, "30", payment_date=date(2024, 1, 12))
        early_second = payment(invoice.id, "20", created_at=NOW + timedelta(minutes=5))
        early_first = payment(invoice.id, "10")
        for item in (late, early_second, early_first):
            await repo.create(item)
        await db_session.commit()

        # Act
        history = await repo.list_by_invoice_id(invoice.id)

        # Assert
        assert [p.id for p in history] == [early_first.id, early_second.id, late.id]

    async def test_list_filters_and_count(self, db_session):
        # Arrange
        invoice = await stored_invoice(db_session)
        repo = SqlAlchemyPaymentRepository(db_session)
        await repo.create(payment(invoice.id, "10", method="cash", payment_date=date(2024, 1, 5)))
        await repo.create(payment(invoice.id, "20", method="cash", payment_date=date(2024, 1, 9)))
        await repo.create(payment(invoice.id, "30", method="check", payment_date=date(2024, 1, 14)))
        await db_session.commit()

        # Act
        cash = await repo.list(method=PaymentMethod.CASH)
        in_range = await repo.list(start_date=date(2024, 1, 6), end_date=date(2024, 1, 14))

        # Assert
        assert [p.amount for p in cash] == [Decimal("20.00"), Decimal("10.00")]
        assert [p.amount for p in in_range] == [Decimal("30.00"), Decimal("20.00")]
        assert await repo.count(invoice_id=invoice.id) == 3
        assert await repo.count(method=PaymentMethod.CHECK) == 1
        assert len(await repo.list(limit=1, offset=2)) == 1
        assert len(await repo.get_all()) == 3
