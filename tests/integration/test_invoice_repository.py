"""Integration tests for the SQLAlchemy invoice repository

Covers the round trip through the invoices table and the version
compare-and-swap performed on save.
"""

import pytest
from datetime import date
from decimal import Decimal
from src.adapter.repositories import SqlAlchemyInvoiceRepository
from src.adapter.services.invoice_number_generator import SequentialInvoiceNumberGenerator
from src.domain.exceptions import NotFound, VersionConflict
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.line_item import LineItem
from tests.integration.conftest import NOW


def draft_invoice(number="INV-2024-000001", customer_id="cus_123") -> Invoice:
    invoice = Invoice.create(
        customer_id=customer_id,
        issue_date=date(2024, 1, 1),
        due_date=date(2024, 1, 31),
        payment_terms="Net 30",
        invoice_number=number,
        notes="First order",
        now=NOW,
    )
    invoice.add_line_item(
        LineItem(
            id="li-1",
            description="Consulting hours",
            quantity=10,
            unit_price="100.00",
            discount_percent="0.10",
            tax_rate="0.08",
        ),
        now=NOW,
    )
    return invoice


@pytest.mark.asyncio
class TestInvoicePersistence:

    async def test_round_trip(self, db_session):
        """
        Given: A draft invoice with one discounted, taxed line item
        When: It is inserted and read back
        Then: Every field, including decimals and timestamps, survives
        """
        # Arrange
        repo = SqlAlchemyInvoiceRepository(db_session)
        invoice = draft_invoice()

        # Act
        await repo.create(invoice)
        await db_session.commit()
        loaded = await repo.get_by_id(invoice.id)

        # Assert
        assert loaded is not None
        assert loaded.version == 0
        assert loaded.status == InvoiceStatus.DRAFT
        assert loaded.total_amount == Decimal("972.00")
        assert loaded.balance == Decimal("972.00")
        assert loaded.line_items == invoice.line_items
        assert loaded.line_items[0].discount_percent == Decimal("0.1000")
        assert loaded.created_at == NOW
        assert loaded.created_at.tzinfo is not None
        assert loaded.notes == "First order"
        assert not loaded.has_pending_events

    async def test_lookup_by_number(self, db_session):
        repo = SqlAlchemyInvoiceRepository(db_session)
        invoice = draft_invoice()
        await repo.create(invoice)
        await db_session.commit()

        assert (await repo.get_by_invoice_number("INV-2024-000001")).id == invoice.id
        assert await repo.exists_by_invoice_number("INV-2024-000001")
        assert not await repo.exists_by_invoice_number("INV-2024-999999")
        assert await repo.get_by_id("missing") is None

    async def test_list_and_count_with_filters(self, db_session):
        # Arrange
        repo = SqlAlchemyInvoiceRepository(db_session)
        first = draft_invoice("INV-2024-000001", customer_id="cus_a")
        second = draft_invoice("INV-2024-000002", customer_id="cus_b")
        third = draft_invoice("INV-2024-000003", customer_id="cus_a")
        for invoice in (first, second, third):
            await repo.create(invoice)
        third.send(now=NOW)
        await repo.save(third)
        await db_session.commit()

        # Act
        drafts = await repo.list(status=InvoiceStatus.DRAFT)
        customer_a = await repo.list(customer_id="cus_a", limit=1)

        # Assert
        assert {invoice.id for invoice in drafts} == {first.id, second.id}
        assert len(customer_a) == 1
        assert await repo.count() == 3
        assert await repo.count(status=InvoiceStatus.SENT) == 1
        assert await repo.count(customer_id="cus_a") == 2
        assert len(await repo.get_all()) == 3


@pytest.mark.asyncio
class TestOptimisticConcurrency:

    async def test_save_increments_version(self, db_session):
        repo = SqlAlchemyInvoiceRepository(db_session)
        invoice = draft_invoice()
        await repo.create(invoice)

        invoice.send(now=NOW)
        await repo.save(invoice)
        await db_session.commit()

        assert invoice.version == 1
        loaded = await repo.get_by_id(invoice.id)
        assert loaded.version == 1
        assert loaded.status == InvoiceStatus.SENT
        assert loaded.sent_at == NOW

    async def test_stale_save_is_rejected(self, db_session):
        repo = SqlAlchemyInvoiceRepository(db_session)
        invoice = draft_invoice()
        await repo.create(invoice)
        await db_session.commit()

        stale = await repo.get_by_id(invoice.id)
        invoice.notes = "first writer"
        await repo.save(invoice)
        await db_session.commit()

        stale.notes = "second writer"
        with pytest.raises(VersionConflict) as exc_info:
            await repo.save(stale)

        assert exc_info.value.expected_version == 0
        assert exc_info.value.actual_version == 1
        await db_session.rollback()
        assert (await repo.get_by_id(invoice.id)).notes == "first writer"

    async def test_concurrent_sessions(self, session_factory):
        """
        Given: Two sessions load the same invoice at version 0
        When: Both apply a change and save
        Then: The first commit wins and the second gets VersionConflict
        """
        # Arrange
        async with session_factory() as setup:
            invoice = draft_invoice()
            await SqlAlchemyInvoiceRepository(setup).create(invoice)
            await setup.commit()

        async with session_factory() as session_a, session_factory() as session_b:
            repo_a = SqlAlchemyInvoiceRepository(session_a)
            repo_b = SqlAlchemyInvoiceRepository(session_b)
            copy_a = await repo_a.get_by_id(invoice.id)
            copy_b = await repo_b.get_by_id(invoice.id)

            # Act
            copy_a.send(now=NOW)
            await repo_a.save(copy_a)
            await session_a.commit()

            copy_b.remove_line_item("li-1", now=NOW)
            with pytest.raises(VersionConflict):
                await repo_b.save(copy_b)
            await session_b.rollback()

        # Assert
        async with session_factory() as check:
            stored = await SqlAlchemyInvoiceRepository(check).get_by_id(invoice.id)
            assert stored.version == 1
            assert stored.status == InvoiceStatus.SENT
            assert len(stored.line_items) == 1

    async def test_save_of_deleted_invoice(self, db_session):
        repo = SqlAlchemyInvoiceRepository(db_session)

        with pytest.raises(NotFound):
            await repo.save(draft_invoice())


@pytest.mark.asyncio
class TestSequentialInvoiceNumberGenerator:

    async def test_numbers_increment_within_year(self, db_session, clock):
        repo = SqlAlchemyInvoiceRepository(db_session)
        generator = SequentialInvoiceNumberGenerator(db_session, prefix="INV", clock=clock)

        first = await generator.next_invoice_number()
        await repo.create(draft_invoice(first))
        second = await generator.next_invoice_number()

        assert first == "INV-2024-000001"
        assert second == "INV-2024-000002"

    async def test_sequence_restarts_each_year(self, db_session, clock):
        repo = SqlAlchemyInvoiceRepository(db_session)
        await repo.create(draft_invoice("INV-2024-000041"))
        generator = SequentialInvoiceNumberGenerator(db_session, prefix="INV", clock=clock)

        clock.advance(days=365)

        assert await generator.next_invoice_number() == "INV-2025-000001"
