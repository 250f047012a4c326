"""Unit tests for payment history and statistics reductions"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from src.domain.invoice import Invoice
from src.domain.line_item import LineItem
from src.domain.payment import Payment, PaymentMethod
from src.domain.reconciliation import (
    PaymentType,
    build_payment_history,
    summarize_invoices,
    summarize_payments,
)

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
TODAY = date(2024, 3, 15)


def make_payment(amount, payment_date, method="cash", invoice_id="inv-1", created_offset=0):
    return Payment.create(
        invoice_id=invoice_id,
        payment_date=payment_date,
        amount=amount,
        method=method,
        reference=None,
        notes=None,
        created_by="clerk",
        now=NOW + timedelta(seconds=created_offset),
    )


def make_invoice(total, due_date=date(2024, 3, 31), number="INV-1") -> Invoice:
    invoice = Invoice.create(
        customer_id="cus_1",
        issue_date=date(2024, 3, 1),
        due_date=due_date,
        payment_terms=None,
        invoice_number=number,
    )
    invoice.add_line_item(LineItem(description="Work", quantity=1, unit_price=total))
    return invoice


class TestPaymentHistory:

    def test_running_balance_follows_payment_date_order(self):
        """
        Given: A 500.00 invoice with payments of 300.00 (Jan 20) and 200.00 (Jan 10)
        When: Payments are handed in newest first
        Then: History is oldest first with balances 300.00 then 0.00
        """
        # Arrange
        later = make_payment("300", date(2024, 1, 20))
        earlier = make_payment("200", date(2024, 1, 10), created_offset=5)

        # Act
        history = build_payment_history(Decimal("500.00"), [later, earlier])

        # Assert
        assert [entry.payment.id for entry in history] == [earlier.id, later.id]
        assert [entry.running_balance for entry in history] == [Decimal("300.00"), Decimal("0.00")]
        assert [entry.payment_type for entry in history] == [PaymentType.PARTIAL, PaymentType.FULL]

    def test_same_day_payments_keep_creation_order(self):
        first = make_payment("100", date(2024, 1, 10), created_offset=0)
        second = make_payment("50", date(2024, 1, 10), created_offset=10)

        history = build_payment_history(Decimal("150.00"), [second, first])

        assert [entry.payment.id for entry in history] == [first.id, second.id]

    def test_no_payments_gives_empty_history(self):
        assert build_payment_history(Decimal("10.00"), []) == []


class TestPaymentStatistics:

    def test_totals_by_period_and_method(self):
        # Arrange
        payments = [
            make_payment("100", TODAY, method="cash"),
            make_payment("50", date(2024, 3, 1), method="credit_card"),
            make_payment("25", date(2024, 1, 5), method="check"),
            make_payment("10", date(2023, 12, 31), method="cash"),
        ]

        # Act
        stats = summarize_payments(payments, TODAY)

        # Assert
        assert stats.total_collected == Decimal("185.00")
        assert stats.collected_today == Decimal("100.00")
        assert stats.collected_this_month == Decimal("150.00")
        assert stats.collected_this_year == Decimal("175.00")
        assert stats.total_payment_count == 4
        assert stats.by_method == {
            PaymentMethod.CREDIT_CARD: Decimal("50.00"),
            PaymentMethod.BANK_TRANSFER: Decimal("0.00"),
            PaymentMethod.CHECK: Decimal("25.00"),
            PaymentMethod.CASH: Decimal("110.00"),
        }

    def test_no_payments_zero_fills_every_method(self):
        stats = summarize_payments([], TODAY)

        assert stats.total_collected == Decimal("0.00")
        assert stats.total_payment_count == 0
        assert set(stats.by_method) == set(PaymentMethod)
        assert all(amount == Decimal("0.00") for amount in stats.by_method.values())


class TestDashboardStats:

    def test_counts_and_amounts(self):
        """
        Given: One draft, two sent (one overdue, one partly paid) and one paid invoice
        When: The dashboard is summarized
        Then: Revenue counts paid totals; outstanding and overdue count sent balances
        """
        # Arrange
        draft = make_invoice("40", number="INV-1")

        overdue = make_invoice("500", due_date=date(2024, 3, 10), number="INV-2")
        overdue.send()

        partly_paid = make_invoice("300", number="INV-3")
        partly_paid.send()
        partly_paid.apply_payment("100")

        paid = make_invoice("250", number="INV-4")
        paid.send()
        paid.apply_payment("250")

        # Act
        stats = summarize_invoices([draft, overdue, partly_paid, paid], TODAY)

        # Assert
        assert stats.total_invoices == 4
        assert stats.draft_invoices == 1
        assert stats.sent_invoices == 2
        assert stats.paid_invoices == 1
        assert stats.total_revenue == Decimal("250.00")
        assert stats.outstanding_amount == Decimal("700.00")
        assert stats.overdue_amount == Decimal("500.00")

    def test_empty_dashboard(self):
        stats = summarize_invoices([], TODAY)

        assert stats.total_invoices == 0
        assert stats.total_revenue == Decimal("0.00")
        assert stats.overdue_amount == Decimal("0.00")
