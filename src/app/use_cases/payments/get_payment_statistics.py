"""Get Payment Statistics Use Case"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.clock import Clock, SystemClock
from src.domain.reconciliation import summarize_payments
from .dtos import PaymentStatisticsResponseDTO


class GetPaymentStatistics:
    """
    Collection totals for today, this month, this year and all time, plus a
    per-method breakdown that always lists every method.
    """

    def __init__(self, payment_repo: PaymentRepository, clock: Optional[Clock] = None):
        self.payment_repo = payment_repo
        self.clock = clock or SystemClock()

    async def execute(self) -> Result[PaymentStatisticsResponseDTO]:
        payments = await self.payment_repo.get_all()
        stats = summarize_payments(payments, self.clock.today())
        return Return.ok(
            PaymentStatisticsResponseDTO(
                total_collected=stats.total_collected,
                collected_today=stats.collected_today,
                collected_this_month=stats.collected_this_month,
                collected_this_year=stats.collected_this_year,
                total_payment_count=stats.total_payment_count,
                by_method={method.value: amount for method, amount in stats.by_method.items()},
            )
        )
