"""Get Dashboard Stats Use Case

Counts and money totals across all invoices, recomputed on every call.
"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.clock import Clock, SystemClock
from src.domain.reconciliation import summarize_invoices
from .dtos import DashboardStatsResponseDTO


class GetDashboardStats:
    """
    Get Dashboard Stats Use Case

    - total_revenue: sum of paid invoice totals
    - outstanding_amount: sum of sent invoice balances
    - overdue_amount: sent balances whose due date is before today
    """

    def __init__(self, invoice_repo: InvoiceRepository, clock: Optional[Clock] = None):
        self.invoice_repo = invoice_repo
        self.clock = clock or SystemClock()

    async def execute(self) -> Result[DashboardStatsResponseDTO]:
        invoices = await self.invoice_repo.get_all()
        stats = summarize_invoices(invoices, self.clock.today())
        return Return.ok(DashboardStatsResponseDTO(**stats.model_dump()))
