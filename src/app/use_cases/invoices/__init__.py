"""Invoice use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .manage_line_items import AddLineItem, UpdateLineItem, RemoveLineItem
from .send_invoice import SendInvoice
from .mark_invoice_paid import MarkInvoicePaid
from .get_invoice import GetInvoice, ListInvoices
from .get_dashboard_stats import GetDashboardStats
from .dtos import (
    LineItemInputDTO,
    LineItemResponseDTO,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    AddLineItemCommandDTO,
    UpdateLineItemCommandDTO,
    RemoveLineItemCommandDTO,
    InvoiceTransitionCommandDTO,
    InvoiceResponseDTO,
    ListInvoicesResponseDTO,
    DashboardStatsResponseDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "AddLineItem",
    "UpdateLineItem",
    "RemoveLineItem",
    "SendInvoice",
    "MarkInvoicePaid",
    "GetInvoice",
    "ListInvoices",
    "GetDashboardStats",
    "LineItemInputDTO",
    "LineItemResponseDTO",
    "CreateInvoiceCommandDTO",
    "UpdateInvoiceCommandDTO",
    "AddLineItemCommandDTO",
    "UpdateLineItemCommandDTO",
    "RemoveLineItemCommandDTO",
    "InvoiceTransitionCommandDTO",
    "InvoiceResponseDTO",
    "ListInvoicesResponseDTO",
    "DashboardStatsResponseDTO",
]
