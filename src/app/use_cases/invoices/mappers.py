"""Mapping between invoice DTOs and domain objects"""

from datetime import date
from typing import Iterable, List
from src.domain.invoice import Invoice
from src.domain.line_item import LineItem
from .dtos import InvoiceResponseDTO, LineItemInputDTO, LineItemResponseDTO


def to_line_item(dto: LineItemInputDTO) -> LineItem:
    return LineItem(
        id=dto.id,
        description=dto.description,
        quantity=dto.quantity,
        unit_price=dto.unit_price,
        discount_percent=dto.discount_percent,
        tax_rate=dto.tax_rate,
    )


def to_line_items(dtos: Iterable[LineItemInputDTO]) -> List[LineItem]:
    return [to_line_item(dto) for dto in dtos]


def to_line_item_response(item: LineItem) -> LineItemResponseDTO:
    return LineItemResponseDTO(
        id=item.id,
        description=item.description,
        quantity=item.quantity,
        unit_price=item.unit_price,
        discount_percent=item.discount_percent,
        tax_rate=item.tax_rate,
        **item.breakdown(),
    )


def to_invoice_response(invoice: Invoice, today: date) -> InvoiceResponseDTO:
    return InvoiceResponseDTO(
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        customer_id=invoice.customer_id,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        status=invoice.status.value,
        payment_terms=invoice.payment_terms,
        line_items=[to_line_item_response(item) for item in invoice.line_items],
        subtotal=invoice.subtotal,
        total_discount=invoice.total_discount,
        total_tax=invoice.total_tax,
        total_amount=invoice.total_amount,
        balance=invoice.balance,
        notes=invoice.notes,
        version=invoice.version,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
        sent_at=invoice.sent_at,
        paid_at=invoice.paid_at,
        days_overdue=invoice.days_overdue(today),
    )
