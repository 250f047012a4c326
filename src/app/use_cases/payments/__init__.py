"""Payment use cases"""
from .record_payment import RecordPayment
from .get_payment import GetPayment
from .list_payments import ListPaymentsByInvoice, ListPayments
from .get_payment_statistics import GetPaymentStatistics
from .dtos import (
    RecordPaymentCommandDTO,
    PaymentResponseDTO,
    PaymentHistoryResponseDTO,
    ListPaymentsResponseDTO,
    PaymentStatisticsResponseDTO,
)

__all__ = [
    "RecordPayment",
    "GetPayment",
    "ListPaymentsByInvoice",
    "ListPayments",
    "GetPaymentStatistics",
    "RecordPaymentCommandDTO",
    "PaymentResponseDTO",
    "PaymentHistoryResponseDTO",
    "ListPaymentsResponseDTO",
    "PaymentStatisticsResponseDTO",
]
