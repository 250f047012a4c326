from .unit_of_work import UnitOfWork
from .clock import Clock, SystemClock, FixedClock
from .invoice_number_generator import InvoiceNumberGenerator
from .event_dispatcher import EventDispatcher
from .idempotency_guard import IdempotencyGuard

__all__ = [
    "UnitOfWork",
    "Clock",
    "SystemClock",
    "FixedClock",
    "InvoiceNumberGenerator",
    "EventDispatcher",
    "IdempotencyGuard",
]
