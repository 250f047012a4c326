from .unit_of_work import SqlAlchemyUnitOfWork
from .invoice_number_generator import SequentialInvoiceNumberGenerator
from .event_dispatcher import (
    LoggingEventDispatcher,
    WebhookEventDispatcher,
    CompositeEventDispatcher,
    create_event_dispatcher,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SequentialInvoiceNumberGenerator",
    "LoggingEventDispatcher",
    "WebhookEventDispatcher",
    "CompositeEventDispatcher",
    "create_event_dispatcher",
]
