"""Unit tests for the dependency factories"""

from unittest.mock import MagicMock
from config import ApplicationConfig
from src.adapter.services.event_dispatcher import LoggingEventDispatcher
from src.adapter.services.invoice_number_generator import SequentialInvoiceNumberGenerator
from src.app.services.idempotency_guard import IdempotencyGuard
from src import depends


class TestDependencyFactories:

    def test_idempotency_guard_uses_configured_ttl(self):
        guard = depends.get_idempotency_guard()

        assert isinstance(guard, IdempotencyGuard)
        assert guard.ttl_hours == ApplicationConfig.IDEMPOTENCY_TTL_HOURS
        assert guard.repository.session_factory is depends.AsyncSessionLocal

    def test_invoice_number_generator_uses_configured_prefix(self):
        session = MagicMock()

        generator = depends.get_invoice_number_generator(session)

        assert isinstance(generator, SequentialInvoiceNumberGenerator)
        assert generator.session is session
        assert generator.prefix == ApplicationConfig.INVOICE_NUMBER_PREFIX

    def test_event_dispatcher_without_webhook(self, monkeypatch):
        monkeypatch.setattr(ApplicationConfig, "EVENT_WEBHOOK_URL", None)

        assert isinstance(depends.get_event_dispatcher(), LoggingEventDispatcher)
