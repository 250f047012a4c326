"""Unit tests for event dispatcher implementations"""

import json
import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock
from src.adapter.services.event_dispatcher import (
    CompositeEventDispatcher,
    LoggingEventDispatcher,
    WebhookEventDispatcher,
    create_event_dispatcher,
)
from src.domain.events import InvoiceStatusChanged


@pytest.fixture
def events():
    return [InvoiceStatusChanged(invoice_id="inv-1", old_status="draft", new_status="sent")]


@pytest.mark.asyncio
class TestWebhookEventDispatcher:

    async def test_posts_event_payloads(self, events):
        """
        Given: A webhook endpoint that accepts the request
        When: Events are dispatched
        Then: One JSON POST carries every event payload
        """
        # Arrange
        received = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(json.loads(request.content))
            return httpx.Response(200)

        dispatcher = WebhookEventDispatcher(
            "https://hooks.example.com/billing", transport=httpx.MockTransport(handler)
        )

        # Act
        delivered = await dispatcher.dispatch(events)

        # Assert
        assert delivered is True
        assert len(received) == 1
        payload = received[0]["events"][0]
        assert payload["event_type"] == "InvoiceStatusChanged"
        assert payload["invoice_id"] == "inv-1"
        assert payload["new_status"] == "sent"

    async def test_http_error_returns_false(self, events):
        dispatcher = WebhookEventDispatcher(
            "https://hooks.example.com/billing",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        assert await dispatcher.dispatch(events) is False

    async def test_no_events_skips_request(self):
        handler = MagicMock()
        dispatcher = WebhookEventDispatcher(
            "https://hooks.example.com/billing", transport=httpx.MockTransport(handler)
        )

        assert await dispatcher.dispatch([]) is True
        handler.assert_not_called()


@pytest.mark.asyncio
class TestCompositeEventDispatcher:

    async def test_all_dispatchers_are_called(self, events):
        first = MagicMock()
        first.dispatch = AsyncMock(return_value=True)
        second = MagicMock()
        second.dispatch = AsyncMock(return_value=True)

        composite = CompositeEventDispatcher([first, second])

        assert await composite.dispatch(events) is True
        first.dispatch.assert_called_once_with(events)
        second.dispatch.assert_called_once_with(events)

    async def test_failure_in_one_dispatcher_does_not_stop_others(self, events):
        failing = MagicMock()
        failing.dispatch = AsyncMock(side_effect=RuntimeError("boom"))
        working = MagicMock()
        working.dispatch = AsyncMock(return_value=True)

        composite = CompositeEventDispatcher([failing, working])

        assert await composite.dispatch(events) is False
        working.dispatch.assert_called_once_with(events)

    async def test_logging_dispatcher_always_succeeds(self, events):
        assert await LoggingEventDispatcher().dispatch(events) is True


class TestCreateEventDispatcher:

    def test_logging_only_without_webhook(self):
        assert isinstance(create_event_dispatcher(None), LoggingEventDispatcher)

    def test_composite_with_webhook(self):
        dispatcher = create_event_dispatcher("https://hooks.example.com", timeout=3.0)

        assert isinstance(dispatcher, CompositeEventDispatcher)
        webhook = dispatcher.dispatchers[1]
        assert isinstance(webhook, WebhookEventDispatcher)
        assert webhook.timeout == 3.0
