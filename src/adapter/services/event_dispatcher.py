"""Event Dispatcher Implementations

Provides concrete implementations for publishing domain events.
"""

import logging
from typing import Optional, Sequence
import httpx
from src.app.services.event_dispatcher import EventDispatcher
from src.domain.events import DomainEvent

logger = logging.getLogger(__name__)


class LoggingEventDispatcher(EventDispatcher):
    """
    Dispatcher that logs every event

    Useful for development and testing, or as a fallback.
    """

    async def dispatch(self, events: Sequence[DomainEvent]) -> bool:
        """
        Log events

        Returns:
            Always True (logging never fails)
        """
        for event in events:
            logger.info(
                f"[EVENT] {event.event_type} invoice={event.invoice_id} "
                f"event_id={event.event_id} at={event.occurred_at.isoformat()}"
            )
        return True


class WebhookEventDispatcher(EventDispatcher):
    """
    Dispatcher that POSTs events to an HTTP webhook

    Sends one JSON payload per call containing every event.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize webhook dispatcher

        Args:
            webhook_url: URL to POST events to
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport

    async def dispatch(self, events: Sequence[DomainEvent]) -> bool:
        """
        Send events via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        if not events:
            return True

        payload = {
            "type": "domain_events",
            "events": [event.to_payload() for event in events],
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Webhook delivered {len(events)} events to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to deliver {len(events)} events to {self.webhook_url}: {e}")
            return False


class CompositeEventDispatcher(EventDispatcher):
    """
    Dispatcher that delegates to multiple dispatchers

    Useful for publishing to multiple channels (e.g., log + webhook).
    """

    def __init__(self, dispatchers: list[EventDispatcher]):
        self.dispatchers = dispatchers

    async def dispatch(self, events: Sequence[DomainEvent]) -> bool:
        """
        Dispatch to every configured dispatcher

        Returns:
            True only if every dispatcher succeeded
        """
        success = True
        for dispatcher in self.dispatchers:
            try:
                if not await dispatcher.dispatch(events):
                    success = False
            except Exception as e:
                logger.error(f"Event dispatcher {type(dispatcher).__name__} failed: {e}")
                success = False
        return success


def create_event_dispatcher(
    webhook_url: Optional[str] = None, timeout: float = 10.0
) -> EventDispatcher:
    """
    Factory function to create the configured dispatcher

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     dispatcher with logging + webhook. Otherwise, just logging.
        timeout: Webhook request timeout in seconds

    Returns:
        Configured EventDispatcher
    """
    dispatchers: list[EventDispatcher] = [LoggingEventDispatcher()]

    if webhook_url:
        dispatchers.append(WebhookEventDispatcher(webhook_url, timeout=timeout))

    if len(dispatchers) == 1:
        return dispatchers[0]

    return CompositeEventDispatcher(dispatchers)
