"""Event Dispatcher Interface

Defines the contract for delivering drained domain events to collaborators.
"""

from abc import ABC, abstractmethod
from typing import Sequence
from src.domain.events import DomainEvent


class EventDispatcher(ABC):
    """
    Abstract dispatcher for domain events

    Called by use cases after a successful commit. Implementations can deliver
    events via:
    - Logging
    - Webhook (HTTP POST)
    - An outbox table or message broker
    """

    @abstractmethod
    async def dispatch(self, events: Sequence[DomainEvent]) -> bool:
        """
        Deliver events

        Args:
            events: Events drained from an aggregate, in emission order

        Returns:
            True if every event was delivered, False otherwise
        """
        pass
