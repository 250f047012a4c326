"""Idempotency Repository Interface

Defines the contract for idempotency record persistence.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from src.domain.idempotency_record import IdempotencyRecord


class DuplicateIdempotencyKey(Exception):
    """A record for this key was stored by a concurrent request first"""

    def __init__(self, key: str):
        super().__init__(f"Idempotency key already stored: {key}")
        self.key = key


class IdempotencyRepository(ABC):
    """
    Repository interface for IdempotencyRecord persistence

    Implementations write each record in their own transaction, independent
    of any unit of work the calling command holds open.
    """

    @abstractmethod
    async def get_by_key(self, key: str) -> Optional[IdempotencyRecord]:
        """
        Retrieve a record by key, expired or not

        Args:
            key: Idempotency key

        Returns:
            IdempotencyRecord if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, record: IdempotencyRecord) -> IdempotencyRecord:
        """
        Persist and commit a record

        Raises:
            DuplicateIdempotencyKey: a record for record.key already exists
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """
        Delete records whose expires_at is before now

        Returns:
            Number of deleted records
        """
        pass
