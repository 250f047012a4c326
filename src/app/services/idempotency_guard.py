"""Idempotency Guard

Deduplicates retried write commands by a client-supplied key.

The guard only blocks *subsequent* duplicates: two requests racing with the
same key before either stored a result may both run. Records are written in a
transaction of their own, so storing is bookkeeping rather than part of the
command's atomic change.
"""

import logging
from datetime import datetime
from typing import Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError as PydanticValidationError
from src.app.repositories.idempotency_repository import (
    DuplicateIdempotencyKey,
    IdempotencyRepository,
)
from src.app.services.clock import Clock, SystemClock
from src.domain.idempotency_record import DEFAULT_TTL_HOURS, IdempotencyRecord

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)


class IdempotencyGuard:
    """
    Check / store / sweep cached command results

    Usage:
        cached = await guard.check(key, PaymentResponseDTO)
        if cached:
            return cached
        ...run the command...
        await guard.store(key, response)
    """

    def __init__(
        self,
        repository: IdempotencyRepository,
        clock: Optional[Clock] = None,
        ttl_hours: int = DEFAULT_TTL_HOURS,
    ):
        self.repository = repository
        self.clock = clock or SystemClock()
        self.ttl_hours = ttl_hours

    async def check(self, key: Optional[str], result_type: Type[ResultT]) -> Optional[ResultT]:
        """
        Return the cached result for key, if any

        Unknown, blank and expired keys all yield None. Expired records are
        left for the sweep rather than deleted here.
        """
        if not key or not key.strip():
            return None

        record = await self.repository.get_by_key(key)
        if record is None:
            return None
        if record.is_expired(self.clock.now()):
            logger.debug(f"Idempotency record for key {key} expired at {record.expires_at}")
            return None

        try:
            cached = result_type.model_validate_json(record.serialized_result)
        except PydanticValidationError as e:
            logger.error(f"Failed to deserialize cached result for key {key}: {e}")
            return None

        logger.info(f"Idempotency key found: {key} - returning cached result")
        return cached

    async def store(self, key: Optional[str], result: BaseModel) -> Optional[IdempotencyRecord]:
        """
        Cache result under key for ttl_hours

        A blank key is a no-op. Losing a race to a concurrent request with the
        same key keeps the first stored result. Storage failures are logged
        and never reach the caller, whose command has already committed.
        """
        if not key or not key.strip():
            return None

        try:
            serialized = result.model_dump_json()
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize result for idempotency key {key}: {e}")
            return None

        record = IdempotencyRecord.issue(
            key=key,
            serialized_result=serialized,
            ttl_hours=self.ttl_hours,
            now=self.clock.now(),
        )
        try:
            stored = await self.repository.create(record)
        except DuplicateIdempotencyKey:
            logger.warning(f"Idempotency key {key} already stored by a concurrent request")
            return None
        except Exception as e:
            logger.error(f"Failed to store idempotency record for key {key}: {e}")
            return None

        logger.info(f"Stored idempotency record with key: {key}")
        return stored

    async def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """Delete expired records; returns how many were removed"""
        deleted = await self.repository.delete_expired(now or self.clock.now())
        if deleted > 0:
            logger.info(f"Cleaned up {deleted} expired idempotency records")
        return deleted
