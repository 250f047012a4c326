"""Idempotency Record

Cached result of a command executed under a client-supplied key.
"""

from datetime import datetime, timedelta
from typing import Optional
from pydantic import ConfigDict
from src.domain.base import BaseModel, utcnow

DEFAULT_TTL_HOURS = 24


class IdempotencyRecord(BaseModel):
    """
    Idempotency Record - serialized command result keyed by idempotency key

    Domain Rules:
    - key is unique
    - read-only after creation
    - treated as absent once expires_at has passed
    """

    model_config = ConfigDict(frozen=True)

    key: str
    serialized_result: str
    created_at: datetime
    expires_at: datetime

    @classmethod
    def issue(
        cls,
        key: str,
        serialized_result: str,
        ttl_hours: int = DEFAULT_TTL_HOURS,
        now: Optional[datetime] = None,
    ) -> "IdempotencyRecord":
        created_at = now or utcnow()
        return cls(
            key=key,
            serialized_result=serialized_result,
            created_at=created_at,
            expires_at=created_at + timedelta(hours=ttl_hours),
        )

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
