"""SQLAlchemy Idempotency Repository Implementation

Each call opens its own session, so records are written and committed
independently of whatever unit of work the calling command holds.
"""

from datetime import datetime
from typing import Callable, Optional
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.idempotency_repository import (
    DuplicateIdempotencyKey,
    IdempotencyRepository,
)
from src.domain.idempotency_record import IdempotencyRecord
from .tables import IdempotencyRow, from_db, to_utc


class SqlAlchemyIdempotencyRepository(IdempotencyRepository):

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        """
        Args:
            session_factory: Callable returning a new AsyncSession
                             (e.g. an async sessionmaker)
        """
        self.session_factory = session_factory

    async def get_by_key(self, key: str) -> Optional[IdempotencyRecord]:
        async with self.session_factory() as session:
            result = await session.execute(select(IdempotencyRow).where(IdempotencyRow.key == key))
            row = result.scalar_one_or_none()
            if row is None:
                return None
            return IdempotencyRecord(
                key=row.key,
                serialized_result=row.serialized_result,
                created_at=from_db(row.created_at),
                expires_at=from_db(row.expires_at),
            )

    async def create(self, record: IdempotencyRecord) -> IdempotencyRecord:
        """
        Insert and commit a record

        Raises:
            DuplicateIdempotencyKey: the key is already stored
        """
        async with self.session_factory() as session:
            session.add(
                IdempotencyRow(
                    key=record.key,
                    serialized_result=record.serialized_result,
                    created_at=to_utc(record.created_at),
                    expires_at=to_utc(record.expires_at),
                )
            )
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateIdempotencyKey(record.key) from None
        return record

    async def delete_expired(self, now: datetime) -> int:
        async with self.session_factory() as session:
            statement = delete(IdempotencyRow).where(IdempotencyRow.expires_at < to_utc(now))
            result = await session.execute(statement)
            await session.commit()
            return result.rowcount
