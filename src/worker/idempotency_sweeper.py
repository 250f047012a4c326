"""Idempotency Sweeper Background Worker

Periodically deletes idempotency records whose TTL has passed.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.idempotency_repository import SqlAlchemyIdempotencyRepository
from src.app.services.clock import Clock, SystemClock
from src.app.services.idempotency_guard import IdempotencyGuard

logger = logging.getLogger(__name__)


class SweepResult(BaseModel):
    deleted_records: int
    sweep_time: datetime
    execution_time_ms: int
    skipped: bool = False


class IdempotencySweeperWorker:
    """
    Background worker for idempotency record cleanup

    Features:
    - Deletes records with expires_at before now
    - Can run once or continuously
    - Configurable interval (default: hourly)

    Usage:
        # Run once
        worker = IdempotencySweeperWorker()
        result = await worker.run_once()

        # Run continuously
        worker = IdempotencySweeperWorker()
        await worker.run_forever(interval_seconds=3600)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        clock: Optional[Clock] = None,
        guard: Optional[IdempotencyGuard] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            clock: Time source (defaults to system clock)
            guard: Pre-built guard; one over db_uri is created when omitted
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.clock = clock or SystemClock()

        # Create engine and session factory
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self.guard = guard or IdempotencyGuard(
            SqlAlchemyIdempotencyRepository(self.async_session_factory),
            clock=self.clock,
            ttl_hours=ApplicationConfig.IDEMPOTENCY_TTL_HOURS,
        )

        logger.info("IdempotencySweeperWorker initialized")

    async def run_once(self) -> SweepResult:
        """
        Run one sweep

        Returns:
            SweepResult with the number of deleted records
        """
        now = self.clock.now()
        if not ApplicationConfig.IDEMPOTENCY_SWEEP_ENABLED:
            logger.info("Idempotency sweep is disabled, skipping")
            return SweepResult(deleted_records=0, sweep_time=now, execution_time_ms=0, skipped=True)

        started = time.monotonic()
        deleted = await self.guard.sweep_expired(now)
        elapsed_ms = int((time.monotonic() - started) * 1000)

        return SweepResult(deleted_records=deleted, sweep_time=now, execution_time_ms=elapsed_ms)

    async def run_forever(self, interval_seconds: int = 3600):
        """
        Run sweeps continuously at specified interval

        Args:
            interval_seconds: Seconds between sweeps (default: 1 hour)
        """
        logger.info(f"Starting continuous idempotency sweep with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Sweep cycle complete. Deleted {result.deleted_records} records "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Sweep cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("IdempotencySweeperWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.idempotency_sweeper --once

        # Run continuously with custom interval (in seconds)
        python -m src.worker.idempotency_sweeper --interval 600
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Idempotency Sweeper Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.IDEMPOTENCY_SWEEP_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: IDEMPOTENCY_SWEEP_INTERVAL_SECONDS)"
    )
    args = parser.parse_args()

    worker = IdempotencySweeperWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Sweep complete:")
            print(f"  Deleted records: {result.deleted_records}")
            print(f"  Execution time: {result.execution_time_ms}ms")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
