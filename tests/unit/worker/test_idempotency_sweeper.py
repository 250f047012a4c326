"""Unit tests for IdempotencySweeperWorker

Tests cover:
- Worker initialization with configuration
- run_once deleting expired records
- Sweep disabled scenario
- run_forever surviving a failed cycle
- Shutdown and cleanup
"""

import asyncio
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

from src.app.services.clock import FixedClock
from src.worker.idempotency_sweeper import IdempotencySweeperWorker, SweepResult

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_guard():
    guard = MagicMock()
    guard.sweep_expired = AsyncMock(return_value=4)
    return guard


@pytest.fixture
def mock_engine():
    engine = MagicMock()
    engine.dispose = AsyncMock()
    return engine


class TestIdempotencySweeperWorkerInit:
    """Test worker initialization"""

    @patch("src.worker.idempotency_sweeper.ApplicationConfig")
    @patch("src.worker.idempotency_sweeper.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        """
        Given: No custom configuration provided
        When: Worker is initialized
        Then: Uses defaults from ApplicationConfig
        """
        # Arrange
        mock_app_config.DB_URI = "sqlite+aiosqlite:///./default.db"
        mock_app_config.IDEMPOTENCY_TTL_HOURS = 24
        mock_create_engine.return_value = MagicMock()

        # Act
        worker = IdempotencySweeperWorker()

        # Assert
        assert worker.db_uri == "sqlite+aiosqlite:///./default.db"
        assert worker.guard.ttl_hours == 24
        mock_create_engine.assert_called_once()

    @patch("src.worker.idempotency_sweeper.create_async_engine")
    def test_initializes_with_custom_db_uri(self, mock_create_engine):
        mock_create_engine.return_value = MagicMock()

        worker = IdempotencySweeperWorker(db_uri="sqlite+aiosqlite:///./custom.db")

        assert worker.db_uri == "sqlite+aiosqlite:///./custom.db"


@pytest.mark.asyncio
class TestIdempotencySweeperWorkerRunOnce:
    """Test run_once execution"""

    @patch("src.worker.idempotency_sweeper.ApplicationConfig")
    @patch("src.worker.idempotency_sweeper.create_async_engine")
    async def test_run_once_sweeps_with_clock_time(
        self, mock_create_engine, mock_app_config, mock_engine, mock_guard
    ):
        """
        Given: Sweeping is enabled and four records have expired
        When: run_once is called
        Then: The guard sweeps at the clock's time and the count is reported
        """
        # Arrange
        mock_app_config.IDEMPOTENCY_SWEEP_ENABLED = True
        mock_create_engine.return_value = mock_engine
        worker = IdempotencySweeperWorker(
            db_uri="sqlite+aiosqlite://", clock=FixedClock(NOW), guard=mock_guard
        )

        # Act
        result = await worker.run_once()

        # Assert
        assert isinstance(result, SweepResult)
        assert result.deleted_records == 4
        assert result.sweep_time == NOW
        assert result.skipped is False
        mock_guard.sweep_expired.assert_called_once_with(NOW)

    @patch("src.worker.idempotency_sweeper.ApplicationConfig")
    @patch("src.worker.idempotency_sweeper.create_async_engine")
    async def test_run_once_when_disabled(
        self, mock_create_engine, mock_app_config, mock_engine, mock_guard
    ):
        mock_app_config.IDEMPOTENCY_SWEEP_ENABLED = False
        mock_create_engine.return_value = mock_engine
        worker = IdempotencySweeperWorker(
            db_uri="sqlite+aiosqlite://", clock=FixedClock(NOW), guard=mock_guard
        )

        result = await worker.run_once()

        assert result.skipped is True
        assert result.deleted_records == 0
        mock_guard.sweep_expired.assert_not_called()


@pytest.mark.asyncio
class TestIdempotencySweeperWorkerLifecycle:

    @patch("src.worker.idempotency_sweeper.asyncio.sleep")
    @patch("src.worker.idempotency_sweeper.create_async_engine")
    async def test_run_forever_continues_after_failure(
        self, mock_create_engine, mock_sleep, mock_engine, mock_guard
    ):
        """
        Given: The first sweep raises
        When: run_forever loops
        Then: The error is logged and the next cycle still runs
        """
        # Arrange
        mock_create_engine.return_value = mock_engine
        worker = IdempotencySweeperWorker(db_uri="sqlite+aiosqlite://", guard=mock_guard)
        worker.run_once = AsyncMock(side_effect=[RuntimeError("db down"), MagicMock(), asyncio.CancelledError()])

        # Act
        with pytest.raises(asyncio.CancelledError):
            await worker.run_forever(interval_seconds=5)

        # Assert
        assert worker.run_once.call_count == 3
        mock_sleep.assert_called_with(5)

    @patch("src.worker.idempotency_sweeper.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine, mock_engine, mock_guard):
        mock_create_engine.return_value = mock_engine
        worker = IdempotencySweeperWorker(db_uri="sqlite+aiosqlite://", guard=mock_guard)

        await worker.shutdown()

        mock_engine.dispose.assert_called_once()
