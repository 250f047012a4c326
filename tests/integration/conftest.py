import pytest_asyncio
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories import (
    SqlAlchemyIdempotencyRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPaymentRepository,
)
from src.adapter.services.invoice_number_generator import SequentialInvoiceNumberGenerator
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.clock import FixedClock
from src.app.services.idempotency_guard import IdempotencyGuard

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a temporary SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'billing_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def clock():
    return FixedClock(NOW)


@pytest_asyncio.fixture
async def wiring(db_session, session_factory, clock):
    """Adapters sharing one session, plus an idempotency guard with its own sessions"""
    return {
        "uow": SqlAlchemyUnitOfWork(db_session),
        "invoice_repo": SqlAlchemyInvoiceRepository(db_session),
        "payment_repo": SqlAlchemyPaymentRepository(db_session),
        "number_generator": SequentialInvoiceNumberGenerator(db_session, prefix="INV", clock=clock),
        "idempotency_repo": SqlAlchemyIdempotencyRepository(session_factory),
        "guard": IdempotencyGuard(
            SqlAlchemyIdempotencyRepository(session_factory), clock=clock, ttl_hours=24
        ),
        "clock": clock,
    }
