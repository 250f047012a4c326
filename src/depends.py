from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.idempotency_repository import SqlAlchemyIdempotencyRepository
from src.adapter.services.event_dispatcher import create_event_dispatcher
from src.adapter.services.invoice_number_generator import SequentialInvoiceNumberGenerator
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.clock import SystemClock
from src.app.services.idempotency_guard import IdempotencyGuard

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_models():
    """Create missing tables"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_idempotency_guard() -> IdempotencyGuard:
    # records get their own sessions, independent of the command's
    return IdempotencyGuard(
        SqlAlchemyIdempotencyRepository(AsyncSessionLocal),
        clock=SystemClock(),
        ttl_hours=ApplicationConfig.IDEMPOTENCY_TTL_HOURS,
    )


def get_event_dispatcher():
    return create_event_dispatcher(
        ApplicationConfig.EVENT_WEBHOOK_URL,
        timeout=ApplicationConfig.EVENT_WEBHOOK_TIMEOUT_SECONDS,
    )


def get_invoice_number_generator(session: AsyncSession) -> SequentialInvoiceNumberGenerator:
    return SequentialInvoiceNumberGenerator(
        session, prefix=ApplicationConfig.INVOICE_NUMBER_PREFIX, clock=SystemClock()
    )
