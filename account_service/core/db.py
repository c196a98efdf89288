from collections.abc import AsyncGenerator, Iterator
from contextlib import asynccontextmanager, contextmanager

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from account_service.core.config import settings
from account_service.core.errors import StorageUnavailableError

engine = create_async_engine(settings.db_url)


async def get_db() -> AsyncGenerator[AsyncSession]:
    async with AsyncSession(
        engine, autocommit=False, autoflush=False, expire_on_commit=False
    ) as session:
        yield session


@asynccontextmanager
async def read_committed(db: AsyncSession) -> AsyncGenerator[AsyncSession]:
    """Run the enclosed statements as one READ COMMITTED transaction.

    Commits on success and rolls back on any exception, including a failing commit. The
    isolation level can only be chosen when no transaction is open yet, so an already-open
    transaction is reused as is. SQLite has no READ COMMITTED level and always runs
    serializable.
    """
    if not db.in_transaction():
        dialect = db.get_bind().dialect.name
        options = {} if dialect == "sqlite" else {"isolation_level": "READ COMMITTED"}
        await db.connection(execution_options=options)

    try:
        yield db
        await db.commit()
    except BaseException:
        await db.rollback()
        raise


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Wrap SQLAlchemy failures raised inside the block into StorageUnavailableError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Storage failure during {operation}: {e!r}")
        raise StorageUnavailableError(operation) from e
