# app/database.py
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from app.config import settings

db_url = settings.effective_database_url

# asyncpg and aiosqlite both accept a connect "timeout" argument
engine = create_async_engine(
    db_url,
    echo=settings.DB_ECHO,
    connect_args={"timeout": settings.DB_TIMEOUT_SECONDS},
)

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
Base = declarative_base()

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
