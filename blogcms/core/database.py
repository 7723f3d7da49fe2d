import json
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import DateTime, Field, SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from blogcms.core.config import settings


def build_engine(url: str, **kwargs) -> AsyncEngine:
    return create_async_engine(
        url,
        # Keep non-ASCII tags searchable inside the JSON column.
        json_serializer=lambda obj: json.dumps(obj, ensure_ascii=False),
        #  echo=True,
        **kwargs,
    )


engine = build_engine(settings.DATABASE_URL)


@asynccontextmanager
async def get_session():
    # Repositories return detached objects, so keep attributes loaded after commit.
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


async def create_db_and_tables() -> None:
    """Create all tables registered on the SQLModel metadata."""
    # Import models so their tables are registered.
    import blogcms.shared.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    await engine.dispose()


def generate_id() -> str:
    return uuid.uuid4().hex


class BaseModel(SQLModel):
    """Base model with common fields."""

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    created_at: datetime = Field(
        default_factory=settings.get_now, sa_type=DateTime(timezone=True)  # type: ignore
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={"onupdate": settings.get_now},
    )
