"""Post model."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Text
from sqlmodel import DateTime, Field

from blogcms.core.config import settings
from blogcms.core.database import BaseModel


class Post(BaseModel, table=True):
    """Blog article record."""

    __tablename__ = "blog_posts"  # type: ignore
    title: str = Field()
    excerpt: str = Field()
    content: str = Field(sa_type=Text)  # type: ignore
    category: str = Field(index=True)
    author: str = Field(default_factory=lambda: settings.DEFAULT_AUTHOR)
    date: datetime = Field(
        default_factory=settings.get_now,
        sa_type=DateTime(timezone=True),  # type: ignore
        index=True,
    )
    image: Optional[str] = Field(default=None)
    published: bool = Field(default=True, index=True)
    tags: List[str] = Field(default_factory=list, sa_type=JSON)  # type: ignore
    read_time: int = Field(default_factory=lambda: settings.DEFAULT_READ_TIME)
