"""Post schemas."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

REQUIRED_FIELDS = ("title", "excerpt", "content", "category")


def parse_tags(value: Any) -> List[str]:
    """Turn ``"a, b,c"`` (or a list) into a trimmed, ordered tag list."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise ValueError("tags must be a comma-separated string or a list of strings")
    return [str(tag).strip() for tag in value if str(tag).strip()]


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field} is required and cannot be empty")
    return value


class PostInput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    author: Optional[str] = None
    date: Optional[datetime] = None
    published: Optional[bool] = None
    tags: Optional[List[str]] = None
    read_time: Optional[int] = Field(default=None, ge=1)

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value):
        return parse_tags(value)


class PostCreate(PostInput):
    """Schema for creating a post."""

    title: str
    excerpt: str
    content: str
    category: str

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def _not_blank(cls, value, info):
        return _require_text(value, info.field_name)


class PostUpdate(PostInput):
    """Schema for updating a post; omitted fields keep their stored value."""

    title: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def _not_blank(cls, value, info):
        return _require_text(value, info.field_name)


class PostRead(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    title: str
    excerpt: str
    content: str
    category: str
    author: str
    date: datetime
    image: Optional[str] = None
    published: bool
    tags: List[str] = []
    read_time: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PostListResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    blogs: List[PostRead]
    total_pages: int
    current_page: int
    total: int


class PostFilter(BaseModel):
    """Constraints narrowing a post listing."""

    category: Optional[str] = None
    published: Optional[bool] = None
    search: Optional[str] = None


class CategoryCount(BaseModel):
    name: str
    count: int


class PostStats(BaseModel):
    total: int
    published: int
    drafts: int
    categories: List[CategoryCount]
