"""Post service."""

import logging
import math
from datetime import datetime
from typing import Any, Dict, Mapping, Optional
from zoneinfo import ZoneInfo

from fastapi import UploadFile

from blogcms.apps.blog.models.post import Post
from blogcms.apps.blog.repositories.post_repository import PostRepository
from blogcms.apps.blog.schemas.post import (
    CategoryCount,
    PostCreate,
    PostFilter,
    PostStats,
    PostUpdate,
)
from blogcms.core.bases.base_service import BaseService
from blogcms.core.config import settings
from blogcms.core.services.upload_service import UploadService

logger = logging.getLogger(__name__)

# Form inputs where an empty string means "not provided".
BLANK_MEANS_ABSENT = ("author", "date", "published", "readTime", "read_time")


class PostService(BaseService[Post]):
    """Post service class."""

    item_name = "Blog post"

    def __init__(self, repository: PostRepository, uploads: UploadService):
        super().__init__(repository)
        self.repository: PostRepository = repository
        self.uploads = uploads

    @staticmethod
    def _clean_payload(raw: Mapping[str, Any]) -> Dict[str, Any]:
        payload = {}
        for key, value in raw.items():
            if key in ("id", "image"):
                continue
            if key in BLANK_MEANS_ABSENT and isinstance(value, str) and not value.strip():
                continue
            payload[key] = value
        return payload

    @staticmethod
    def _localize(value: datetime) -> datetime:
        tz = ZoneInfo(settings.TIME_ZONE)
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)

    async def list_posts(
        self, filters: PostFilter, page: int = 1, per_page: int = 10
    ) -> Dict[str, Any]:
        items, total = await self.repository.search(filters, page=page, per_page=per_page)
        return {
            "items": items,
            "total": total,
            "page": page,
            "per_page": per_page,
            "pages": math.ceil(total / per_page),
            "message": "Blog posts retrieved successfully",
        }

    async def create_post(
        self, raw: Mapping[str, Any], image: Optional[UploadFile] = None
    ) -> Dict[str, Any]:
        data = self._parse(PostCreate, self._clean_payload(raw))
        values = data.model_dump(exclude_none=True)
        if data.date is not None:
            values["date"] = self._localize(data.date)
        values.setdefault("published", True)
        values.setdefault("tags", [])

        if image is not None:
            values["image"] = await self.uploads.store(image)

        try:
            result = await self.create(values)
        except Exception:
            self.uploads.remove(values.get("image"))
            raise

        logger.info("Created blog post %s", result["data"].id)
        return result

    async def update_post(
        self, item_id: str, raw: Mapping[str, Any], image: Optional[UploadFile] = None
    ) -> Dict[str, Any]:
        data = self._parse(PostUpdate, self._clean_payload(raw))
        values = data.model_dump(exclude_unset=True)
        if data.date is not None:
            values["date"] = self._localize(data.date)
        # Explicit nulls for optional fields fall back to keeping the stored value.
        values = {key: value for key, value in values.items() if value is not None}

        existing = await self.repository.get(item_id)
        if existing is None:
            raise self._not_found()
        previous_image = existing.image

        if image is not None:
            values["image"] = await self.uploads.store(image)

        try:
            result = await self.update(item_id, values)
        except Exception:
            self.uploads.remove(values.get("image"))
            raise

        if "image" in values and previous_image != values["image"]:
            self.uploads.remove(previous_image)
        logger.info("Updated blog post %s", item_id)
        return result

    async def delete_post(self, item_id: str) -> Dict[str, Any]:
        result = await self.force_delete(item_id)
        self.uploads.remove(result["data"].image)
        logger.info("Deleted blog post %s", item_id)
        return result

    async def categories(self) -> Dict[str, Any]:
        names = await self.repository.distinct_categories()
        return {"data": names, "message": "Categories retrieved successfully"}

    async def stats(self) -> Dict[str, Any]:
        total = await self.repository.count()
        published = await self.repository.count(published=True)
        categories = [
            CategoryCount(name=name, count=count)
            for name, count in await self.repository.category_counts()
        ]
        stats = PostStats(
            total=total,
            published=published,
            drafts=total - published,
            categories=categories,
        )
        return {"data": stats, "message": "Statistics retrieved successfully"}
