"""Post repository."""

from typing import Any, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, func, select

from blogcms.apps.blog.models.post import Post
from blogcms.apps.blog.schemas.post import PostFilter
from blogcms.core.bases.base_repository import BaseRepository

SEARCH_FIELDS = ("title", "content", "excerpt", "category")


def matches_search(post: Post, term: str) -> bool:
    """True when ``term`` occurs in a text field or a tag, ignoring case.

    Case is folded with ``str.casefold`` so non-ASCII letters compare
    the same way ASCII ones do.
    """
    needle = term.casefold()
    values = [getattr(post, name) or "" for name in SEARCH_FIELDS]
    values.extend(post.tags or [])
    return any(needle in value.casefold() for value in values)


class PostRepository(BaseRepository[Post]):
    """Post repository class."""

    model = Post

    def _default_order(self) -> List[Any]:
        # Newest first; id breaks ties so pages stay stable for equal dates.
        return [col(Post.date).desc(), col(Post.id).desc()]

    def _filter_conditions(self, filters: PostFilter) -> List[Any]:
        conditions: List[Any] = []
        if filters.category:
            conditions.append(col(Post.category) == filters.category)
        if filters.published is not None:
            conditions.append(col(Post.published) == filters.published)
        return conditions

    async def search(
        self, filters: PostFilter, page: int = 1, per_page: int = 10
    ) -> Tuple[List[Post], int]:
        """Page through posts matching ``filters``, newest first."""
        conditions = self._filter_conditions(filters)
        if not filters.search:
            return await self.list(page=page, per_page=per_page, conditions=conditions)

        # Text matching runs over the rows the column filters leave.
        async with self.get_session() as db:
            try:
                stmt = self._build_select_stmt(conditions).order_by(*self._default_order())
                result = await db.exec(stmt)
                matches = [post for post in result.all() if matches_search(post, filters.search)]
            except SQLAlchemyError as e:
                self._handle_db_error(e, "search")

        offset = (page - 1) * per_page
        return matches[offset:offset + per_page], len(matches)

    async def distinct_categories(self) -> List[str]:
        async with self.get_session() as db:
            try:
                stmt = select(Post.category).distinct().order_by(Post.category)
                result = await db.exec(stmt)
                return list(result.all())
            except SQLAlchemyError as e:
                self._handle_db_error(e, "distinct_categories")

    async def category_counts(self) -> List[Tuple[str, int]]:
        async with self.get_session() as db:
            try:
                stmt = (
                    select(Post.category, func.count())
                    .group_by(Post.category)
                    .order_by(Post.category)
                )
                result = await db.exec(stmt)
                return [(name, count) for name, count in result.all()]
            except SQLAlchemyError as e:
                self._handle_db_error(e, "category_counts")
