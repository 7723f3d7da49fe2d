"""Post router."""

from typing import Optional

from fastapi import Depends, Query, Request, status

from blogcms.apps.blog.repositories.post_repository import PostRepository
from blogcms.apps.blog.schemas.post import PostFilter, PostListResponse, PostRead
from blogcms.apps.blog.services.post_service import PostService
from blogcms.core.bases.base_router import BaseRouter
from blogcms.core.database import get_session
from blogcms.core.dependencies import require_admin
from blogcms.core.response.handlers import success_response
from blogcms.core.response.schemas import MessageResponse
from blogcms.core.services.upload_service import upload_service


def get_post_repository():
    """Get post repository instance."""
    return PostRepository(get_session)  # type:ignore


def get_post_service():
    """Get post service instance."""
    repository = get_post_repository()
    return PostService(repository, upload_service)


class PostRouter(BaseRouter):
    """Public reads and admin writes for blog posts."""

    service: PostService
    upload_field = "image"

    def __init__(self):
        super().__init__(
            service=get_post_service(),
            prefix="/api",
            tags=["Blogs"],
        )

    def _register_routes(self) -> None:
        self._register_list()
        self._register_get_by_id()
        self._register_create()
        self._register_update()
        self._register_delete()
        self._register_categories()
        self._register_stats()

    def _register_list(self) -> None:
        @self.router.get(
            "/blogs",
            response_model=PostListResponse,
            summary="List blog posts",
        )
        async def list_posts(
            page: int = Query(1, ge=1, description="Page number"),
            limit: int = Query(10, ge=1, description="Posts per page"),
            category: Optional[str] = Query(None),
            published: Optional[bool] = Query(None),
            search: Optional[str] = Query(None, description="Substring to look for"),
        ):
            filters = PostFilter(
                category=category or None,
                published=published,
                search=search or None,
            )
            result = await self.service.list_posts(filters, page=page, per_page=limit)
            return success_response(
                PostListResponse(
                    blogs=[PostRead.model_validate(item) for item in result["items"]],
                    total_pages=result["pages"],
                    current_page=result["page"],
                    total=result["total"],
                )
            )

    def _register_get_by_id(self) -> None:
        @self.router.get(
            "/blogs/{item_id}",
            response_model=PostRead,
            summary="Get blog post by ID",
            responses={404: {"description": "Blog post not found"}},
        )
        async def get_post(item_id: str):
            result = await self.service.get_by_id(item_id)
            return success_response(PostRead.model_validate(result["data"]))

    def _register_create(self) -> None:
        @self.router.post(
            "/blogs",
            response_model=PostRead,
            status_code=status.HTTP_201_CREATED,
            summary="Create blog post",
            dependencies=[Depends(require_admin)],
            responses={
                401: {"description": "Access token required"},
                403: {"description": "Invalid or expired token"},
                413: {"description": "Image too large"},
                415: {"description": "Image type not allowed"},
                422: {"description": "Validation error"},
            },
        )
        async def create_post(request: Request):
            payload, image = await self._read_payload(request)
            result = await self.service.create_post(payload, image)
            return success_response(
                PostRead.model_validate(result["data"]),
                status_code=status.HTTP_201_CREATED,
            )

    def _register_update(self) -> None:
        @self.router.put(
            "/blogs/{item_id}",
            response_model=PostRead,
            summary="Update blog post",
            dependencies=[Depends(require_admin)],
            responses={
                401: {"description": "Access token required"},
                403: {"description": "Invalid or expired token"},
                404: {"description": "Blog post not found"},
                413: {"description": "Image too large"},
                415: {"description": "Image type not allowed"},
                422: {"description": "Validation error"},
            },
        )
        async def update_post(item_id: str, request: Request):
            payload, image = await self._read_payload(request)
            result = await self.service.update_post(item_id, payload, image)
            return success_response(PostRead.model_validate(result["data"]))

    def _register_delete(self) -> None:
        @self.router.delete(
            "/blogs/{item_id}",
            response_model=MessageResponse,
            summary="Delete blog post",
            dependencies=[Depends(require_admin)],
            responses={404: {"description": "Blog post not found"}},
        )
        async def delete_post(item_id: str):
            result = await self.service.delete_post(item_id)
            return success_response(MessageResponse(message=result["message"]))

    def _register_categories(self) -> None:
        @self.router.get("/categories", summary="List distinct categories")
        async def list_categories():
            result = await self.service.categories()
            return success_response(result["data"])

    def _register_stats(self) -> None:
        @self.router.get(
            "/stats",
            summary="Post counts for the admin dashboard",
            dependencies=[Depends(require_admin)],
        )
        async def post_stats():
            result = await self.service.stats()
            return success_response(result["data"])


# Router instance
router = PostRouter().get_router()
