"""Auth router."""

from typing import Dict

from fastapi import Body, Depends, status

from blogcms.apps.auth.repositories.admin_repository import AdminRepository
from blogcms.apps.auth.schemas.admin import AdminRead, LoginResponse
from blogcms.apps.auth.services.auth_service import AuthService
from blogcms.core.bases.base_router import BaseRouter
from blogcms.core.database import get_session
from blogcms.core.dependencies import require_admin
from blogcms.core.response.handlers import success_response


def get_admin_repository():
    """Get admin repository instance."""
    return AdminRepository(get_session)  # type:ignore


def get_auth_service():
    """Get auth service instance."""
    return AuthService(get_admin_repository())


class AuthRouter(BaseRouter):
    """Login, session check and admin creation."""

    service: AuthService

    def __init__(self):
        super().__init__(
            service=get_auth_service(),
            prefix="/api",
            tags=["Auth"],
        )

    def _register_routes(self) -> None:
        self._register_login()
        self._register_me()
        self._register_create_admin()

    def _register_login(self) -> None:
        async def login(payload: Dict = Body(...)):
            result = await self.service.login(payload)
            return success_response(result["data"])

        options = dict(
            response_model=LoginResponse,
            summary="Log in as admin",
            responses={401: {"description": "Invalid credentials"}},
        )
        self.add_custom_route("/auth/login", "post", login, **options)
        # Older admin panel builds post here.
        self.add_custom_route("/admin/login", "post", login, include_in_schema=False, **options)

    def _register_me(self) -> None:
        @self.router.get("/auth/me", response_model=AdminRead, summary="Current admin")
        async def me(identity: Dict[str, str] = Depends(require_admin)):
            result = await self.service.get_admin(identity["id"])
            return success_response(result["data"])

    def _register_create_admin(self) -> None:
        @self.router.post(
            "/auth/admins",
            response_model=AdminRead,
            status_code=status.HTTP_201_CREATED,
            summary="Create another admin",
            dependencies=[Depends(require_admin)],
            responses={409: {"description": "Username or email already exists"}},
        )
        async def create_admin(payload: Dict = Body(...)):
            result = await self.service.create_admin(payload)
            return success_response(result["data"], status_code=status.HTTP_201_CREATED)


# Router instance
router = AuthRouter().get_router()
