"""Auth service."""

import logging
from typing import Any, Dict, Mapping

from blogcms.apps.auth.models.admin import Admin
from blogcms.apps.auth.repositories.admin_repository import AdminRepository
from blogcms.apps.auth.schemas.admin import AdminCreate, AdminRead, LoginRequest, LoginResponse
from blogcms.core import exceptions
from blogcms.core.bases.base_service import BaseService
from blogcms.core.config import settings
from blogcms.core.security import hash_password, issue_token, verify_password

logger = logging.getLogger(__name__)


class AuthService(BaseService[Admin]):
    """Login and admin account management."""

    item_name = "Admin"

    def __init__(self, repository: AdminRepository):
        super().__init__(repository)
        self.repository: AdminRepository = repository

    async def login(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        credentials = self._parse(LoginRequest, dict(raw))

        admin = await self.repository.find_by_username(credentials.username)
        if admin is None or not verify_password(credentials.password, admin.password_hash):
            logger.warning("Failed login attempt for username %r", credentials.username)
            raise exceptions.UnauthorizedException("Invalid credentials")

        token = issue_token({"id": admin.id, "username": admin.username})
        logger.info("Admin %r logged in", admin.username)
        return {
            "data": LoginResponse(token=token, admin=AdminRead.model_validate(admin)),
            "message": "Login successful",
        }

    async def _validate_create(self, create_data: Dict[str, Any]) -> None:
        if await self.repository.find_by_username(create_data["username"]):
            raise exceptions.ConflictException("Username already exists")
        email = create_data.get("email")
        if email and await self.repository.find_by_email(email):
            raise exceptions.ConflictException("Email already exists")

    async def create_admin(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        data = self._parse(AdminCreate, dict(raw))
        result = await self.create(
            {
                "username": data.username,
                "password_hash": hash_password(data.password),
                "email": data.email,
            }
        )
        logger.info("Created admin %r", data.username)
        return {"data": AdminRead.model_validate(result["data"]), "message": result["message"]}

    async def get_admin(self, admin_id: str) -> Dict[str, Any]:
        result = await self.get_by_id(admin_id)
        return {"data": AdminRead.model_validate(result["data"]), "message": result["message"]}

    async def ensure_default_admin(self) -> None:
        """Seed the default admin account when it does not exist yet."""
        username = settings.DEFAULT_ADMIN_USERNAME
        if await self.repository.find_by_username(username):
            return
        try:
            await self.create_admin(
                {
                    "username": username,
                    "password": settings.DEFAULT_ADMIN_PASSWORD,
                    "email": settings.DEFAULT_ADMIN_EMAIL or None,
                }
            )
        except exceptions.ConflictException:
            # Another worker seeded it first.
            return
        logger.warning(
            "Default admin %r created; change its password before going live", username
        )
