"""Admin repository."""

from typing import Optional

from blogcms.apps.auth.models.admin import Admin
from blogcms.core.bases.base_repository import BaseRepository


class AdminRepository(BaseRepository[Admin]):
    """Credential store for admin accounts."""

    model = Admin

    async def find_by_username(self, username: str) -> Optional[Admin]:
        return await self.get_one(username=username)

    async def find_by_email(self, email: str) -> Optional[Admin]:
        return await self.get_one(email=email)
