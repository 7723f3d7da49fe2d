"""Admin model."""

from typing import Optional

from sqlmodel import Field

from blogcms.core.database import BaseModel


class Admin(BaseModel, table=True):
    """Operator account allowed to mutate posts."""

    __tablename__ = "auth_admins"  # type: ignore
    username: str = Field(index=True, unique=True)
    password_hash: str = Field()
    email: Optional[str] = Field(default=None, index=True, unique=True)

    def __repr__(self) -> str:
        return f"Admin(id={self.id!r}, username={self.username!r})"
