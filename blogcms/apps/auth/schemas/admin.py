"""Admin and login schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginRequest(BaseModel):
    username: str
    password: str


class AdminCreate(BaseModel):
    """Schema for creating an admin."""

    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username cannot be empty")
        return value


class AdminRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    admin: AdminRead
