"""Import every app's models so SQLModel.metadata knows all tables."""

from blogcms.apps.auth.models.admin import Admin  # noqa: F401
from blogcms.apps.blog.models.post import Post  # noqa: F401
