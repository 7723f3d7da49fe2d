from typing import Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blogcms.core.exceptions import UnauthorizedException
from blogcms.core.security import verify_token

bearer_scheme = HTTPBearer(auto_error=False, description="Admin session token")


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, str]:
    """Gate for mutation endpoints; yields the token's admin identity."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException()
    return verify_token(credentials.credentials)
