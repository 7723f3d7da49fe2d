"""Password hashing and signed session tokens for admin authentication."""

from typing import Any, Dict, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from blogcms.core.config import settings
from blogcms.core.exceptions import InvalidTokenException, TokenExpiredException

TOKEN_SALT = "admin-session"
TOKEN_FIELDS = ("id", "username")


def hash_password(password: str) -> str:
    """Return a salted one-way hash of ``password``."""
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def _serializer(secret_key: Optional[str] = None) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key or settings.SECRET_KEY, salt=TOKEN_SALT)


def issue_token(identity: Dict[str, Any], secret_key: Optional[str] = None) -> str:
    """Sign ``identity`` into a self-contained token.

    The serializer embeds the issue timestamp; expiry is enforced on
    verification against ``TOKEN_EXPIRE_HOURS``.
    """
    payload = {field: str(identity[field]) for field in TOKEN_FIELDS}
    return _serializer(secret_key).dumps(payload)


def verify_token(
    token: str,
    secret_key: Optional[str] = None,
    max_age: Optional[int] = None,
) -> Dict[str, str]:
    """Return the identity carried by ``token``.

    Raises TokenExpiredException when the token is older than ``max_age``
    seconds and InvalidTokenException for a bad signature or payload.
    """
    if max_age is None:
        max_age = settings.TOKEN_EXPIRE_HOURS * 3600

    try:
        payload = _serializer(secret_key).loads(token, max_age=max_age)
    except SignatureExpired:
        raise TokenExpiredException()
    except BadSignature:
        raise InvalidTokenException()

    if not isinstance(payload, dict) or not all(payload.get(f) for f in TOKEN_FIELDS):
        raise InvalidTokenException("Malformed token payload")
    return {field: payload[field] for field in TOKEN_FIELDS}
