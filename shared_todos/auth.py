from datetime import datetime
from typing import Optional

from jose import JWTError, jwt

from shared_todos.config import get_settings

settings = get_settings()


def create_session_cookie(token: str, expires_at: datetime) -> str:
    """Sign the opaque session token into the cookie value."""
    to_encode = {"sid": token, "exp": expires_at}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def read_session_cookie(value: Optional[str]) -> Optional[str]:
    """Return the session token from a cookie, or None if missing, forged or expired."""
    if not value:
        return None
    try:
        payload = jwt.decode(value, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    token = payload.get("sid")
    if not isinstance(token, str):
        return None
    return token
