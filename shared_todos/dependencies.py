from typing import Annotated, Optional

from fastapi import Cookie, Depends, Request

from shared_todos.auth import read_session_cookie
from shared_todos.config import get_settings
from shared_todos.database import SessionDep
from shared_todos.errors import NotAuthenticated
from shared_todos.events import VersionCounter
from shared_todos.models import User
from shared_todos.services import auth as auth_service

settings = get_settings()


def get_session_token(
    session_cookie: Annotated[Optional[str], Cookie(alias=settings.session_cookie_name)] = None,
) -> Optional[str]:
    """Opaque session token carried by the signed cookie, if any."""
    return read_session_cookie(session_cookie)


SessionTokenDep = Annotated[Optional[str], Depends(get_session_token)]


def get_optional_user(token: SessionTokenDep, session: SessionDep) -> Optional[User]:
    """Current user, or None for guests."""
    return auth_service.current_user(session, token)


OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]


def get_current_user(user: OptionalUserDep) -> User:
    """Current user; anonymous callers get a 401."""
    if user is None:
        raise NotAuthenticated()
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_version_counter(request: Request) -> VersionCounter:
    return request.app.state.todos_version


VersionDep = Annotated[VersionCounter, Depends(get_version_counter)]
