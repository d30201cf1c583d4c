"""Signup, login, logout and settings.

Signup and login are only for anonymous callers and redirect home once a
session exists; settings is only for authenticated callers.
"""

from typing import Annotated

from fastapi import APIRouter, Form, Response, status
from fastapi.responses import RedirectResponse

from shared_todos.auth import create_session_cookie
from shared_todos.config import get_settings
from shared_todos.database import SessionDep
from shared_todos.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    SessionTokenDep,
    VersionDep,
)
from shared_todos.models import UserRead, UserSession
from shared_todos.services import auth as auth_service

settings = get_settings()

router = APIRouter(prefix="/account", tags=["account"])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _set_session_cookie(response: Response, user_session: UserSession) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_cookie(user_session.token, user_session.expires_at),
        # Without max_age the cookie ends with the browser session.
        max_age=int(auth_service.session_lifetime(True).total_seconds())
        if user_session.remember
        else None,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


@router.get("/signup")
def signup_page(current_user: OptionalUserDep):
    if current_user is not None:
        return _redirect("/")
    return {"page": "signup", "fields": ["username", "password", "password_confirmation", "remember"]}


@router.post("/signup", response_model=UserRead, status_code=201)
def signup(
    session: SessionDep,
    current_user: OptionalUserDep,
    version: VersionDep,
    response: Response,
    # Empty values reach the service so a mismatch is reported first.
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    password_confirmation: Annotated[str, Form()] = "",
    remember: Annotated[bool, Form()] = False,
):
    """Create an account and start a session for it."""
    if current_user is not None:
        return _redirect("/")
    user, user_session = auth_service.signup(
        session, username, password, password_confirmation, remember
    )
    _set_session_cookie(response, user_session)
    version.bump()
    return user


@router.get("/login")
def login_page(current_user: OptionalUserDep):
    if current_user is not None:
        return _redirect("/")
    return {"page": "login", "fields": ["username", "password", "remember"]}


@router.post("/login", response_model=UserRead)
def login(
    username: Annotated[str, Form()],
    password: Annotated[str, Form()],
    session: SessionDep,
    current_user: OptionalUserDep,
    version: VersionDep,
    response: Response,
    remember: Annotated[bool, Form()] = False,
):
    """Check credentials and start a session."""
    if current_user is not None:
        return _redirect("/")
    user, user_session = auth_service.login(session, username, password, remember)
    _set_session_cookie(response, user_session)
    version.bump()
    return user


@router.post("/logout", status_code=204)
def logout(token: SessionTokenDep, session: SessionDep, version: VersionDep, response: Response):
    """End the current session. Logging out twice is fine."""
    # Open to guests too: logout is idempotent, there is just nothing to drop.
    auth_service.logout(session, token)
    response.delete_cookie(settings.session_cookie_name, httponly=True, samesite="lax")
    version.bump()
    return None


@router.get("/settings", response_model=UserRead)
def settings_page(current_user: OptionalUserDep):
    if current_user is None:
        return _redirect("/account/login")
    return current_user


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: CurrentUserDep):
    """Return current authenticated user info."""
    return current_user
