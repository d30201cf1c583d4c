from datetime import timedelta

import pytest
from sqlmodel import Session, select

from shared_todos.errors import (
    InvalidCredentials,
    PasswordMismatch,
    StorageError,
    UsernameTaken,
    ValidationError,
)
from shared_todos.models import Todo, User, UserSession, utcnow
from shared_todos.services import auth as auth_service
from shared_todos.services import todos as todo_service


def test_signup_then_current_user(session: Session):
    """A fresh signup yields a session that resolves back to the new user."""
    user, user_session = auth_service.signup(session, "alice", "pw1", "pw1")
    assert user.id is not None
    assert user.password_hash != "pw1"

    resolved = auth_service.current_user(session, user_session.token)
    assert resolved is not None
    assert resolved.username == "alice"


@pytest.mark.parametrize("username", ["alice", "bob", ""])
def test_signup_password_mismatch_is_validation_error(session: Session, username: str):
    auth_service.signup(session, "alice", "pw1", "pw1")
    with pytest.raises(ValidationError):
        auth_service.signup(session, username, "pw1", "pw2")


def test_signup_mismatch_raises_password_mismatch(session: Session):
    with pytest.raises(PasswordMismatch):
        auth_service.signup(session, "carol", "a", "b")


def test_signup_username_taken(session: Session):
    auth_service.signup(session, "alice", "pw1", "pw1")
    with pytest.raises(UsernameTaken):
        auth_service.signup(session, "alice", "other", "other")


def test_login_rejects_unknown_user_and_bad_password(session: Session):
    auth_service.signup(session, "alice", "pw1", "pw1")
    with pytest.raises(InvalidCredentials):
        auth_service.login(session, "nobody", "pw1")
    with pytest.raises(InvalidCredentials):
        auth_service.login(session, "alice", "wrong")


def test_login_session_lifetime_depends_on_remember(session: Session):
    auth_service.signup(session, "alice", "pw1", "pw1")

    _, short = auth_service.login(session, "alice", "pw1")
    _, long = auth_service.login(session, "alice", "pw1", remember=True)

    assert long.remember is True
    assert short.remember is False
    assert long.expires_at - long.created_at == timedelta(days=30)
    assert short.expires_at - short.created_at == timedelta(hours=12)


def test_logout_is_idempotent(session: Session):
    _, user_session = auth_service.signup(session, "alice", "pw1", "pw1")

    auth_service.logout(session, user_session.token)
    auth_service.logout(session, user_session.token)
    auth_service.logout(session, None)

    assert auth_service.current_user(session, user_session.token) is None


def test_current_user_missing_or_unknown_token(session: Session):
    assert auth_service.current_user(session, None) is None
    assert auth_service.current_user(session, "not-a-token") is None


def test_expired_session_resolves_to_nobody_and_is_removed(session: Session):
    user, user_session = auth_service.signup(session, "alice", "pw1", "pw1")
    token = user_session.token

    later = utcnow() + timedelta(hours=13)
    assert auth_service.current_user(session, token, now=later) is None
    assert session.get(UserSession, token) is None


def test_add_todo_as_guest_adds_one_unowned_row(session: Session):
    before = todo_service.list_todos(session)

    todo_service.add_todo(session, "water plants", None)

    after = todo_service.list_todos(session)
    assert len(after) == len(before) + 1
    added = after[-1]
    assert added.title == "water plants"
    assert added.user is None
    assert added.completed is False
    assert session.get(Todo, added.id).user_id is None


def test_add_todo_allows_duplicates_and_keeps_title_as_is(session: Session):
    todo_service.add_todo(session, "  spaced  ", None)
    todo_service.add_todo(session, "  spaced  ", None)

    titles = [todo.title for todo in todo_service.list_todos(session)]
    assert titles == ["  spaced  ", "  spaced  "]


def test_delete_missing_todo_is_a_no_op(session: Session):
    todo_service.add_todo(session, "keep me", None)
    before = todo_service.list_todos(session)

    removed = todo_service.delete_todo(session, 9999)

    assert removed == 0
    assert todo_service.list_todos(session) == before


def test_list_todos_in_insertion_order_with_owner(session: Session):
    alice, _ = auth_service.signup(session, "alice", "pw1", "pw1")
    todo_service.add_todo(session, "first", alice)
    todo_service.add_todo(session, "second", None)

    todos = todo_service.list_todos(session)
    assert [todo.title for todo in todos] == ["first", "second"]
    assert todos[0].user.username == "alice"
    assert todos[1].user is None


def test_alice_scenario(session: Session):
    auth_service.signup(session, "alice", "pw1", "pw1")
    alice, user_session = auth_service.login(session, "alice", "pw1")
    acting = auth_service.current_user(session, user_session.token)
    assert acting.id == alice.id

    todo = todo_service.add_todo(session, "buy milk", acting)
    listed = todo_service.list_todos(session)
    match = [t for t in listed if t.id == todo.id]
    assert len(match) == 1
    assert match[0].title == "buy milk"
    assert match[0].user.username == "alice"
    assert match[0].completed is False

    todo_service.delete_todo(session, todo.id)
    assert todo.id not in [t.id for t in todo_service.list_todos(session)]
    assert session.exec(select(Todo)).all() == []


def test_signup_removes_user_when_session_cannot_be_stored(session: Session, engine):
    UserSession.__table__.drop(engine)

    with pytest.raises(StorageError):
        auth_service.signup(session, "bob", "pw1", "pw1")

    assert session.exec(select(User)).all() == []


def test_signup_rejects_empty_username_after_mismatch_check(session: Session):
    with pytest.raises(PasswordMismatch):
        auth_service.signup(session, "", "pw1", "pw2")
    with pytest.raises(ValidationError) as excinfo:
        auth_service.signup(session, "", "pw1", "pw1")
    assert not isinstance(excinfo.value, PasswordMismatch)
