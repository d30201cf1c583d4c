from pwdlib.hashers.argon2 import Argon2Hasher
from sqlmodel import Session

from shared_todos.models import User
from shared_todos.security import hash_password, new_session_token, verify_password
from shared_todos.services import auth as auth_service


def test_hash_and_verify():
    hashed = hash_password("pw1")
    assert hashed != "pw1"
    assert verify_password("pw1", hashed) == (True, None)
    assert verify_password("pw2", hashed)[0] is False


def test_session_tokens_are_unique():
    tokens = {new_session_token() for _ in range(50)}
    assert len(tokens) == 50


def test_login_upgrades_outdated_hash(session: Session):
    weak = Argon2Hasher(time_cost=1, memory_cost=8192, parallelism=1).hash("pw1")
    session.add(User(username="legacy", password_hash=weak))
    session.commit()

    user, _ = auth_service.login(session, "legacy", "pw1")

    assert user.password_hash != weak
    assert verify_password("pw1", user.password_hash) == (True, None)
