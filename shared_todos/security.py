import secrets
from typing import Optional

from pwdlib import PasswordHash
from pwdlib.hashers.argon2 import Argon2Hasher

password_hash = PasswordHash((Argon2Hasher(),))


def hash_password(password: str) -> str:
    """Hash a password with Argon2."""
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> tuple[bool, Optional[str]]:
    """Check a password; also returns a fresh hash when the stored one uses outdated parameters."""
    return password_hash.verify_and_update(plain_password, hashed_password)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)
