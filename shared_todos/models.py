from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Database Tables
class User(SQLModel, table=True):
    """User account with hashed password."""
    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)


class UserSession(SQLModel, table=True):
    """Server-side session bound to the opaque token held in the client cookie."""
    __tablename__ = "sessions"

    token: str = Field(primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    remember: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or utcnow()
        expires_at = self.expires_at
        # SQLite hands datetimes back without tzinfo; they were stored as UTC.
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now


class Todo(SQLModel, table=True):
    __tablename__ = "todos"

    id: int | None = Field(default=None, primary_key=True)
    title: str
    # NULL marks a todo created by a guest.
    user_id: int | None = Field(default=None, foreign_key="users.id", index=True)
    completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)


# API Schemas
class TodoCreate(SQLModel):
    title: str = Field(min_length=1)


class UserPublic(SQLModel):
    """Owner fields that are safe to show next to a todo."""
    id: int
    username: str


class TodoRead(SQLModel):
    id: int
    title: str
    user: UserPublic | None
    completed: bool
    created_at: datetime


class UserRead(SQLModel):
    """Response model - excludes password hash."""
    id: int
    username: str
    created_at: datetime


class AccountState(SQLModel):
    is_guest: bool
    username: str | None = None
