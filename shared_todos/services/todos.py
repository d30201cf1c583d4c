import logging
from typing import Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from shared_todos.database import storage_errors
from shared_todos.models import Todo, TodoRead, User, UserPublic

logger = logging.getLogger(__name__)


def _to_read(todo: Todo, owner: Optional[User]) -> TodoRead:
    return TodoRead(
        id=todo.id,
        title=todo.title,
        user=UserPublic(id=owner.id, username=owner.username) if owner else None,
        completed=todo.completed,
        created_at=todo.created_at,
    )


def list_todos(db: Session) -> list[TodoRead]:
    """All todos in insertion order, each with its owner's public fields."""
    statement = (
        select(Todo, User)
        .join(User, Todo.user_id == User.id, isouter=True)
        .order_by(Todo.id)
    )
    with storage_errors(db, "list todos"):
        rows = db.exec(statement).all()
    return [_to_read(todo, owner) for todo, owner in rows]


def add_todo(db: Session, title: str, acting_user: Optional[User] = None) -> TodoRead:
    """Insert a todo owned by ``acting_user``, or by nobody for guests."""
    todo = Todo(title=title, user_id=acting_user.id if acting_user else None)
    with storage_errors(db, "add a todo"):
        db.add(todo)
        db.commit()
        db.refresh(todo)
    logger.info(f"Todo {todo.id} created by {acting_user.username if acting_user else 'guest'}")
    return _to_read(todo, acting_user)


def delete_todo(db: Session, todo_id: int) -> int:
    """Delete by id. A missing id deletes nothing and is still a success.

    Any caller may delete any todo; ownership is not checked.
    """
    with storage_errors(db, "delete a todo"):
        result = db.exec(delete(Todo).where(Todo.id == todo_id))
        db.commit()
    logger.info(f"Delete todo {todo_id}: {result.rowcount} row(s) removed")
    return result.rowcount
