from fastapi import APIRouter, Response

from shared_todos.database import SessionDep
from shared_todos.dependencies import OptionalUserDep, VersionDep
from shared_todos.models import TodoCreate, TodoRead
from shared_todos.services import todos as todo_service

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("/", response_model=list[TodoRead])
def list_todos(session: SessionDep, version: VersionDep, response: Response):
    """List every todo, guests included."""
    response.headers["X-Todos-Version"] = str(version.value)
    return todo_service.list_todos(session)


@router.get("/version")
def read_version(version: VersionDep):
    """Current change counter; re-fetch the list when it moves."""
    return {"version": version.value}


@router.post("/", response_model=TodoRead, status_code=201)
def create_todo(
    todo_create: TodoCreate,
    session: SessionDep,
    current_user: OptionalUserDep,
    version: VersionDep,
):
    """Create a todo owned by the current user, or by nobody for guests."""
    todo = todo_service.add_todo(session, todo_create.title, current_user)
    version.bump()
    return todo


@router.delete("/{todo_id}", status_code=204)
def delete_todo(todo_id: int, session: SessionDep, version: VersionDep):
    """Delete a todo. Unknown ids are not an error."""
    todo_service.delete_todo(session, todo_id)
    version.bump()
    return None
