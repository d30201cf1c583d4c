import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared_todos.config import get_settings
from shared_todos.database import create_db_and_tables
from shared_todos.dependencies import OptionalUserDep
from shared_todos.errors import AuthError, StorageError, TodoAppError
from shared_todos.events import VersionCounter
from shared_todos.models import AccountState
from shared_todos.routers import account, todos

settings = get_settings()

# Logging setup
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("Database tables verified/created.")
    yield


app = FastAPI(title="Shared Todos", lifespan=lifespan)
app.state.todos_version = VersionCounter()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time", "X-Todos-Version"],
)


@app.middleware("http")
async def add_process_time(request: Request, call_next):
    """Add processing time header."""
    start = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Process-Time"] = f"{time.perf_counter() - start:.4f}"
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.info(f"→ {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(f"← {request.method} {request.url.path} [{response.status_code}]")
    return response


@app.exception_handler(TodoAppError)
async def todo_app_error_handler(request: Request, exc: TodoAppError):
    """Turn domain errors into ``{"detail": ...}`` responses."""
    headers = None
    if isinstance(exc, StorageError):
        # The cause was logged where it happened; only the generic message goes out.
        logger.error(f"Storage failure on {request.method} {request.url.path}")
    elif isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Cookie"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


app.include_router(todos.router)
app.include_router(account.router)


@app.get("/")
def root(current_user: OptionalUserDep):
    state = AccountState(
        is_guest=current_user is None,
        username=current_user.username if current_user else None,
    )
    return {"message": "Shared Todos", "docs": "/docs", "account": state}


@app.get("/health")
def health_check():
    return {"status": "ok"}
