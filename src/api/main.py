import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import get_settings
from src.app_shell.config import validate_ops_rules
from src.app_shell.context import ServiceContext
from src.components.bootstrap import bootstrap_admin
from src.domain.errors import (
    CollaboratorUnavailable,
    InvalidInput,
    ModerationError,
    NotFound,
    RoleUpdateUnconfirmed,
    Unauthorized,
)
from src.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules, settings)
    except (FileNotFoundError, ValueError) as e:
        logger.critical(f"Rules load failed: {e}")
        sys.exit(1)
    logger.info(f"Rules loaded from {settings.rules_path}")

    if settings.backend == "memory":
        ctx = ServiceContext.in_memory(rules)
    else:
        SQLiteMigrator(settings.db_path).run_migrations()
        ctx = ServiceContext.create(settings.db_path, rules)

    bootstrap_admin(ctx.identity, rules)
    app.state.ctx = ctx

    yield


app = FastAPI(
    title="Journal Moderation API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# --- Errors ---
ERROR_STATUS: list[tuple[type[ModerationError], int]] = [
    (Unauthorized, status.HTTP_403_FORBIDDEN),
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (RoleUpdateUnconfirmed, status.HTTP_409_CONFLICT),
    (CollaboratorUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
]


@app.exception_handler(ModerationError)
async def moderation_error_handler(request: Request, exc: ModerationError) -> JSONResponse:
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for exc_type, status_code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            code = status_code
            break

    body: dict[str, Any] = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, RoleUpdateUnconfirmed):
        # Client must reload this profile rather than trust its local copy
        body["resync_user_id"] = exc.target_user_id
    return JSONResponse(status_code=code, content=body)


# --- Routers ---
from src.api.routes import auth, posts, users  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
