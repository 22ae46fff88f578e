import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .database import create_db_engine, create_tables
from .errors import TaskboardError
from .graphql import create_graphql_router
from .models import utcnow
from .routers import auth, tasks

logger = logging.getLogger(__name__)


async def handle_taskboard_error(request: Request, exc: TaskboardError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies answer like any other ValidationError: 400 with one message."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid input")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


def create_app(settings: Optional[Settings] = None, clock: Callable = utcnow) -> FastAPI:
    """Build the API. The engine is created here and shared through ``app.state``."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Taskboard API",
        description="Multi-user task manager with REST and GraphQL APIs",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.clock = clock
    app.state.engine = create_db_engine(settings.database_url)
    create_tables(app.state.engine)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskboardError, handle_taskboard_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(tasks.router, prefix="/api", tags=["tasks"])
    app.include_router(create_graphql_router(), prefix="/graphql", tags=["graphql"])

    @app.get("/")
    def read_root():
        return {"message": "Taskboard API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "timestamp": utcnow().isoformat()}

    logger.info("Taskboard API ready (database=%s)", app.state.engine.url.render_as_string(hide_password=True))
    return app

