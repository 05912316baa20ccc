import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dbchat import __version__
from dbchat.common.errors import DbChatError
from dbchat.common.logger import get_logger, request_context

from .container import Container
from .routes import ai, database, health, history

logger = get_logger(__name__)


def create_app(container: Optional[Container] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "container", None) is None:
            app.state.container = Container()
        yield
        app.state.container.close()

    app = FastAPI(
        title="DBChat API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.include_router(ai.router, prefix="/api")
    app.include_router(database.router, prefix="/api")
    app.include_router(history.router, prefix="/api")
    app.include_router(health.router, prefix="/api")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten for prod
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def attach_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        with request_context(request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(DbChatError)
    async def handle_core_error(request: Request, exc: DbChatError):
        status_code = 400 if exc.is_client_error else 500
        logger.error(f"{request.method} {request.url.path} failed with {exc.error_code.value}: {exc.message}")
        return JSONResponse(status_code=status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
            for error in exc.errors()
        )
        return JSONResponse(status_code=400, content={"error": f"Invalid request: {problems}"})

    return app


app = create_app()
