"""
App factory: every collaborator (engine, storage, policy) is built from one Settings
instance and kept on app.state, so tests and deployments can pass their own.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from nurul_iman.config import Settings, get_settings
from nurul_iman.core.storage import LOCAL_URL_PREFIX, build_storage, local_storage_dir
from nurul_iman.database import build_engine, build_session_factory, init_db
from nurul_iman.errors import AppError, AuthError
from nurul_iman.policy import build_policy
from nurul_iman.routers import announcements, auth, roles, rundowns, users
from nurul_iman.utils.response import api_response, format_validation_errors

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError):
    logger.info(
        "%s %s -> %s %s: %s",
        request.method, request.url.path, exc.status_code, type(exc).__name__, exc.message,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=api_response(exc.message, exc.status_code, "error", exc.data),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = format_validation_errors(exc.errors())
    return JSONResponse(
        status_code=422,
        content=api_response("You must complete the required fields", 422, "error", {"errors": errors}),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=api_response(str(exc.detail), exc.status_code, "error", None),
        headers=getattr(exc, "headers", None),
    )


def create_app(settings: Settings | None = None, s3_client=None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    engine = build_engine(settings)
    if settings.auto_create_tables:
        init_db(engine, settings)

    app = FastAPI(title="Nurul Iman API", version="1.0.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.storage = build_storage(settings, s3_client=s3_client)
    app.state.policy = build_policy(settings.authorization_policy)
    logger.info("Authorization policy: %s", settings.authorization_policy)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(roles.router)
    app.include_router(announcements.router)
    app.include_router(rundowns.router)

    images_dir = local_storage_dir(settings)
    if settings.storage_backend == "local":
        images_dir.mkdir(parents=True, exist_ok=True)
    if images_dir.is_dir():
        app.mount(LOCAL_URL_PREFIX.rstrip("/"), StaticFiles(directory=images_dir), name="images")

    @app.get("/")
    def root():
        return {"message": "Nurul Iman API", "docs": "/docs"}

    return app
