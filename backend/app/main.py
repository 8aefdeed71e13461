# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging_config import configure_logging
from app.middleware.request_logging import RequestLoggingMiddleware
from app.routers.assets import router as assets_router
from app.routers.clients import router as clients_router
from app.routers.health import router as health_router
from app.routers.lawyers import router as lawyers_router
from app.routers.news import router as news_router
from app.routers.root import router as root_router
from app.core.exception_handlers import app_error_handler, unhandled_exception_handler
from app.core import AppError

configure_logging()


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    app.add_middleware(RequestLoggingMiddleware)

    # ---- CORS (env-driven) ----
    # CORS_ALLOW_ORIGINS="http://localhost:5173,https://admin.example.com"
    allow_origins = _split_csv(settings.CORS_ALLOW_ORIGINS)

    # If you use cookies/credentials, do NOT use "*"
    # If allow_origins is empty, default to the local admin dev server.
    if not allow_origins:
        allow_origins = ["http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(root_router)
    app.include_router(health_router)
    app.include_router(clients_router)
    app.include_router(lawyers_router)
    app.include_router(news_router)
    app.include_router(assets_router)

    return app


app = create_app()
