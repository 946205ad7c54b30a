# docintake/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docintake.core.config import settings
from docintake.core.logging_config import configure_logging
from docintake.middleware.request_logging import RequestLoggingMiddleware
from docintake.routers.health import router as health_router
from docintake.routers.documents import router as documents_router
from docintake.routers.root import router as root_router
from docintake.core.exception_handlers import app_error_handler, unhandled_exception_handler
from docintake.core import AppError

configure_logging()


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    app.add_middleware(RequestLoggingMiddleware)

    # ---- CORS (env-driven) ----
    # CORS_ALLOW_ORIGINS="http://localhost:3000,https://intake.example.com"
    allow_origins = _split_csv(settings.CORS_ALLOW_ORIGINS)
    if not allow_origins:
        allow_origins = ["http://localhost:3000"]

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
    app.include_router(documents_router)

    return app


app = create_app()
