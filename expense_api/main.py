# expense_api/main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from expense_api.api.v1.api import api_router
from expense_api.core.config import DEFAULT_SECRET_KEY, Settings, settings as default_settings
from expense_api.core.database import build_engine, build_session_factory, create_db_and_tables
from expense_api.core.exceptions import AppError, app_error_handler, validation_error_handler
from expense_api.core.security import TokenIssuer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is the development default; set it before deploying")

    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_issuer = TokenIssuer.from_settings(settings)

    # Create all tables on startup; Alembic owns schema changes after that
    await create_db_and_tables(engine)
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Database engine disposed")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "internal_error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Authentication", "description": "Signup, login, password change and session"},
            {"name": "Google Authentication", "description": "Google OAuth popup flow"},
            {"name": "User Management", "description": "User profile and settings operations"},
        ],
    )
    app.state.settings = settings

    # Signed cookie holding the one-time OAuth state
    app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY, same_site="lax")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/")
    async def root():
        return {
            "message": f"{settings.APP_NAME} is running",
            "version": settings.VERSION,
            "docs": "/docs",
        }

    @app.get("/api/v1/health")
    async def health():
        return {"ok": True, "service": "api", "ts": datetime.now(timezone.utc).isoformat()}

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("expense_api.main:app", host="0.0.0.0", port=8000, reload=True)
