"""FastAPI application factory wiring routes, services, and shared state."""
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from flixauth.api import routes_auth, routes_health
from flixauth.api.errors import register_error_handlers
from flixauth.core.config import settings
from flixauth.core.db import Base, engine
from flixauth.models import user  # noqa: F401 - ensure models are registered
from flixauth.repositories.user_repository import UserRepository
from flixauth.services.auth_service import AuthService

LOGGER = logging.getLogger(__name__)


def init_db() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        LOGGER.info("Database initialized successfully")
    except SQLAlchemyError as exc:
        # Keep serving; /api/test-db reports the outage.
        LOGGER.error("Database initialization error: %s", exc)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    app = FastAPI(title="flixauth", version="0.1.0")

    init_db()
    app.state.auth_service = AuthService(UserRepository())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(routes_auth.router)
    app.include_router(routes_health.router)
    register_error_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        logging.info("%s %s START", request.method, request.url.path)
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logging.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed)
        return response

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
