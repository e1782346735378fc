from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from qrdine.api.error_handling import register_exception_handlers
from qrdine.api.middleware.request_context import AccessLogMiddleware, RequestIDMiddleware
from qrdine.api.routes.cart import router as cart_router
from qrdine.api.routes.checkout import router as checkout_router
from qrdine.api.routes.health import router as health_router
from qrdine.api.routes.menu import router as menu_router
from qrdine.api.routes.metrics import router as metrics_router
from qrdine.api.routes.orders import router as orders_router
from qrdine.api.routes.tables import router as tables_router
from qrdine.api.session import (
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE_SECONDS,
    session_https_only,
    session_secret_key,
)
from qrdine.infrastructure.observability.logging_config import configure_logging
from qrdine.infrastructure.observability.otel import configure_otel


def _cors_allow_origins() -> list[str]:
    env = os.getenv("APP_ENV", "dev").lower()
    if env in {"dev", "test"}:
        return ["*"]

    default_value = os.getenv("APP_BASE_URL", "http://localhost:3000")
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", default_value)
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="qrdine backend", version="0.1.0")
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(tables_router)
    app.include_router(menu_router)
    app.include_router(cart_router)
    app.include_router(orders_router)
    app.include_router(checkout_router)

    allow_origins = _cors_allow_origins()
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key(),
        session_cookie=SESSION_COOKIE_NAME,
        max_age=SESSION_MAX_AGE_SECONDS,
        same_site="lax",
        https_only=session_https_only(),
    )
    # Wildcard origins cannot carry the session cookie.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    configure_otel(app)
    return app


app = create_app()
