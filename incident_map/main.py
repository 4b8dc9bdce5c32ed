import os

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.starlette import StarletteIntegration
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from incident_map.api import errors
from incident_map.api.routers.admin import router as admin_router
from incident_map.api.routers.healthz import router as healthz_router
from incident_map.api.routers.messages import router as messages_router
from incident_map.api.routers.reports import router as reports_router
from incident_map.api.routers.sources import router as sources_router
from incident_map.logging import setup_logging
from incident_map.middleware.rate_limit import limiter, rate_limit_middleware
from incident_map.middleware.request_id import request_id_middleware
from incident_map.middleware.security_headers import security_headers_middleware


def _init_sentry(env: str) -> None:
    # No-op if DSN is missing
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return
    # traces_sample_rate: clamp to [0.0, 0.2]
    try:
        rate_raw = float(os.getenv("SENTRY_TRACES_RATE", "0"))
    except ValueError:
        rate_raw = 0.0
    sentry_sdk.init(
        dsn=dsn,
        environment=env,
        release=os.getenv("RELEASE"),
        integrations=[StarletteIntegration()],
        traces_sample_rate=max(0.0, min(0.2, rate_raw)),
        # Fingerprints are pseudonymous identifiers; keep them out of events
        send_default_pii=False,
    )


def create_app() -> FastAPI:
    setup_logging()
    env = os.getenv("APP_ENV", "dev")
    _init_sentry(env)

    app = FastAPI(
        title="Incident Map API",
        version="0.1.0",
        description=(
            "地図上のインシデント報告API。\n"
            "- 投票は時間減衰スコア (1 / (1 + 経過時間h)) で集計\n"
            "- score >= 2.0 で confirmed、<= -2.0 で denied\n"
            "- 4時間アクティビティがないレポートは一覧取得時に expired\n"
        ),
    )
    errors.install(app)
    app.state.limiter = limiter

    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(rate_limit_middleware)

    # CORS from ALLOW_ORIGINS env (comma-separated)
    allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "").split(",") if o.strip()]
    if allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allow_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS", "HEAD"],
            allow_headers=["*"],
        )

    app.include_router(reports_router)
    app.include_router(messages_router)
    app.include_router(sources_router)
    app.include_router(admin_router)
    app.include_router(healthz_router)

    @app.get("/health")
    def health():
        return {"status": "ok", "env": env}

    # 429 handler: unified JSON {"error": {...}}
    @app.exception_handler(RateLimitExceeded)
    async def _rate_limit_handler(request: Request, exc: RateLimitExceeded):  # type: ignore[unused-ignore]
        info = getattr(request.state, "rate_limit_info", None)
        if not isinstance(info, dict):
            info = {
                "method": request.method,
                "ip": (request.client.host if request.client else None) or "-",
                "limit": "-",
            }
        return JSONResponse(
            status_code=429,
            content={
                "error": {
                    "code": "rate_limited",
                    "message": "Too Many Requests",
                    "detail": info,
                }
            },
        )

    structlog.get_logger(__name__).info("app_startup", env=env)
    return app


app = create_app()
