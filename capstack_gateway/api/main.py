"""ASGI entrypoint: app factory with health, metrics and the /v1 routers"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from capstack_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from capstack_gateway.api.v1 import allocation, auth, emergency, finance, profile, savings
from capstack_gateway.infrastructure.observability.logging import setup_logging
from capstack_gateway.config import settings

setup_logging(settings.log_level)

V1_ROUTERS = (
    (auth.router, "auth"),
    (profile.router, "profile"),
    (finance.router, "finance"),
    (allocation.router, "allocation"),
    (emergency.router, "emergency"),
    (savings.router, "savings"),
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="CapStack Gateway",
        description="Personal finance scoring, savings discipline and allocation service",
        version="0.1.0",
    )

    # RequestIDMiddleware is added last so it wraps MetricsMiddleware
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
