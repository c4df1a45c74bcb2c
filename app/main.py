from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from Security.sanitizer_config import feature_enabled
from Security.xss_protection import XSSProtectionMiddleware

from .database import Base, engine
from .error_handlers import register_error_handlers
from .saved_resource_routes import router as saved_resource_router
from .user_routes import router as user_router

logger = logging.getLogger("app.main")


def create_app(bind=None) -> FastAPI:
    """Build the API; bind overrides the engine used to create tables."""
    Base.metadata.create_all(bind=bind or engine)

    app = FastAPI(title="VetConnect")
    if feature_enabled("xss-headers", True):
        app.add_middleware(XSSProtectionMiddleware)

    app.include_router(user_router)
    app.include_router(saved_resource_router)
    register_error_handlers(app)

    if feature_enabled("sanitization-metrics", True):
        @app.get("/metrics", include_in_schema=False)
        def metrics():
            return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Request duration at debug level
    @app.middleware("http")
    async def timing_middleware(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration = (time.perf_counter() - start) * 1000
        logger.debug("%s %s took %.2f ms", request.method, request.url.path, duration)
        return response

    return app
