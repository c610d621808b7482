import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request

from .config import Settings, settings as default_settings
from .infrastructure import db
from .infrastructure.db_errors import DRIVER_EXCEPTIONS, ERROR_CODES, driver_error_code
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.models import Base
from .interfaces.http.errors import DriverErrors, register_error_handlers
from .interfaces.http.routers import health as health_router
from .interfaces.http.routers import users as users_router
from .logging_config import configure_logging

logger = structlog.get_logger()

SQLALCHEMY_ERRORS = DriverErrors(
    exception_types=DRIVER_EXCEPTIONS,
    code_of=driver_error_code,
    table=ERROR_CODES,
)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting users service", version=settings.APP_VERSION, environment=settings.ENVIRONMENT)
        if settings.CREATE_TABLES:
            Base.metadata.create_all(bind=db.engine)
        yield
        db.engine.dispose()
        logger.info("Users service stopped")

    app = FastAPI(title="Users Service", version=settings.APP_VERSION, lifespan=lifespan)

    # Метрики и лог каждого запроса
    @app.middleware("http")
    async def observe_request(request: Request, call_next):
        start_time = time.time()
        method = request.method
        # необработанное исключение пролетает мимо call_next, считаем его как 500
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # шаблон маршрута вместо сырого пути, чтобы id не плодили метки
            route = request.scope.get("route")
            endpoint = getattr(route, "path", request.url.path)
            duration = time.time() - start_time
            http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

            logger.info(
                "http_request",
                method=method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round(duration * 1000, 2)
            )

    register_error_handlers(
        app,
        driver_errors=SQLALCHEMY_ERRORS,
        debug=settings.debug,
        log_tracebacks=not settings.is_production,
    )

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint"""
        return metrics_endpoint()

    app.include_router(health_router.router)
    app.include_router(users_router.router)
    return app


app = create_app()
