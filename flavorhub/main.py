import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from prometheus_client import make_asgi_app

import flavorhub.models  # noqa: F401  registers tables on Base.metadata
from flavorhub.config import settings
from flavorhub.database import Base, engine
from flavorhub.errors import FlavorHubError
from flavorhub.middleware.metrics import MetricsMiddleware
from flavorhub.middleware.request_id import RequestIDMiddleware, get_request_id
from flavorhub.routers import auth, menu_items, orders, payments, reservations, restaurants
from flavorhub.utils.logging import setup_logging
from flavorhub.utils.tracing import setup_tracing

setup_logging(settings.log_level, service_name="flavorhub")
logger = logging.getLogger(__name__)

setup_tracing("flavorhub", settings.otlp_endpoint, enabled=settings.tracing_enabled)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up, creating database tables")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.tracing_enabled:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    logger.info("Startup complete")

    yield

    await engine.dispose()
    logger.info("Shutting down")


app = FastAPI(
    title="FlavorHub",
    description="Restaurant partners and customers: menus, orders, reservations and payments",
    version="1.0.0",
    lifespan=lifespan,
)

if settings.tracing_enabled:
    FastAPIInstrumentor.instrument_app(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(restaurants.router, prefix="/restaurants", tags=["restaurants"])
app.include_router(menu_items.router, prefix="/menu-items", tags=["menu items"])
app.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
app.include_router(orders.router, prefix="/orders", tags=["orders"])
app.include_router(payments.router, prefix="/payments", tags=["payments"])

# Expose Prometheus metrics at /metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


@app.exception_handler(FlavorHubError)
async def flavorhub_error_handler(request: Request, exc: FlavorHubError) -> JSONResponse:
    logger.warning(
        "Request rejected",
        extra={
            "request_id": get_request_id(request),
            "path": request.url.path,
            "error": type(exc).__name__,
            "detail": str(exc),
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
