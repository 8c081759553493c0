"""FastAPI application entrypoint."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.deps import OrderTrackerDep
from app.api.routes.orders import router as orders_router
from app.core.config import get_settings
from app.core.logging import configure_logging
from app.schemas.orders import HealthRead
from app.services.orders import OrderTracker

settings = get_settings()
configure_logging(settings.log_level, json=settings.log_json)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    tracker = OrderTracker(max_workers=settings.worker_threads)
    app.state.order_tracker = tracker
    logger.info("app_started", app_name=settings.app_name)
    yield
    # Pending orders are abandoned and stay Processing.
    tracker.shutdown(wait=False)


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location"],
)

app.include_router(orders_router)


@app.get("/healthz", response_model=HealthRead)
async def healthz(tracker: OrderTrackerDep) -> HealthRead:
    return HealthRead(status="ok", detail={"orders": tracker.summary()})


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
