"""FastAPI application entry point"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from woodyard.config import get_settings
from woodyard.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

from woodyard.api import auth, customers, recurring, schedules, stops, users  # noqa: E402

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", company=settings.company_name)
    yield


app = FastAPI(
    title="Woodyard Dispatch",
    description="Delivery dispatch schedules for a firewood and timber yard",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(customers.router)
app.include_router(schedules.router)
app.include_router(stops.router)
app.include_router(recurring.router)


@app.get("/health")
def health():
    return {"status": "ok"}
