import asyncio
import logging
from contextlib import asynccontextmanager

import sentry_sdk
from alembic import command
from alembic.config import Config
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.certificates.dependencies import build_event_scheduler, build_recurring_trigger
from src.certificates.routers import router as certificates_router
from src.config.logging import setup_logging
from src.config.settings import settings
from src.notifications.router import router as notifications_router
from src.routers.healthz.router import router as healthz_router

logger = logging.getLogger(__name__)


async def run_migrations():
    alembic_cfg = Config("alembic.ini")
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")


def start_certificate_scheduler(app: FastAPI) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler(timezone=settings.scheduler_timezone)
    build_recurring_trigger().register(
        scheduler, misfire_grace_time=settings.scheduler_misfire_grace_seconds
    )
    app.state.event_certificate_scheduler = build_event_scheduler(scheduler)
    scheduler.start()
    logger.info(f"Certificate scheduler started with {len(scheduler.get_jobs())} job(s)")
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        await run_migrations()

    scheduler = start_certificate_scheduler(app) if settings.scheduler_enabled else None
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)
        logger.info("Certificate scheduler stopped")


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Certificate Automation API",
    description="API for generating and e-mailing event participation certificates",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(certificates_router, tags=["Certificates"])
app.include_router(notifications_router, tags=["Notifications"])

# Rendered certificates, linked from the generation records
app.mount(
    "/certificates",
    StaticFiles(directory=settings.certificates_dir, check_dir=False),
    name="certificates",
)


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the Certificate Automation API"}
