import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from urgentjobs.config import settings
from urgentjobs.database import SCHEMA_VERSION, read_schema_version
from urgentjobs.errors import register_exception_handlers
from urgentjobs.routers import admin, applications, auth, jobs, notifications, reviews, users

logger = logging.getLogger("urgentjobs")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level.upper())
    # Schema changes happen at deploy time through urgentjobs-migrate.
    if not settings.database_path.exists():
        logger.error("Database %s not found; run urgentjobs-migrate first.", settings.database_path)
    else:
        version = read_schema_version()
        if version < SCHEMA_VERSION:
            logger.error(
                "Database schema is at version %d, expected %d; run urgentjobs-migrate.",
                version, SCHEMA_VERSION,
            )
        else:
            logger.info("Database schema version %d.", version)
    yield


app = FastAPI(
    title="Urgent Jobs API",
    description="Marketplace for short-notice jobs between employers and job seekers",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(jobs.router, prefix=settings.api_prefix)
app.include_router(applications.router, prefix=settings.api_prefix)
app.include_router(notifications.router, prefix=settings.api_prefix)
app.include_router(reviews.router, prefix=settings.api_prefix)
app.include_router(admin.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
