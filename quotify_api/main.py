from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from contextlib import asynccontextmanager
import logging

from quotify_api.core.config import settings
from quotify_api.core.exceptions import ExceptionMiddleware
from quotify_api.core.logging import setup_logging
from quotify_api.routers import (
    auth,
    conversation_logs,
    health,
    livekit,
    organizations,
    quotations,
    templates,
)

from quotify_api.core.db import create_schema_if_needed, dispose_engine, wait_for_db

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await wait_for_db()
    await create_schema_if_needed()
    log.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    await dispose_engine()


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(ExceptionMiddleware)

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.ALLOWED_HOSTS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(organizations.router)
app.include_router(templates.router)
app.include_router(quotations.router)
app.include_router(conversation_logs.router)
app.include_router(livekit.router)
