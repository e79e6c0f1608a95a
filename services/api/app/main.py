from __future__ import annotations

import logging

from app.api.errors import register_error_handlers
from app.api.router import api_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.core.otel import init_otel
from app.middleware.request_id import RequestIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

configure_logging(settings.log_level, json_output=settings.log_json)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.api_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)

register_error_handlers(app)

app.include_router(api_router, prefix=settings.api_prefix)

if init_otel(app):
    logger.info("tracing enabled", extra={"endpoint": settings.otel_otlp_endpoint})
