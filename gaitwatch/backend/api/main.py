"""
api/main.py

FastAPI application factory. The pipeline and repository are wired in by
backend/main.py (or by tests) through the set_* functions before the app
serves requests.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from .routes import charts as charts_router
from .routes import samples as samples_router
from .routes import stats as stats_router

logger = logging.getLogger(__name__)

_repository = None
_pipeline = None


def set_repository(repo) -> None:
    global _repository
    _repository = repo


def get_repository():
    if _repository is None:
        raise RuntimeError("Repository not initialised — call set_repository() first")
    return _repository


def set_pipeline(pipeline) -> None:
    global _pipeline
    _pipeline = pipeline


def get_pipeline():
    if _pipeline is None:
        raise RuntimeError("Pipeline not initialised — call set_pipeline() first")
    return _pipeline


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("FastAPI startup")
        yield
        logger.info("FastAPI shutdown")

    app = FastAPI(
        title="GaitWatch — Walking Speed Charts",
        version="1.0.0",
        description="Daily, weekly and monthly walking-speed averages",
        lifespan=lifespan,
    )

    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(charts_router.router,  prefix="/api")
    app.include_router(samples_router.router, prefix="/api")
    app.include_router(stats_router.router,   prefix="/api")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app
