"""FastAPI application for the Golf Competition API."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings
from api.envelope import success
from api.error_handlers import register_error_handlers
from database.connection import db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB pool on startup, close on shutdown."""
    settings = get_settings()
    await db.initialize(**settings.pool_kwargs())
    yield
    await db.close()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Golf Competition API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    from api.routers import bag_setups, courses, events, me, notes, rounds, series
    app.include_router(bag_setups.router, prefix="/api/bag-setups", tags=["bag-setups"])
    app.include_router(courses.router, prefix="/api/courses", tags=["courses"])
    app.include_router(series.router, prefix="/api/series", tags=["series"])
    app.include_router(events.router, prefix="/api/events", tags=["events"])
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])
    app.include_router(notes.router, prefix="/api/notes", tags=["notes"])
    app.include_router(me.router, prefix="/api/user", tags=["user"])

    @app.get("/api/health")
    async def health():
        healthy = await db.health_check()
        return success({"status": "ok" if healthy else "degraded", "database": healthy})

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
