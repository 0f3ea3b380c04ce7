"""VowArc API - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import engine
from app.routers import api, cron

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Alembic owns the schema in production; this keeps local sqlite usable
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Small-wins metrics, weekly violation checks and termination choices",
    lifespan=lifespan,
)

app.include_router(api.router)
app.include_router(cron.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
