# diary api
# fastapi app over the local entry store, consumed by the diary front end

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diary.config import settings
from diary.dependencies import open_store, set_store
from diary.routers import entries, calendar, export

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: load entries from local storage. shutdown: release the store."""
    logger.info("Starting diary backend...")
    store = open_store()
    set_store(store)
    logger.info(f"Diary backend ready with {len(store)} entries")
    yield
    logger.info("Shutting down diary backend...")
    set_store(None)
    store.storage.close()


app = FastAPI(
    title="Diary API",
    description="Personal diary backend: one entry per date, calendar and text search over local storage",
    version="0.1.0",
    lifespan=lifespan,
)

# cors: allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# register routers
app.include_router(entries.router)
app.include_router(calendar.router)
app.include_router(export.router)


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "diary-api"}
