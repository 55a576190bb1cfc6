import logging
import os
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

sys.path.append(os.path.dirname(__file__))

from app.core.config import settings
from app.core import database
from app.api import api_router
from app.api.files import router as files_router

# Registers every table with SQLModel metadata
from app import models  # noqa: F401

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Amor API",
    description="Random matching profile-picture groups with admin review",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
app.include_router(files_router, prefix="/files", tags=["files"])


@app.on_event("startup")
async def create_tables():
    if not settings.AUTO_CREATE_TABLES:
        return
    if database.engine is None:
        logger.warning("No database engine; tables were not created")
        return

    try:
        SQLModel.metadata.create_all(database.engine)
        logger.info("Database tables ready")
    except SQLAlchemyError as e:
        logger.error(f"Failed to create database tables: {e}")


@app.get("/")
async def root():
    return {"message": "Amor API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Service status plus a database round trip."""
    if database.engine is None:
        return {"status": "degraded", "database": "not_available"}

    try:
        with database.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return {"status": "degraded", "database": f"error: {e}"}

    return {"status": "healthy", "database": "connected"}
