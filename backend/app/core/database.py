from sqlalchemy import create_engine
from sqlalchemy import text
from sqlmodel import Session
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from sqlalchemy.exc import OperationalError
import logging
from fastapi import HTTPException

from .config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    """Pool options for the configured backend."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,  # Recycle connections every 5 minutes
        "pool_size": 10,
        "max_overflow": 20,
    }


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True
)
def create_database_engine():
    """Create database engine with retry logic."""
    logger.info(f"Attempting to connect to database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else settings.DATABASE_URL.split(':')[0]}")

    engine = create_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        **_engine_options(settings.DATABASE_URL),
    )

    # Test the connection
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
        logger.info("Database connection successful!")

    return engine


try:
    engine = create_database_engine()
except Exception as e:
    logger.error(f"Failed to create database engine after retries: {e}")
    # Requests get a 503 until the service is restarted with a reachable database
    engine = None


def get_db():
    """Get database session."""
    if not engine:
        raise HTTPException(
            status_code=503,
            detail="Database is temporarily unavailable. Please try again later."
        )

    with Session(engine) as session:
        yield session
