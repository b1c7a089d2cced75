"""
Create every RBAC table that does not exist yet
"""
import logging

# Registers the models on Base.metadata
from app import models  # noqa: F401
from app.database.session import engine, Base

logger = logging.getLogger(__name__)


def create_tables(bind=None):
    """Initialize the database and create all tables."""
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database initialization completed")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise
