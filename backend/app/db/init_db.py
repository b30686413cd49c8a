"""
Database initialization script.
"""
import logging

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.db.session import init_db
from app.services.image_service import ensure_upload_dir

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    logger.info("Initializing database...")
    init_db()
    ensure_upload_dir(settings.UPLOAD_DIR)
    logger.info("Database initialized successfully!")
