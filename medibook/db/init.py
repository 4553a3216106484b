"""Initialize database tables."""
import logging
from typing import Optional

from sqlmodel import SQLModel
from sqlalchemy.engine import Engine

# Imported for their side effect of registering tables on SQLModel.metadata
from medibook.models.appointment import Appointment, Provider  # noqa: F401
from medibook.models.notification import Notification  # noqa: F401
from medibook.db.config import get_engine

logger = logging.getLogger(__name__)


def init_db(engine: Optional[Engine] = None):
    """Create all tables in the database."""
    engine = engine or get_engine()
    logger.info("Creating all tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Tables created successfully.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
