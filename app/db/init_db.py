import logging

from app.core.config import RUN_MIGRATIONS
from app.db.base import Base
from app.db.session import engine
import app.db.models  # noqa: F401  (registers models)

logger = logging.getLogger(__name__)


def init_db():
    """Create tables directly, or run Alembic migrations when RUN_MIGRATIONS=1."""
    if RUN_MIGRATIONS:
        from app.db.migrate import run_migrations
        run_migrations()
        return
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
