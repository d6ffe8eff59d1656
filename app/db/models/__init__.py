"""
Database models module.

Importing this package registers every model with SQLAlchemy's Base.metadata
before table creation or migrations run.
"""
from app.db.models.user import User
from app.db.models.application import JobApplication

__all__ = [
    "User",
    "JobApplication",
]
