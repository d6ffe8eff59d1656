"""
FastAPI dependencies that wire the per-request tracker and the collaborator
services. Tests override these through app.dependency_overrides.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.core.auth_dependency import get_current_user_obj
from app.core.config import CACHE_DIR
from app.core.exceptions import StoreError
from app.db.models.user import User
from app.db.session import get_db
from app.services.application_store import ApplicationStore
from app.services.backup_service import LocalCache
from app.services.brand_service import BrandClient
from app.services.generation_service import GenerationService
from app.services.tracker_service import ApplicationTracker


def get_tracker(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
) -> ApplicationTracker:
    """Tracker over the authenticated user's applications, loaded from the store."""
    tracker = ApplicationTracker(ApplicationStore(db), user.owner_id)
    try:
        tracker.load()
    except StoreError as e:
        raise to_http_exception(e)
    return tracker


def get_cache() -> LocalCache:
    return LocalCache(CACHE_DIR)


def get_generation_service() -> GenerationService:
    return GenerationService()


def get_brand_client() -> BrandClient:
    return BrandClient()
