"""
Record store for job applications.

Thin SQLAlchemy layer exposing the three operations the tracker relies on:
create, list by owner and partial update. Every database failure is rolled
back and surfaced as StoreError.
"""
import logging
from typing import Any, Dict, List
from uuid import uuid4

from pydantic_core import to_jsonable_python
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreError
from app.db.models.application import JobApplication
from app.schemas.application import ApplicationRecord

logger = logging.getLogger(__name__)

JSON_FIELDS = ("notes", "reminders", "tags", "timeline")
WRITABLE_FIELDS = {
    "resume_details",
    "job_description",
    "generated_resume",
    "generated_cover_letter",
    "status",
    "company_name",
    "position",
    "notes",
    "reminders",
    "tags",
    "timeline",
    "created_at",
    "updated_at",
    "deleted",
}


def _to_columns(values: Dict[str, Any]) -> Dict[str, Any]:
    """Convert record values into column values (JSON documents, plain status strings)."""
    columns = {}
    for field, value in values.items():
        if field not in WRITABLE_FIELDS:
            continue
        if field in JSON_FIELDS:
            value = to_jsonable_python(value or [])
        elif field == "status" and value is not None:
            value = getattr(value, "value", value)
        columns[field] = value
    return columns


class ApplicationStore:
    """Applications persisted in the job_applications table, keyed by owner."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, owner_id: str, record: ApplicationRecord) -> str:
        application_id = uuid4().hex
        values = _to_columns(record.model_dump(exclude={"id", "user_id"}))
        row = JobApplication(id=application_id, user_id=owner_id, **values)
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create application for user_id={owner_id}: {e}", exc_info=True)
            raise StoreError("Failed to save application") from e
        logger.info(f"Application stored: id={application_id}, user_id={owner_id}")
        return application_id

    def list_by_owner(self, owner_id: str) -> List[ApplicationRecord]:
        try:
            rows = (
                self.db.query(JobApplication)
                .filter(JobApplication.user_id == owner_id)
                .order_by(JobApplication.created_at)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load applications for user_id={owner_id}: {e}", exc_info=True)
            raise StoreError("Failed to load applications") from e
        logger.debug(f"Applications loaded: user_id={owner_id}, total={len(rows)}")
        return [ApplicationRecord.model_validate(row) for row in rows]

    def update(self, application_id: str, partial: Dict[str, Any]) -> None:
        columns = _to_columns(partial)
        try:
            updated = (
                self.db.query(JobApplication)
                .filter(JobApplication.id == application_id)
                .update(columns, synchronize_session=False)
            )
            if not updated:
                raise StoreError("Application does not exist in the store")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update application {application_id}: {e}", exc_info=True)
            raise StoreError("Failed to update application") from e
        except StoreError:
            self.db.rollback()
            raise
        logger.debug(f"Application updated: id={application_id}, fields={sorted(columns)}")
