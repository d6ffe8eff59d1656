"""
JobApplication model: one tracked application per row.

Notes, reminders, tags and timeline events are stored as JSON documents on the
row so a record round-trips through the store as a single unit.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON, Index
from app.db.base import Base


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(String(32), primary_key=True)
    user_id = Column(String, nullable=False, index=True)

    resume_details = Column(Text, nullable=False, default="")
    job_description = Column(Text, nullable=False, default="")
    generated_resume = Column(Text, nullable=True)
    generated_cover_letter = Column(Text, nullable=True)

    status = Column(String, nullable=False, default="draft")
    company_name = Column(String, nullable=True)
    position = Column(String, nullable=True)

    notes = Column(JSON, nullable=False, default=list)
    reminders = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    timeline = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    deleted = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_job_applications_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<JobApplication(id={self.id}, company='{self.company_name}', status='{self.status}')>"
