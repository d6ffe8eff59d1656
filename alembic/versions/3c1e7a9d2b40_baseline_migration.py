"""baseline_migration

Revision ID: 3c1e7a9d2b40
Revises: 
Create Date: 2026-10-19 09:12:41.118204

Creates users and job_applications when they do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3c1e7a9d2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('full_name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    if not table_exists('job_applications'):
        op.create_table('job_applications',
            sa.Column('id', sa.String(length=32), nullable=False),
            sa.Column('user_id', sa.String(), nullable=False),
            sa.Column('resume_details', sa.Text(), nullable=False),
            sa.Column('job_description', sa.Text(), nullable=False),
            sa.Column('generated_resume', sa.Text(), nullable=True),
            sa.Column('generated_cover_letter', sa.Text(), nullable=True),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('company_name', sa.String(), nullable=True),
            sa.Column('position', sa.String(), nullable=True),
            sa.Column('notes', sa.JSON(), nullable=False),
            sa.Column('reminders', sa.JSON(), nullable=False),
            sa.Column('tags', sa.JSON(), nullable=False),
            sa.Column('timeline', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('deleted', sa.Boolean(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_job_applications_user_id'), 'job_applications', ['user_id'], unique=False)
        op.create_index('idx_job_applications_user_created', 'job_applications', ['user_id', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_job_applications_user_created', table_name='job_applications')
    op.drop_index(op.f('ix_job_applications_user_id'), table_name='job_applications')
    op.drop_table('job_applications')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
