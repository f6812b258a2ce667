"""project detail columns and the registered_emails registry

Revision ID: 0002_project_details_registry
Revises: 0001_quote_access_schema
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0002_project_details_registry"
down_revision = "0001_quote_access_schema"
branch_labels = None
depends_on = None

PROJECT_COLUMNS = (
    ("area", sa.String(length=256)),
    ("project_type", sa.String(length=128)),
    ("client_name", sa.String(length=256)),
    ("client_type", sa.String(length=128)),
    ("client_category", sa.String(length=128)),
    ("main_contractor", sa.String(length=256)),
    ("start_date", sa.Date()),
    ("completion_date", sa.Date()),
    ("environmental_class", sa.String(length=128)),
    ("gross_floor_area", sa.Float()),
    ("building_area", sa.Float()),
    ("num_buildings", sa.Integer()),
    ("num_floors", sa.Integer()),
    ("num_apartments", sa.Integer()),
    ("tender_document_url", sa.String(length=1024)),
    ("supplementary_tender_document_url", sa.String(length=1024)),
    ("other_project_info", sa.Text()),
)


def upgrade():
    with op.batch_alter_table("projects") as batch:
        for name, type_ in PROJECT_COLUMNS:
            batch.add_column(sa.Column(name, type_, nullable=True))

    # registered_emails
    op.create_table(
        "registered_emails",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("city", sa.String(length=128), nullable=True),
        sa.Column("company_type", sa.String(length=64), nullable=False),
        sa.Column("contractor_type", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_registered_emails_email"),
    )
    op.create_index("ix_registered_emails_created_at", "registered_emails", ["created_at"])


def downgrade():
    op.drop_index("ix_registered_emails_created_at", table_name="registered_emails")
    op.drop_table("registered_emails")

    with op.batch_alter_table("projects") as batch:
        for name, _ in reversed(PROJECT_COLUMNS):
            batch.drop_column(name)
