"""quote access schema: profiles, projects, quotes, quote_access_requests

Revision ID: 0001_quote_access_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_quote_access_schema"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_WHERE = sa.text("status IN ('pending', 'granted')")


def upgrade():
    # profiles
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("password_hash", sa.String(length=256), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("company_name", sa.String(length=256), nullable=True),
        sa.Column("company_type", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_profiles_email"),
    )

    # projects
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=128), nullable=True),
        sa.Column("status", sa.String(length=64), nullable=False, server_default=sa.text("'open'")),
        sa.Column(
            "created_by",
            sa.Uuid(),
            sa.ForeignKey("profiles.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_projects_created_at", "projects", ["created_at"])

    # quotes
    op.create_table(
        "quotes",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("contractor_type", sa.String(length=50), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("file_path", sa.String(length=512), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("company_name", sa.String(length=256), nullable=True),
        sa.Column("phone_number", sa.String(length=64), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_quotes_amount_positive"),
    )
    op.create_index("ix_quotes_project_created", "quotes", ["project_id", "created_at"])
    op.create_index("ix_quotes_user", "quotes", ["user_id"])

    # quote_access_requests
    op.create_table(
        "quote_access_requests",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "quote_id",
            sa.Uuid(),
            sa.ForeignKey("quotes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "requester_user_id",
            sa.Uuid(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "uploader_user_id",
            sa.Uuid(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(length=16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "status IN ('pending', 'granted', 'denied')",
            name="ck_access_requests_status",
        ),
    )
    # at most one active request per (quote, requester)
    op.create_index(
        "uq_access_request_active",
        "quote_access_requests",
        ["quote_id", "requester_user_id"],
        unique=True,
        postgresql_where=ACTIVE_WHERE,
        sqlite_where=ACTIVE_WHERE,
    )
    op.create_index("ix_access_requests_requester", "quote_access_requests", ["requester_user_id"])
    op.create_index(
        "ix_access_requests_uploader_status",
        "quote_access_requests",
        ["uploader_user_id", "status"],
    )


def downgrade():
    op.drop_index("ix_access_requests_uploader_status", table_name="quote_access_requests")
    op.drop_index("ix_access_requests_requester", table_name="quote_access_requests")
    op.drop_index("uq_access_request_active", table_name="quote_access_requests")
    op.drop_table("quote_access_requests")

    op.drop_index("ix_quotes_user", table_name="quotes")
    op.drop_index("ix_quotes_project_created", table_name="quotes")
    op.drop_table("quotes")

    op.drop_index("ix_projects_created_at", table_name="projects")
    op.drop_table("projects")

    op.drop_table("profiles")
