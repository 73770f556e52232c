"""initial schema

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-09-01 09:00:00.000000

This migration creates:
1. admin_users for back-office accounts
2. Public content tables: school_profile, skills, news, gallery, contacts
3. PPDB tables: ppdb_periods and ppdb_registrations

Invariants enforced by the database:
- At most one primary contact per type (partial unique index)
- At most one active admission period (partial unique index)
- Period date order, positive quota and non-negative fee (check constraints)
- Periods and programs referenced by registrations cannot be deleted (RESTRICT)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a1c2e3f4b5d6"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENUMS = {
    "admin_role": ("super_admin", "admin", "editor"),
    "news_category": ("news", "announcement", "event"),
    "gallery_media_type": ("image", "video"),
    "gallery_category": ("facility", "activity", "achievement", "event"),
    "contact_type": ("phone", "email", "location", "social"),
    "gender": ("L", "P"),
    "registration_status": ("pending", "accepted", "rejected"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _jsonb_list(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(astext_type=sa.Text()),
        nullable=False,
        server_default=sa.text("'[]'::jsonb"),
    )


def upgrade() -> None:
    """Create all portal tables."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "admin_users",
        *_base_columns(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("role", _enum("admin_role"), nullable=False, server_default="editor"),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_admin_users_email"), "admin_users", ["email"], unique=True)

    op.create_table(
        "school_profile",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("vision", sa.Text(), nullable=True),
        sa.Column("mission", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        sa.Column("header_image_url", sa.String(length=500), nullable=True),
        sa.Column("established_year", sa.Integer(), nullable=True),
        sa.Column("accreditation", sa.String(length=10), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "skills",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("duration_years", sa.Integer(), nullable=False, server_default="3"),
        _jsonb_list("subjects"),
        _jsonb_list("facilities"),
        _jsonb_list("career_prospects"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_skills_name"), "skills", ["name"], unique=False)

    op.create_table(
        "news",
        *_base_columns(),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("slug", sa.String(length=320), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", _enum("news_category"), nullable=False, server_default="news"),
        sa.Column("featured_image_url", sa.String(length=500), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_news_slug"), "news", ["slug"], unique=True)
    op.create_index("ix_news_published", "news", ["is_published", "published_at"])

    op.create_table(
        "gallery",
        *_base_columns(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("media_type", _enum("gallery_media_type"), nullable=False),
        sa.Column("media_url", sa.String(length=500), nullable=False),
        sa.Column("storage_path", sa.String(length=500), nullable=True),
        sa.Column(
            "category", _enum("gallery_category"), nullable=False, server_default="activity"
        ),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_gallery_category"), "gallery", ["category"], unique=False)

    op.create_table(
        "contacts",
        *_base_columns(),
        sa.Column("type", _enum("contact_type"), nullable=False),
        sa.Column("label", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(length=100), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_contacts_order_index", "contacts", ["order_index"])
    op.create_index(
        "uq_contacts_primary_per_type",
        "contacts",
        ["type"],
        unique=True,
        postgresql_where=sa.text("is_primary"),
    )

    op.create_table(
        "ppdb_periods",
        *_base_columns(),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("registration_start", sa.Date(), nullable=False),
        sa.Column("registration_end", sa.Date(), nullable=False),
        sa.Column("announcement_date", sa.Date(), nullable=True),
        sa.Column("max_students", sa.Integer(), nullable=False),
        sa.Column("registration_fee", sa.Integer(), nullable=False, server_default="0"),
        _jsonb_list("requirements"),
        _jsonb_list("documents_needed"),
        _jsonb_list("selection_process"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "registration_end >= registration_start", name="ck_ppdb_periods_dates"
        ),
        sa.CheckConstraint("max_students > 0", name="ck_ppdb_periods_quota"),
        sa.CheckConstraint("registration_fee >= 0", name="ck_ppdb_periods_fee"),
    )
    op.create_index(
        "uq_ppdb_periods_single_active",
        "ppdb_periods",
        ["is_active"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "ppdb_registrations",
        *_base_columns(),
        sa.Column("period_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("registration_number", sa.String(length=20), nullable=False),
        sa.Column("student_name", sa.String(length=200), nullable=False),
        sa.Column("student_email", sa.String(length=255), nullable=False),
        sa.Column("student_phone", sa.String(length=20), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("birth_place", sa.String(length=100), nullable=False),
        sa.Column("gender", _enum("gender"), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("previous_school", sa.String(length=200), nullable=False),
        sa.Column("parent_name", sa.String(length=200), nullable=False),
        sa.Column("parent_phone", sa.String(length=20), nullable=False),
        sa.Column("parent_email", sa.String(length=255), nullable=True),
        sa.Column("chosen_skill_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "documents",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "status", _enum("registration_status"), nullable=False, server_default="pending"
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["period_id"],
            ["ppdb_periods.id"],
            name="fk_ppdb_registrations_period_id",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["chosen_skill_id"],
            ["skills.id"],
            name="fk_ppdb_registrations_chosen_skill_id",
            ondelete="RESTRICT",
        ),
    )
    op.create_index(
        op.f("ix_ppdb_registrations_registration_number"),
        "ppdb_registrations",
        ["registration_number"],
        unique=True,
    )
    op.create_index(
        op.f("ix_ppdb_registrations_period_id"), "ppdb_registrations", ["period_id"]
    )
    op.create_index(
        op.f("ix_ppdb_registrations_chosen_skill_id"), "ppdb_registrations", ["chosen_skill_id"]
    )
    op.create_index(op.f("ix_ppdb_registrations_status"), "ppdb_registrations", ["status"])
    op.create_index(
        "ix_ppdb_registrations_period_status", "ppdb_registrations", ["period_id", "status"]
    )


def downgrade() -> None:
    """Drop all portal tables and enum types."""
    op.drop_table("ppdb_registrations")
    op.drop_table("ppdb_periods")
    op.drop_table("contacts")
    op.drop_table("gallery")
    op.drop_table("news")
    op.drop_table("skills")
    op.drop_table("school_profile")
    op.drop_table("admin_users")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
