"""initial_schema

Create users, universities, requirements, tasks, documents and deadlines.

Revision ID: 0a1b2c3d4e51
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = "0a1b2c3d4e51"
down_revision = None
branch_labels = None
depends_on = None


def _owned_columns():
    return [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    bind = op.get_bind()
    inspector = sa_inspect(bind)
    existing_tables = set(inspector.get_table_names())

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("email", sa.String(length=200), nullable=False),
            sa.Column("password_hash", sa.String(length=256), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=True),
            sa.Column("last_login_at", sa.DateTime(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_users_email", "users", ["email"], unique=True)

    if "universities" not in existing_tables:
        op.create_table(
            "universities",
            *_owned_columns(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("url", sa.String(length=500), nullable=True),
            sa.Column("status", sa.String(length=30), nullable=False, server_default="RESEARCHING"),
            sa.Column("category", sa.String(length=20), nullable=False),
            sa.Column("deadline", sa.DateTime(), nullable=True),
            sa.Column("lor_deadline", sa.DateTime(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_universities_user_id", "universities", ["user_id"])
        op.create_index("ix_universities_status", "universities", ["status"])
        op.create_index("ix_universities_category", "universities", ["category"])

    if "requirements" not in existing_tables:
        op.create_table(
            "requirements",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("university_id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(["university_id"], ["universities.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_requirements_university_id", "requirements", ["university_id"])

    if "tasks" not in existing_tables:
        op.create_table(
            "tasks",
            *_owned_columns(),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
            sa.Column("priority", sa.String(length=10), nullable=False, server_default="MEDIUM"),
            sa.Column("due_date", sa.DateTime(), nullable=True),
            sa.Column("completed_at", sa.DateTime(), nullable=True),
            sa.Column("university_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["university_id"], ["universities.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_tasks_user_id", "tasks", ["user_id"])
        op.create_index("ix_tasks_status", "tasks", ["status"])
        op.create_index("ix_tasks_priority", "tasks", ["priority"])
        op.create_index("ix_tasks_university_id", "tasks", ["university_id"])

    if "documents" not in existing_tables:
        op.create_table(
            "documents",
            *_owned_columns(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("type", sa.String(length=20), nullable=False),
            sa.Column("version", sa.String(length=20), nullable=False, server_default="1"),
            sa.Column("file_url", sa.String(length=1000), nullable=True),
            sa.Column("content", sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_documents_user_id", "documents", ["user_id"])
        op.create_index("ix_documents_type", "documents", ["type"])
        op.create_index("ix_documents_user_type_name", "documents", ["user_id", "type", "name"])

    if "deadlines" not in existing_tables:
        op.create_table(
            "deadlines",
            *_owned_columns(),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("type", sa.String(length=20), nullable=False),
            sa.Column("date", sa.DateTime(), nullable=False),
            sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("university_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["university_id"], ["universities.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_deadlines_user_id", "deadlines", ["user_id"])
        op.create_index("ix_deadlines_type", "deadlines", ["type"])
        op.create_index("ix_deadlines_date", "deadlines", ["date"])
        op.create_index("ix_deadlines_university_id", "deadlines", ["university_id"])


def downgrade():
    bind = op.get_bind()
    inspector = sa_inspect(bind)
    existing_tables = set(inspector.get_table_names())

    for table in ("deadlines", "documents", "tasks", "requirements", "universities", "users"):
        if table in existing_tables:
            op.drop_table(table)
