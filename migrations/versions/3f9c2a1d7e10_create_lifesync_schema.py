"""create lifesync schema

Revision ID: 3f9c2a1d7e10
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "3f9c2a1d7e10"
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column("id", sa.String(36), nullable=False)


def _ts(name, nullable=False):
    if nullable:
        return sa.Column(name, sa.TIMESTAMP(timezone=True), nullable=True)
    return sa.Column(name, sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False)


def _audit(updated=True, deleted=True):
    columns = [_ts("created_at")]
    if updated:
        columns.append(_ts("updated_at"))
    if deleted:
        columns.append(_ts("deleted_at", nullable=True))
    return columns


def upgrade() -> None:
    # -- Users & collaboration --
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column("theme", sa.String(16), server_default="light", nullable=False),
        sa.Column("language", sa.String(16), server_default="de", nullable=False),
        sa.Column("timezone", sa.String(64), server_default="Europe/Berlin", nullable=False),
        *_audit(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "teams",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        *_audit(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_teams_owner_id", "teams", ["owner_id"])

    op.create_table(
        "team_members",
        _id(),
        sa.Column("team_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("role", sa.String(16), server_default="member", nullable=False),
        _ts("joined_at"),
        *_audit(updated=False, deleted=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("team_id", "user_id", name="uq_team_member"),
    )
    op.create_index("ix_team_members_team_id", "team_members", ["team_id"])
    op.create_index("ix_team_members_user_id", "team_members", ["user_id"])

    op.create_table(
        "friends",
        _id(),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("friend_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(16), server_default="pending", nullable=False),
        *_audit(deleted=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "friend_id", name="uq_friend_pair"),
    )
    op.create_index("ix_friends_user_id", "friends", ["user_id"])
    op.create_index("ix_friends_friend_id", "friends", ["friend_id"])

    # -- Projects & tasks --
    op.create_table(
        "projects",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("team_id", sa.String(36), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), server_default="active", nullable=False),
        sa.Column("color", sa.String(16), server_default="#0ea5e9", nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("progress", sa.Numeric(5, 2), server_default="0", nullable=False),
        *_audit(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_owner_id", "projects", ["owner_id"])
    op.create_index("ix_projects_team_id", "projects", ["team_id"])

    op.create_table(
        "tasks",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("project_id", sa.String(36), nullable=True),
        sa.Column("parent_task_id", sa.String(36), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(128), nullable=True),
        sa.Column("status", sa.String(16), server_default="todo", nullable=False),
        sa.Column("priority", sa.String(16), server_default="medium", nullable=False),
        sa.Column("is_recurring", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("estimated_hours", sa.Float(), nullable=True),
        sa.Column("actual_hours", sa.Float(), nullable=True),
        sa.Column("assignee_id", sa.String(36), nullable=True),
        sa.Column("tags", postgresql.JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        *_audit(),
        _ts("completed_at", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tasks_owner_id", "tasks", ["owner_id"])
    op.create_index("ix_tasks_project_id", "tasks", ["project_id"])
    op.create_index("ix_tasks_parent_task_id", "tasks", ["parent_task_id"])
    op.create_index("ix_tasks_assignee_id", "tasks", ["assignee_id"])

    # -- Habits --
    op.create_table(
        "habits",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(128), nullable=False),
        sa.Column("frequency", sa.String(16), server_default="daily", nullable=False),
        sa.Column("color", sa.String(16), server_default="#10b981", nullable=False),
        sa.Column("goal_value", sa.Float(), nullable=True),
        sa.Column("goal_unit", sa.String(32), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default="true", nullable=False),
        *_audit(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_habits_owner_id", "habits", ["owner_id"])

    op.create_table(
        "habit_logs",
        _id(),
        sa.Column("habit_id", sa.String(36), nullable=False),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("value", sa.Float(), server_default="1", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_audit(updated=False, deleted=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("habit_id", "log_date", name="uq_habit_log_day"),
    )
    op.create_index("ix_habit_logs_habit_id", "habit_logs", ["habit_id"])

    # -- Finances --
    op.create_table(
        "transactions",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("category", sa.String(128), nullable=False),
        sa.Column("amount", sa.Numeric(20, 2), nullable=False),
        sa.Column("currency", sa.String(3), server_default="EUR", nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        sa.Column("payment_method", sa.String(64), nullable=True),
        sa.Column("tags", postgresql.JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        *_audit(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transactions_owner_id", "transactions", ["owner_id"])
    op.create_index("ix_transactions_type", "transactions", ["type"])
    op.create_index("ix_transactions_category", "transactions", ["category"])
    op.create_index("ix_transactions_date", "transactions", ["transaction_date"])

    # -- Calendar --
    op.create_table(
        "events",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("team_id", sa.String(36), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("source_type", sa.String(16), server_default="event", nullable=False),
        sa.Column("source_id", sa.String(36), nullable=True),
        sa.Column("category", sa.String(128), nullable=True),
        sa.Column("color", sa.String(16), server_default="#0ea5e9", nullable=False),
        sa.Column("start_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_time", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("all_day", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("is_recurring", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("recurrence_rule", sa.String(255), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        *_audit(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_owner_id", "events", ["owner_id"])
    op.create_index("ix_events_team_id", "events", ["team_id"])
    op.create_index("ix_events_source", "events", ["source_type", "source_id"])

    # -- Notes, files, messages, notifications, sharing --
    op.create_table(
        "notes",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(128), nullable=True),
        sa.Column("is_favorite", sa.Boolean(), server_default="false", nullable=False),
        *_audit(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notes_owner_id", "notes", ["owner_id"])

    op.create_table(
        "files",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("mime_type", sa.String(128), nullable=True),
        sa.Column("size", sa.Integer(), nullable=True),
        sa.Column("storage_path", sa.String(1024), nullable=False),
        sa.Column("note_id", sa.String(36), nullable=True),
        sa.Column("related_type", sa.String(16), nullable=True),
        sa.Column("related_id", sa.String(36), nullable=True),
        *_audit(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_files_owner_id", "files", ["owner_id"])
    op.create_index("ix_files_note_id", "files", ["note_id"])

    op.create_table(
        "messages",
        _id(),
        sa.Column("sender_id", sa.String(36), nullable=False),
        sa.Column("recipient_id", sa.String(36), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _ts("read_at", nullable=True),
        *_audit(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])
    op.create_index("ix_messages_recipient_id", "messages", ["recipient_id"])

    op.create_table(
        "notifications",
        _id(),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("actor_id", sa.String(36), nullable=True),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("related_type", sa.String(32), nullable=True),
        sa.Column("related_id", sa.String(36), nullable=True),
        _ts("read_at", nullable=True),
        *_audit(updated=False, deleted=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    op.create_table(
        "shared_resources",
        _id(),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("shared_with_user_id", sa.String(36), nullable=True),
        sa.Column("shared_with_team_id", sa.String(36), nullable=True),
        sa.Column("resource_type", sa.String(16), nullable=False),
        sa.Column("resource_id", sa.String(36), nullable=False),
        sa.Column("permission", sa.String(16), server_default="view", nullable=False),
        *_audit(updated=False, deleted=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "(shared_with_user_id IS NULL) <> (shared_with_team_id IS NULL)",
            name="ck_shared_resource_one_grantee",
        ),
    )
    op.create_index("ix_shared_resources_owner_id", "shared_resources", ["owner_id"])
    op.create_index("ix_shared_resources_shared_with_user_id", "shared_resources", ["shared_with_user_id"])
    op.create_index("ix_shared_resources_shared_with_team_id", "shared_resources", ["shared_with_team_id"])
    op.create_index("ix_shared_resource_target", "shared_resources", ["resource_type", "resource_id"])

    # soft-delete filters
    for table in ("users", "teams", "projects", "tasks", "habits", "transactions", "events", "notes", "files", "messages"):
        op.create_index(f"ix_{table}_deleted_at", table, ["deleted_at"])


def downgrade() -> None:
    for table in (
        "shared_resources", "notifications", "messages", "files", "notes", "events",
        "transactions", "habit_logs", "habits", "tasks", "projects", "friends",
        "team_members", "teams", "users",
    ):
        op.drop_table(table)
