"""Create certificate scheduling tables.

Revision ID: 3f1c2a7d9e10
Revises:
Create Date: 2026-03-01 10:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlalchemy_utils
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7d9e10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _uuid_column(name: str = "uuid", **kwargs) -> sa.Column:
    return sa.Column(name, sqlalchemy_utils.types.uuid.UUIDType(), **kwargs)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create users, events, participants, templates, generation records and log tables."""
    op.create_table(
        "users",
        _uuid_column(primary_key=True),
        *_timestamps(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "events",
        _uuid_column(primary_key=True),
        *_timestamps(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        _uuid_column(
            "created_by",
            sa.ForeignKey("users.uuid", name="fk_events_created_by_users", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    op.create_index("ix_events_date", "events", ["date"])
    op.create_index("ix_events_created_by", "events", ["created_by"])

    op.create_table(
        "participants",
        _uuid_column(primary_key=True),
        *_timestamps(),
        _uuid_column(
            "event_id",
            sa.ForeignKey("events.uuid", name="fk_participants_event_id_events", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("certificate_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("certificate_sent_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_participants_event_id", "participants", ["event_id"])
    op.create_index("ix_participants_email", "participants", ["email"])

    op.create_table(
        "certificate_templates",
        _uuid_column(primary_key=True),
        *_timestamps(),
        _uuid_column(
            "event_id",
            sa.ForeignKey(
                "events.uuid", name="fk_certificate_templates_event_id_events", ondelete="CASCADE"
            ),
            nullable=False,
        ),
        sa.Column("template_type", sa.String(50), nullable=False, server_default="sistec"),
    )
    op.create_index(
        "ix_certificate_templates_event_id", "certificate_templates", ["event_id"], unique=True
    )

    op.create_table(
        "generation_records",
        _uuid_column(primary_key=True),
        *_timestamps(),
        _uuid_column(
            "template_id",
            sa.ForeignKey(
                "certificate_templates.uuid",
                name="fk_generation_records_template_id_certificate_templates",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        _uuid_column(
            "participant_id",
            sa.ForeignKey(
                "participants.uuid",
                name="fk_generation_records_participant_id_participants",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        sa.Column("certificate_path", sa.String(500), nullable=False),
        sa.Column("certificate_url", sa.String(500), nullable=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("template_id", "participant_id", name="uq_generation_record_participant"),
    )
    op.create_index("ix_generation_records_template_id", "generation_records", ["template_id"])
    op.create_index("ix_generation_records_participant_id", "generation_records", ["participant_id"])

    op.create_table(
        "activity_logs",
        _uuid_column(primary_key=True),
        *_timestamps(),
        _uuid_column(
            "user_id",
            sa.ForeignKey("users.uuid", name="fk_activity_logs_user_id_users", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("action", sa.String(255), nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False, server_default="200"),
    )
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])

    op.create_table(
        "email_logs",
        _uuid_column(primary_key=True),
        *_timestamps(),
        sa.Column("resend_email_id", sa.String(255), nullable=True),
        sa.Column("to_address", sa.String(255), nullable=False),
        sa.Column("from_address", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(500), nullable=False),
        sa.Column("html_body", sa.Text(), nullable=True),
        sa.Column("attachment_name", sa.String(255), nullable=True),
        sa.Column("email_type", sa.Enum("certificate", name="email_type_enum"), nullable=False),
        _uuid_column(
            "participant_id",
            sa.ForeignKey(
                "participants.uuid", name="fk_email_logs_participant_id_participants", ondelete="SET NULL"
            ),
            nullable=True,
        ),
        _uuid_column(
            "event_id",
            sa.ForeignKey("events.uuid", name="fk_email_logs_event_id_events", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "status",
            sa.Enum("pending", "sent", "failed", name="email_status_enum"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_email_logs_resend_email_id", "email_logs", ["resend_email_id"], unique=True)
    op.create_index("ix_email_logs_to_address", "email_logs", ["to_address"])
    op.create_index("ix_email_logs_email_type", "email_logs", ["email_type"])
    op.create_index("ix_email_logs_participant_id", "email_logs", ["participant_id"])
    op.create_index("ix_email_logs_event_id", "email_logs", ["event_id"])
    op.create_index("ix_email_logs_status", "email_logs", ["status"])


def downgrade() -> None:
    """Drop all certificate scheduling tables."""
    op.drop_table("email_logs")
    op.drop_table("activity_logs")
    op.drop_table("generation_records")
    op.drop_table("certificate_templates")
    op.drop_table("participants")
    op.drop_table("events")
    op.drop_table("users")
    sa.Enum(name="email_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="email_type_enum").drop(op.get_bind(), checkfirst=True)
