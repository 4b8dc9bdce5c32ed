"""create reports, votes, messages and sources tables

Revision ID: 3c1d9e7a4b20
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1d9e7a4b20"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

REPORT_TYPES = (
    "armed_confrontation",
    "road_blockade",
    "cartel_activity",
    "building_fire",
    "looting",
    "general_danger",
    "criminal_activity",
)
REPORT_STATUSES = ("unconfirmed", "confirmed", "denied", "expired")
VOTE_TYPES = ("confirm", "deny")


def upgrade() -> None:
    op.create_table(
        "reports",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("type", sa.Enum(*REPORT_TYPES, name="report_type"), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("creator_fingerprint", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*REPORT_STATUSES, name="report_status"),
            nullable=False,
            server_default="unconfirmed",
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "last_activity_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("admin_locked_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_reports_latitude", "reports", ["latitude"])
    op.create_index("ix_reports_longitude", "reports", ["longitude"])
    op.create_index("ix_reports_status", "reports", ["status"])
    op.create_index("ix_reports_last_activity_at", "reports", ["last_activity_at"])

    op.create_table(
        "votes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "report_id",
            sa.String(36),
            sa.ForeignKey("reports.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("vote_type", sa.Enum(*VOTE_TYPES, name="vote_type"), nullable=False),
        sa.Column("voter_fingerprint", sa.Text(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("report_id", "voter_fingerprint", name="uq_votes_report_voter"),
    )
    op.create_index("ix_votes_report_id", "votes", ["report_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "report_id",
            sa.String(36),
            sa.ForeignKey("reports.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_fingerprint", sa.Text(), nullable=False),
        sa.Column("alias_number", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("cooldown_slot", sa.BigInteger(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint(
            "report_id",
            "sender_fingerprint",
            "cooldown_slot",
            name="uq_messages_report_sender_slot",
        ),
    )
    op.create_index("ix_messages_report_id", "messages", ["report_id"])
    op.create_index("ix_messages_created_at", "messages", ["created_at"])

    op.create_table(
        "sources",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "report_id",
            sa.String(36),
            sa.ForeignKey("reports.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("added_by_fingerprint", sa.Text(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_sources_report_id", "sources", ["report_id"])


def downgrade() -> None:
    op.drop_index("ix_sources_report_id", table_name="sources")
    op.drop_table("sources")
    op.drop_index("ix_messages_created_at", table_name="messages")
    op.drop_index("ix_messages_report_id", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_votes_report_id", table_name="votes")
    op.drop_table("votes")
    op.drop_index("ix_reports_last_activity_at", table_name="reports")
    op.drop_index("ix_reports_status", table_name="reports")
    op.drop_index("ix_reports_longitude", table_name="reports")
    op.drop_index("ix_reports_latitude", table_name="reports")
    op.drop_table("reports")
    sa.Enum(name="vote_type").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="report_status").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="report_type").drop(op.get_bind(), checkfirst=True)
