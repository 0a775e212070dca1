"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-16

Creates the tables of the trip voting backend:
trips, trip_members, days, blocks, activities,
block_proposals, votes, commits.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

duplicate_policy = sa.Enum("soft_block", "prevent", "allow", name="duplicatepolicy")
member_role = sa.Enum("organizer", "collaborator", name="memberrole")


def upgrade() -> None:
    # --- trips ---
    op.create_table(
        "trips",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("destination", sa.String(255), nullable=True),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="UTC"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("duplicate_policy", duplicate_policy, nullable=False, server_default="soft_block"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- trip_members ---
    op.create_table(
        "trip_members",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("trip_id", sa.String(36), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", member_role, nullable=False, server_default="collaborator"),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_trip_members_trip_id", "trip_members", ["trip_id"])

    # --- days ---
    op.create_table(
        "days",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("trip_id", sa.String(36), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.UniqueConstraint("trip_id", "date", name="uq_days_trip_date"),
    )
    op.create_index("ix_days_trip_id", "days", ["trip_id"])

    # --- blocks ---
    op.create_table(
        "blocks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("day_id", sa.String(36), sa.ForeignKey("days.id", ondelete="CASCADE"), nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("vote_open_ts", sa.DateTime(timezone=True), nullable=True),
        sa.Column("vote_close_ts", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("day_id", "label", name="uq_blocks_day_label"),
    )
    op.create_index("ix_blocks_day_id", "blocks", ["day_id"])

    # --- activities ---
    op.create_table(
        "activities",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("trip_id", sa.String(36), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("cost_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("cost_currency", sa.String(3), nullable=True),
        sa.Column("duration_min", sa.Integer, nullable=True),
        sa.Column("location", sa.JSON, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_activities_trip_id", "activities", ["trip_id"])

    # --- block_proposals ---
    op.create_table(
        "block_proposals",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("trip_id", sa.String(36), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("block_id", sa.String(36), sa.ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("activity_id", sa.String(36), sa.ForeignKey("activities.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("trip_members.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("block_id", "activity_id", name="uq_block_proposals_block_activity"),
    )
    op.create_index("ix_block_proposals_trip_id", "block_proposals", ["trip_id"])

    # --- votes ---
    op.create_table(
        "votes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("trip_id", sa.String(36), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("block_id", sa.String(36), sa.ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("activity_id", sa.String(36), sa.ForeignKey("activities.id", ondelete="CASCADE"), nullable=False),
        sa.Column("member_id", sa.String(36), sa.ForeignKey("trip_members.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("block_id", "activity_id", "member_id", name="uq_votes_block_activity_member"),
    )
    op.create_index("ix_votes_block_id", "votes", ["block_id"])

    # --- commits --- (block_id NULL only mid-swap)
    op.create_table(
        "commits",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("trip_id", sa.String(36), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("block_id", sa.String(36), sa.ForeignKey("blocks.id", ondelete="CASCADE"), nullable=True, unique=True),
        sa.Column("activity_id", sa.String(36), sa.ForeignKey("activities.id", ondelete="CASCADE"), nullable=False),
        sa.Column("committed_by", sa.String(36), sa.ForeignKey("trip_members.id", ondelete="CASCADE"), nullable=False),
        sa.Column("committed_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_commits_trip_id", "commits", ["trip_id"])


def downgrade() -> None:
    op.drop_table("commits")
    op.drop_table("votes")
    op.drop_table("block_proposals")
    op.drop_table("activities")
    op.drop_table("blocks")
    op.drop_table("days")
    op.drop_table("trip_members")
    op.drop_table("trips")
    duplicate_policy.drop(op.get_bind(), checkfirst=True)
    member_role.drop(op.get_bind(), checkfirst=True)
