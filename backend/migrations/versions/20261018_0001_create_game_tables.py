from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "game_config",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("default_task_points", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("time_bonus_threshold_sec", sa.Integer(), nullable=False, server_default="120"),
        sa.Column("time_bonus_points", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("hint_penalty_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("leaderboard_mode", sa.String(length=16), nullable=False, server_default="most-tasks"),
        sa.Column("game_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("game_title", sa.String(length=120), nullable=False, server_default="Scavenger Hunt"),
        sa.Column("game_subtitle", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("allow_registration", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("map_center_lat", sa.Float(), nullable=False, server_default="52.2297"),
        sa.Column("map_center_lng", sa.Float(), nullable=False, server_default="21.0122"),
        sa.Column("map_zoom", sa.Integer(), nullable=False, server_default="17"),
        sa.Column("boundary_radius_meters", sa.Integer(), nullable=False, server_default="500"),
        sa.Column("shuffle_task_order", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("hint_reveal_delay_sec", sa.Integer(), nullable=False, server_default="180"),
        sa.Column("location_reveal_delay_sec", sa.Integer(), nullable=False, server_default="360"),
        sa.Column("game_end_time", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("game_duration_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("id = 1", name="ck_game_config_singleton"),
    )

    op.create_table(
        "teams",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=40), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="team"),
        sa.Column("avatar_color", sa.String(length=16), nullable=False, server_default="#00f0ff"),
        sa.Column("task_queue", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("profile_edited", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("role IN ('team','admin')", name="ck_teams_role"),
    )
    op.create_index("ix_teams_name", "teams", ["name"], unique=True)

    op.create_table(
        "tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location_hint", sa.Text(), nullable=False),
        sa.Column("detailed_hint", sa.Text(), nullable=False, server_default=""),
        sa.Column("points", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("map_label", sa.String(length=80), nullable=False, server_default=""),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_tasks_points_nonneg"),
    )

    op.create_table(
        "submissions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("team_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("task_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("riddle_opened_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("photo_submitted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("elapsed_ms", sa.BigInteger(), nullable=True),
        sa.Column("photo_key", sa.Text(), nullable=True),
        sa.Column("photo_mime", sa.String(length=64), nullable=True),
        sa.Column("photo_phash", sa.String(length=32), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="in-progress"),
        sa.Column("blocked_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("blocked_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("teams.id", ondelete="SET NULL"), nullable=True),
        sa.Column("block_reason", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("photo_points", sa.Integer(), nullable=True),
        sa.Column("scored_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("scored_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("teams.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("team_id", "task_id", name="uq_submission_team_task"),
        sa.CheckConstraint("status IN ('in-progress','completed','blocked')", name="ck_submissions_status"),
        sa.CheckConstraint("elapsed_ms IS NULL OR elapsed_ms >= 0", name="ck_submissions_elapsed_nonneg"),
        sa.CheckConstraint("photo_points IS NULL OR photo_points >= 0", name="ck_submissions_photo_points_nonneg"),
    )
    op.create_index("ix_submissions_team_id", "submissions", ["team_id"])
    op.create_index("ix_submissions_task_id", "submissions", ["task_id"])
    op.create_index("ix_submissions_status_photo_at", "submissions", ["status", "photo_submitted_at"])

    op.create_table(
        "side_quests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "side_quest_submissions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("team_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("side_quest_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("side_quests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("photo_key", sa.Text(), nullable=True),
        sa.Column("photo_mime", sa.String(length=64), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("teams.id", ondelete="SET NULL"), nullable=True),
        sa.Column("reviewed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint("team_id", "side_quest_id", name="uq_side_quest_submission_once"),
        sa.CheckConstraint("status IN ('pending','approved','rejected')", name="ck_side_quest_submissions_status"),
    )
    op.create_index("ix_side_quest_submissions_team_id", "side_quest_submissions", ["team_id"])
    op.create_index("ix_side_quest_submissions_side_quest_id", "side_quest_submissions", ["side_quest_id"])

def downgrade() -> None:
    op.drop_index("ix_side_quest_submissions_side_quest_id", table_name="side_quest_submissions")
    op.drop_index("ix_side_quest_submissions_team_id", table_name="side_quest_submissions")
    op.drop_table("side_quest_submissions")
    op.drop_table("side_quests")
    op.drop_index("ix_submissions_status_photo_at", table_name="submissions")
    op.drop_index("ix_submissions_task_id", table_name="submissions")
    op.drop_index("ix_submissions_team_id", table_name="submissions")
    op.drop_table("submissions")
    op.drop_table("tasks")
    op.drop_index("ix_teams_name", table_name="teams")
    op.drop_table("teams")
    op.drop_table("game_config")
