"""initial batstat schema

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2025-06-05 12:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "3f1c9a2b7d10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("number", sa.Integer(), nullable=True),
        sa.Column("primary_position", sa.String(), nullable=True),
        sa.Column("secondary_positions", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_players_name", "players", ["name"])

    op.create_table(
        "games",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("opponent", sa.String(), nullable=False),
        sa.Column("home_score", sa.Integer(), nullable=True),
        sa.Column("opponent_score", sa.Integer(), nullable=True),
        sa.Column("weather_conditions", sa.String(), nullable=True),
        sa.Column("is_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_games_date", "games", ["date"])

    op.create_table(
        "game_lineups",
        sa.Column("game_id", sa.String(36), sa.ForeignKey("games.id"), primary_key=True),
        sa.Column("player_id", sa.String(36), sa.ForeignKey("players.id"), primary_key=True),
        sa.Column("position", sa.String(), nullable=True),
        sa.Column("batting_order", sa.Integer(), nullable=True),
    )

    # stats are append-only; hit location is flattened into nullable columns
    op.create_table(
        "stats",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("game_id", sa.String(36), sa.ForeignKey("games.id"), nullable=False),
        sa.Column("player_id", sa.String(36), sa.ForeignKey("players.id"), nullable=False),
        sa.Column("inning", sa.Integer(), nullable=True),
        sa.Column("at_bat_number", sa.Integer(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("outcome", sa.String(), nullable=True),
        sa.Column("runs_batted_in", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(8), nullable=False),
        sa.Column("hit_location_x", sa.Float(), nullable=True),
        sa.Column("hit_location_y", sa.Float(), nullable=True),
        sa.Column("hit_location_height", sa.Float(), nullable=True),
        sa.Column("hit_location_grid_resolution", sa.Integer(), nullable=True),
        sa.CheckConstraint("inning IS NULL OR inning > 0", name="ck_stats_inning_positive"),
        sa.CheckConstraint("at_bat_number IS NULL OR at_bat_number > 0", name="ck_stats_at_bat_number_positive"),
        sa.CheckConstraint("runs_batted_in IS NULL OR runs_batted_in >= 0", name="ck_stats_rbi_non_negative"),
    )
    op.create_index("ix_stats_game_id", "stats", ["game_id"])
    op.create_index("ix_stats_player_id", "stats", ["player_id"])
    op.create_index("ix_stats_timestamp", "stats", ["timestamp"])


def downgrade() -> None:
    op.drop_index("ix_stats_timestamp", table_name="stats")
    op.drop_index("ix_stats_player_id", table_name="stats")
    op.drop_index("ix_stats_game_id", table_name="stats")
    op.drop_table("stats")
    op.drop_table("game_lineups")
    op.drop_index("ix_games_date", table_name="games")
    op.drop_table("games")
    op.drop_index("ix_players_name", table_name="players")
    op.drop_table("players")
