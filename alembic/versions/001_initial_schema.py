"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.Enum("player", "admin", name="userrole"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_name"), "users", ["name"], unique=True)

    op.create_table(
        "user_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("token", sa.String(length=512), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_sessions_id"), "user_sessions", ["id"], unique=False)
    op.create_index(op.f("ix_user_sessions_token"), "user_sessions", ["token"], unique=True)
    op.create_index(op.f("ix_user_sessions_user_id"), "user_sessions", ["user_id"], unique=False)

    op.create_table(
        "maps",
        sa.Column("id", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("template", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "game_plans",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("map_id", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("assignments", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["map_id"], ["maps.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_game_plans_id"), "game_plans", ["id"], unique=False)
    op.create_index(op.f("ix_game_plans_map_id"), "game_plans", ["map_id"], unique=False)

    op.create_table(
        "game_plan_players",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("game_plan_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("assignment_ids", sa.JSON(), nullable=False),
        sa.Column("main_assignment_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["game_plan_id"], ["game_plans.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("game_plan_id", "user_id", name="uq_game_plan_player_plan_user"),
    )
    op.create_index(op.f("ix_game_plan_players_id"), "game_plan_players", ["id"], unique=False)
    op.create_index(
        op.f("ix_game_plan_players_game_plan_id"), "game_plan_players", ["game_plan_id"], unique=False
    )
    op.create_index(
        op.f("ix_game_plan_players_user_id"), "game_plan_players", ["user_id"], unique=False
    )

    op.create_table(
        "availabilities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("AVAILABLE", "CONDITIONAL", "UNAVAILABLE", name="availabilitystatus"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_availability_user_date"),
    )
    op.create_index(op.f("ix_availabilities_id"), "availabilities", ["id"], unique=False)
    op.create_index(op.f("ix_availabilities_user_id"), "availabilities", ["user_id"], unique=False)
    op.create_index(op.f("ix_availabilities_date"), "availabilities", ["date"], unique=False)

    op.create_table(
        "calendar_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("type", sa.Enum("MATCH", "EVENT", name="eventtype"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("game_plan", sa.JSON(), nullable=True),
        sa.Column("created_by_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_calendar_events_id"), "calendar_events", ["id"], unique=False)
    op.create_index(op.f("ix_calendar_events_date"), "calendar_events", ["date"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_calendar_events_date"), table_name="calendar_events")
    op.drop_index(op.f("ix_calendar_events_id"), table_name="calendar_events")
    op.drop_table("calendar_events")

    op.drop_index(op.f("ix_availabilities_date"), table_name="availabilities")
    op.drop_index(op.f("ix_availabilities_user_id"), table_name="availabilities")
    op.drop_index(op.f("ix_availabilities_id"), table_name="availabilities")
    op.drop_table("availabilities")

    op.drop_index(op.f("ix_game_plan_players_user_id"), table_name="game_plan_players")
    op.drop_index(op.f("ix_game_plan_players_game_plan_id"), table_name="game_plan_players")
    op.drop_index(op.f("ix_game_plan_players_id"), table_name="game_plan_players")
    op.drop_table("game_plan_players")

    op.drop_index(op.f("ix_game_plans_map_id"), table_name="game_plans")
    op.drop_index(op.f("ix_game_plans_id"), table_name="game_plans")
    op.drop_table("game_plans")

    op.drop_table("maps")

    op.drop_index(op.f("ix_user_sessions_user_id"), table_name="user_sessions")
    op.drop_index(op.f("ix_user_sessions_token"), table_name="user_sessions")
    op.drop_index(op.f("ix_user_sessions_id"), table_name="user_sessions")
    op.drop_table("user_sessions")

    op.drop_index(op.f("ix_users_name"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS eventtype")
    op.execute("DROP TYPE IF EXISTS availabilitystatus")
    op.execute("DROP TYPE IF EXISTS userrole")
