"""GamePlan models: one map's assignments plus which player covers what."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from rosterapp.models.base import Base


class GamePlan(Base):
    __tablename__ = "game_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, index=True)
    map_id: Mapped[str] = mapped_column(ForeignKey("maps.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # assignments: list of {"id", "name", "x", "y", "zone", "floor"?}
    assignments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class GamePlanPlayer(Base):
    __tablename__ = "game_plan_players"
    __table_args__ = (
        UniqueConstraint("game_plan_id", "user_id", name="uq_game_plan_player_plan_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, index=True)
    game_plan_id: Mapped[int] = mapped_column(
        ForeignKey("game_plans.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    assignment_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    main_assignment_id: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
