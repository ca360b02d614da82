"""
Guesses - A participant's score prediction for one game.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel, UniqueConstraint


class Guess(SQLModel, table=True):
    __tablename__ = "guesses"
    __table_args__ = (
        UniqueConstraint("participant_id", "game_id", name="uq_guess_participant_game"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    participant_id: int = Field(foreign_key="participants.id", index=True)
    game_id: int = Field(foreign_key="games.id", index=True)
    first_team_points: int
    second_team_points: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
