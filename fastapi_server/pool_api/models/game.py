"""
Games - Matches that participants guess the score of.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class Game(SQLModel, table=True):
    __tablename__ = "games"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: datetime = Field(index=True)  # Kick-off, UTC
    first_team_country_code: str = Field(max_length=3)  # ISO 3166-1 alpha-2, e.g. "BR"
    second_team_country_code: str = Field(max_length=3)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
