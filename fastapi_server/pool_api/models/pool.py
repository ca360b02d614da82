"""
Pools - Group competitions that users join with a short code.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class Pool(SQLModel, table=True):
    __tablename__ = "pools"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=100)
    code: str = Field(index=True, unique=True, max_length=6)  # "X7K2QA"
    owner_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
