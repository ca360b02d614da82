"""
Lookups shared by the routers.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session, select

from pool_api.models.guess import Guess
from pool_api.models.participant import Participant
from pool_api.models.pool import Pool


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; they are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def pool_code_taken(session: Session, code: str) -> bool:
    return session.exec(select(Pool).where(Pool.code == code)).first() is not None


def find_participant(session: Session, pool_id: int, user_id: int) -> Optional[Participant]:
    return session.exec(
        select(Participant)
        .where(Participant.pool_id == pool_id)
        .where(Participant.user_id == user_id)
    ).first()


def find_guess(session: Session, participant_id: int, game_id: int) -> Optional[Guess]:
    return session.exec(
        select(Guess)
        .where(Guess.participant_id == participant_id)
        .where(Guess.game_id == game_id)
    ).first()
