"""
SQLModel models for the pool game.
"""
from pool_api.models.user import User
from pool_api.models.pool import Pool
from pool_api.models.participant import Participant
from pool_api.models.game import Game
from pool_api.models.guess import Guess

__all__ = [
    "User",
    "Pool",
    "Participant",
    "Game",
    "Guess",
]
