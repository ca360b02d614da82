"""
Games router - the game list of a pool, with the caller's guesses attached.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session, select

from pool_api import queries
from pool_api.auth import CurrentUser, authenticate
from pool_api.database import get_session
from pool_api.models.game import Game
from pool_api.models.guess import Guess

router = APIRouter(tags=["games"])


class GuessInfo(BaseModel):
    id: int
    first_team_points: int
    second_team_points: int
    created_at: str


class GameInfo(BaseModel):
    id: int
    date: str
    first_team_country_code: str
    second_team_country_code: str
    guess: Optional[GuessInfo] = None


class GameListResponse(BaseModel):
    games: list[GameInfo]


@router.get("/pools/{pool_id}/games", response_model=GameListResponse)
def list_pool_games(
    pool_id: int,
    user: CurrentUser = Depends(authenticate),
    session: Session = Depends(get_session),
):
    """
    List all games ordered by date.

    Each game carries the caller's guess in this pool, or null when the
    caller has not guessed it (or does not participate in the pool).
    """
    games = session.exec(select(Game).order_by(Game.date, Game.id)).all()

    participant = queries.find_participant(session, pool_id, user.sub)

    guesses = {}
    if participant:
        guesses = {
            g.game_id: g
            for g in session.exec(
                select(Guess).where(Guess.participant_id == participant.id)
            ).all()
        }

    return GameListResponse(
        games=[
            GameInfo(
                id=game.id,
                date=queries.as_utc(game.date).isoformat(),
                first_team_country_code=game.first_team_country_code,
                second_team_country_code=game.second_team_country_code,
                guess=(
                    GuessInfo(
                        id=guesses[game.id].id,
                        first_team_points=guesses[game.id].first_team_points,
                        second_team_points=guesses[game.id].second_team_points,
                        created_at=guesses[game.id].created_at.isoformat(),
                    )
                    if game.id in guesses
                    else None
                ),
            )
            for game in games
        ]
    )
