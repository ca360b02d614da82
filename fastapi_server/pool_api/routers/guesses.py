"""
Guesses router - score predictions for games inside a pool.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from pool_api import queries
from pool_api.auth import CurrentUser, authenticate
from pool_api.database import get_session
from pool_api.models.game import Game
from pool_api.models.guess import Guess

router = APIRouter(tags=["guesses"])

ALREADY_GUESSED = "You have already sent a guess to this game on this pool."


class CreateGuessRequest(BaseModel):
    first_team_points: int = Field(ge=0, description="Predicted points for the first team")
    second_team_points: int = Field(ge=0, description="Predicted points for the second team")


@router.get("/guesses/count")
def count_guesses(session: Session = Depends(get_session)):
    count = session.exec(select(func.count(Guess.id))).one()
    return {"count": count}


@router.post("/pools/{pool_id}/games/{game_id}/guesses", status_code=201)
def create_guess(
    pool_id: int,
    game_id: int,
    request: CreateGuessRequest,
    user: CurrentUser = Depends(authenticate),
    session: Session = Depends(get_session),
):
    """
    Submit the caller's guess for a game.

    The caller must participate in the pool, must not have guessed this game
    yet, and the game must not have started.
    """
    participant = queries.find_participant(session, pool_id, user.sub)

    if not participant:
        raise HTTPException(
            status_code=400,
            detail="You are not allowed to create a guess inside this pool.",
        )

    existing = queries.find_guess(session, participant.id, game_id)

    if existing:
        raise HTTPException(status_code=400, detail=ALREADY_GUESSED)

    game = session.get(Game, game_id)

    if not game:
        raise HTTPException(status_code=400, detail="Game not found.")

    if queries.as_utc(game.date) < datetime.now(timezone.utc):
        logger.warning("Late guess from user {} for game {}", user.sub, game_id)
        raise HTTPException(status_code=400, detail="You cannot send guesses after the match.")

    guess = Guess(
        participant_id=participant.id,
        game_id=game_id,
        first_team_points=request.first_team_points,
        second_team_points=request.second_team_points,
    )
    session.add(guess)
    try:
        session.commit()
    except IntegrityError:
        # Concurrent submission for the same (participant, game)
        session.rollback()
        raise HTTPException(status_code=400, detail=ALREADY_GUESSED)

    logger.info("User {} guessed game {} in pool {}", user.sub, game_id, pool_id)
    return {"message": "Guess created successfully"}
