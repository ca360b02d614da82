"""
Pools router - create, join and inspect prediction pools.

A pool is joined with its 6-character code. Creating a pool without a token
is allowed; the first user to join an ownerless pool becomes its owner.
"""
import secrets
import string
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from pool_api import queries
from pool_api.auth import CurrentUser, authenticate, optional_user
from pool_api.database import get_session
from pool_api.models.participant import Participant
from pool_api.models.pool import Pool
from pool_api.models.user import User

router = APIRouter(prefix="/pools", tags=["pools"])

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6
PARTICIPANT_PREVIEW = 4


# --- Request/Response Models ---

class CreatePoolRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=100, description="Pool title")


class CreatePoolResponse(BaseModel):
    code: str


class JoinPoolRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    code: str = Field(min_length=1, max_length=CODE_LENGTH, description="Pool join code")


class ParticipantUser(BaseModel):
    avatar_url: Optional[str] = None


class ParticipantPreview(BaseModel):
    id: int
    user: ParticipantUser


class PoolOwner(BaseModel):
    name: str


class PoolSummary(BaseModel):
    id: int
    title: str
    code: str
    owner_id: Optional[int] = None
    created_at: str
    owner: Optional[PoolOwner] = None
    participants_count: int
    participants: list[ParticipantPreview]


class PoolListResponse(BaseModel):
    pools: list[PoolSummary]


class PoolDetailResponse(BaseModel):
    pool: Optional[PoolSummary] = None


# --- Utility Functions ---

def generate_pool_code() -> str:
    """Generate a join code like 'X7K2QA'."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def summarize_pool(session: Session, pool: Pool) -> PoolSummary:
    """Attach owner name, participant count and a participant preview."""
    owner = session.get(User, pool.owner_id) if pool.owner_id else None

    participants_count = session.exec(
        select(func.count(Participant.id)).where(Participant.pool_id == pool.id)
    ).one()

    preview = session.exec(
        select(Participant, User)
        .join(User, User.id == Participant.user_id)
        .where(Participant.pool_id == pool.id)
        .order_by(Participant.created_at, Participant.id)
        .limit(PARTICIPANT_PREVIEW)
    ).all()

    return PoolSummary(
        id=pool.id,
        title=pool.title,
        code=pool.code,
        owner_id=pool.owner_id,
        created_at=pool.created_at.isoformat(),
        owner=PoolOwner(name=owner.name) if owner else None,
        participants_count=participants_count,
        participants=[
            ParticipantPreview(id=p.id, user=ParticipantUser(avatar_url=u.avatar_url))
            for p, u in preview
        ],
    )


# --- Endpoints ---

@router.get("/count")
def count_pools(session: Session = Depends(get_session)):
    count = session.exec(select(func.count(Pool.id))).one()
    return {"count": count}


@router.post("", status_code=201, response_model=CreatePoolResponse)
def create_pool(
    request: CreatePoolRequest,
    user: Optional[CurrentUser] = Depends(optional_user),
    session: Session = Depends(get_session),
):
    """
    Create a new pool.

    With a valid token the caller becomes owner and first participant.
    Without one the pool is created ownerless.
    """
    # Generate unique code (with retry for rare collisions)
    for _ in range(5):
        code = generate_pool_code()
        if queries.pool_code_taken(session, code):
            continue

        pool = Pool(
            title=request.title,
            code=code,
            owner_id=user.sub if user else None,
        )
        session.add(pool)
        try:
            session.flush()
        except IntegrityError:
            # Code claimed by a concurrent request since the check
            session.rollback()
            continue
        break
    else:
        raise HTTPException(status_code=500, detail="Failed to generate unique pool code.")

    if user:
        session.add(Participant(pool_id=pool.id, user_id=user.sub))
    session.commit()

    logger.info("Created pool {} ({}) owner={}", pool.id, code, pool.owner_id)
    return CreatePoolResponse(code=code)


@router.post("/join", status_code=201)
def join_pool(
    request: JoinPoolRequest,
    user: CurrentUser = Depends(authenticate),
    session: Session = Depends(get_session),
):
    """
    Join a pool by code.

    The first user to join an ownerless pool becomes its owner.
    """
    code = request.code.upper()
    pool = session.exec(select(Pool).where(Pool.code == code)).first()

    if not pool:
        logger.warning("User {} tried to join unknown pool code {}", user.sub, code)
        raise HTTPException(status_code=400, detail="Pool not found.")

    existing = queries.find_participant(session, pool.id, user.sub)

    if existing:
        raise HTTPException(status_code=400, detail="You already joined this pool.")

    if not pool.owner_id:
        pool.owner_id = user.sub
        session.add(pool)

    session.add(Participant(pool_id=pool.id, user_id=user.sub))
    try:
        session.commit()
    except IntegrityError:
        # Concurrent join for the same (user, pool)
        session.rollback()
        raise HTTPException(status_code=400, detail="You already joined this pool.")

    logger.info("User {} joined pool {}", user.sub, pool.id)
    return {"message": "Joined pool successfully"}


@router.get("", response_model=PoolListResponse)
def list_pools(
    user: CurrentUser = Depends(authenticate),
    session: Session = Depends(get_session),
):
    """List the pools the caller participates in."""
    pools = session.exec(
        select(Pool)
        .join(Participant, Participant.pool_id == Pool.id)
        .where(Participant.user_id == user.sub)
        .order_by(Pool.created_at, Pool.id)
    ).all()

    return PoolListResponse(pools=[summarize_pool(session, p) for p in pools])


@router.get("/{pool_id}", response_model=PoolDetailResponse)
def get_pool(
    pool_id: int,
    user: CurrentUser = Depends(authenticate),
    session: Session = Depends(get_session),
):
    """Get a single pool, or {"pool": null} if it does not exist."""
    pool = session.get(Pool, pool_id)
    if not pool:
        return PoolDetailResponse(pool=None)
    return PoolDetailResponse(pool=summarize_pool(session, pool))
