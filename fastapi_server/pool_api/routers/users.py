"""
Users router - sign-in with a Google access token and token introspection.

POST /users exchanges a Google OAuth access token for our own JWT.
"""
from typing import Optional

import requests
from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel, Field
from sqlmodel import Session, func, select

from pool_api.auth import CurrentUser, authenticate, create_access_token
from pool_api.config import GOOGLE_USERINFO_URL
from pool_api.database import get_session
from pool_api.models.user import User

router = APIRouter(tags=["users"])


class GoogleClient:
    def __init__(self, userinfo_url: str = GOOGLE_USERINFO_URL):
        self.userinfo_url = userinfo_url
        self.session = requests.Session()

    def get_userinfo(self, access_token: str) -> dict:
        """
        Fetch the profile behind a Google OAuth access token.

        Returns the raw payload: id, email, name, picture.
        """
        response = self.session.get(
            self.userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()


def get_google_client() -> GoogleClient:
    return GoogleClient()


# --- Request/Response Models ---

class SignInRequest(BaseModel):
    access_token: str = Field(min_length=1, description="Google OAuth access token")


class GoogleProfile(BaseModel):
    id: str
    email: str
    name: str
    picture: Optional[str] = None


class SignInResponse(BaseModel):
    token: str


class MeResponse(BaseModel):
    user: CurrentUser


# --- Endpoints ---

@router.get("/users/count")
def count_users(session: Session = Depends(get_session)):
    count = session.exec(select(func.count(User.id))).one()
    return {"count": count}


@router.post("/users", status_code=201, response_model=SignInResponse)
def sign_in(
    request: SignInRequest,
    google: GoogleClient = Depends(get_google_client),
    session: Session = Depends(get_session),
):
    """
    Sign in with Google.

    Creates the user on first sign-in and refreshes name/avatar afterwards.
    Returns a JWT to send as `Authorization: Bearer <token>`.
    """
    try:
        profile = GoogleProfile(**google.get_userinfo(request.access_token))
    except requests.RequestException as e:
        logger.warning("Google userinfo request failed: {}", e)
        raise HTTPException(status_code=502, detail="Failed to verify Google access token.")

    user = session.exec(select(User).where(User.google_id == profile.id)).first()
    if not user:
        user = session.exec(select(User).where(User.email == profile.email)).first()

    if user:
        user.google_id = profile.id
        user.name = profile.name
        user.avatar_url = profile.picture
    else:
        user = User(
            name=profile.name,
            email=profile.email,
            google_id=profile.id,
            avatar_url=profile.picture,
        )
        logger.info("New user {}", profile.email)

    session.add(user)
    session.commit()
    session.refresh(user)

    return SignInResponse(token=create_access_token(user))


@router.get("/me", response_model=MeResponse)
def me(user: CurrentUser = Depends(authenticate)):
    return MeResponse(user=user)
