"""
Shared fixtures: in-memory SQLite, a TestClient bound to it, and helpers
for users, games and bearer tokens.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-secret")  # Must be set before importing app modules

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import pool_api.models  # noqa: F401
from pool_api.auth import create_access_token
from pool_api.database import get_session
from pool_api.models import Game, User


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(session):
    from main import app

    def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(session):
    def _make_user(name="Diego", email=None, avatar_url=None):
        user = User(
            name=name,
            email=email or f"{name.lower()}@example.com",
            avatar_url=avatar_url or f"https://avatars.example.com/{name.lower()}.png",
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _auth_headers


@pytest.fixture()
def make_game(session):
    def _make_game(starts_in=timedelta(days=2), first="BR", second="AR"):
        game = Game(
            date=datetime.now(timezone.utc) + starts_in,
            first_team_country_code=first,
            second_team_country_code=second,
        )
        session.add(game)
        session.commit()
        session.refresh(game)
        return game

    return _make_game
