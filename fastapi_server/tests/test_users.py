import pytest
import requests
from sqlmodel import select

from main import app
from pool_api.auth import decode_access_token
from pool_api.models import User
from pool_api.routers.users import get_google_client


class FakeGoogleClient:
    def __init__(self, profile=None, error=None):
        self.profile = profile
        self.error = error
        self.tokens = []

    def get_userinfo(self, access_token):
        self.tokens.append(access_token)
        if self.error:
            raise self.error
        return self.profile


@pytest.fixture()
def google(client):
    fake = FakeGoogleClient(
        profile={
            "id": "g-123",
            "email": "ana@example.com",
            "verified_email": True,
            "name": "Ana",
            "picture": "https://lh3.example.com/ana.png",
        }
    )
    app.dependency_overrides[get_google_client] = lambda: fake
    return fake


def test_count_users(client, make_user):
    make_user("Ana")
    make_user("Bruno")

    assert client.get("/users/count").json() == {"count": 2}


def test_sign_in_creates_user_and_issues_token(client, session, google):
    response = client.post("/users", json={"access_token": "google-token"})

    assert response.status_code == 201
    assert google.tokens == ["google-token"]
    user = session.exec(select(User)).one()
    assert (user.google_id, user.email, user.name) == ("g-123", "ana@example.com", "Ana")

    current = decode_access_token(response.json()["token"])
    assert current.sub == user.id
    assert current.avatar_url == "https://lh3.example.com/ana.png"


def test_sign_in_again_updates_existing_user(client, session, google):
    client.post("/users", json={"access_token": "google-token"})
    google.profile = {**google.profile, "name": "Ana Maria"}

    response = client.post("/users", json={"access_token": "google-token"})

    assert response.status_code == 201
    users = session.exec(select(User)).all()
    assert [u.name for u in users] == ["Ana Maria"]


def test_sign_in_with_rejected_google_token(client, session, google):
    google.error = requests.HTTPError("401 Client Error: Unauthorized")

    response = client.post("/users", json={"access_token": "expired"})

    assert response.status_code == 502
    assert response.json() == {"message": "Failed to verify Google access token."}
    assert session.exec(select(User)).all() == []


def test_me_returns_token_claims(client, user, auth_headers):
    response = client.get("/me", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json() == {
        "user": {"sub": user.id, "name": user.name, "avatar_url": user.avatar_url}
    }
