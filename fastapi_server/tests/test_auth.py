from datetime import datetime, timedelta, timezone

import jwt
import pytest

from pool_api.auth import CurrentUser, create_access_token, decode_access_token
from pool_api.config import JWT_ALGORITHM, JWT_SECRET


def test_token_roundtrip_carries_user_claims(user):
    current = decode_access_token(create_access_token(user))

    assert current == CurrentUser(sub=user.id, name=user.name, avatar_url=user.avatar_url)


def test_expired_token_is_rejected(user):
    token = jwt.encode(
        {"sub": str(user.id), "name": user.name, "exp": datetime.now(timezone.utc) - timedelta(seconds=1)},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)


def test_token_signed_with_other_secret_is_rejected(user):
    token = jwt.encode({"sub": str(user.id), "name": user.name}, "not-the-secret", algorithm=JWT_ALGORITHM)

    with pytest.raises(jwt.InvalidSignatureError):
        decode_access_token(token)


def test_protected_route_requires_token(client):
    response = client.get("/pools")

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized."}


def test_protected_route_rejects_garbage_token(client):
    response = client.get("/pools", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
