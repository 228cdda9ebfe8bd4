from datetime import timedelta

from jose import jwt

from bnusa.core.config import settings
from bnusa.services.auth import AuthService


def test_token_round_trip_carries_identity():
    token = AuthService.create_access_token(
        "uid-1", email="a@example.com", name="Ava", picture="https://img.example/a.png"
    )
    user = AuthService.verify_token(token)
    assert user.uid == "uid-1"
    assert user.email == "a@example.com"
    assert user.display_name == "Ava"
    assert user.photo_url == "https://img.example/a.png"


def test_bearer_prefix_is_accepted():
    token = AuthService.create_access_token("uid-1")
    assert AuthService.verify_token(f"Bearer {token}").uid == "uid-1"


def test_expired_token_is_rejected():
    token = AuthService.create_access_token("uid-1", expires_delta=timedelta(seconds=-5))
    assert AuthService.verify_token(token) is None


def test_token_signed_with_another_key_is_rejected():
    token = jwt.encode({"sub": "uid-1"}, "some-other-key", algorithm="HS256")
    assert AuthService.verify_token(token) is None
    assert AuthService.verify_token("") is None


def test_token_without_subject_is_rejected():
    token = jwt.encode({"email": "a@example.com"}, settings.SECRET_KEY, algorithm="HS256")
    assert AuthService.verify_token(token) is None
