# Security helper tests

import pytest

from utils.security import JWTManager, extract_bearer_token

SECRET = "test-jwt-secret-with-enough-length-for-hs256"


class TestBearerToken:

    @pytest.mark.parametrize("header, expected", [
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("BEARER abc", "abc"),
        (None, None),
        ("", None),
        ("Bearer", None),
        ("Bearer ", None),
        ("Basic abc", None),
        ("abc", None),
    ])
    def test_extract(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestJWTManager:

    def test_round_trip(self):
        manager = JWTManager(SECRET)
        token = manager.create_access_token({"sub": "user-1", "email": "a@b.c"})

        claims = manager.verify_token(token)

        assert claims["sub"] == "user-1"
        assert claims["aud"] == "authenticated"

    def test_wrong_secret(self):
        token = JWTManager(SECRET).create_access_token({"sub": "user-1"})

        assert JWTManager("another-secret-of-sufficient-length-0000").verify_token(token) is None

    def test_expired(self):
        manager = JWTManager(SECRET)
        token = manager.create_access_token({"sub": "user-1"}, expire_minutes=-5)

        assert manager.verify_token(token) is None

    def test_subject_required(self):
        manager = JWTManager(SECRET)

        assert manager.verify_token(manager.create_access_token({"email": "a@b.c"})) is None

    def test_wrong_audience(self):
        manager = JWTManager(SECRET)
        token = manager.create_access_token({"sub": "user-1", "aud": "other"})

        assert manager.verify_token(token) is None
