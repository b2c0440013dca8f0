"""
Tests for Bearer token authentication of API users (STORY-012).

Tokens map to user ids through USER_TOKENS. A valid token resolves to the
user whose usage documents the request operates on.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""

import logging
from unittest.mock import patch

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from wattlog.auth.bearer import BearerAuth, parse_user_tokens, verify_bearer_token

TOKEN_MAP = {"tok-alice": "alice", "tok-bob": "bob"}


def _protected_app(token_map: dict[str, str]) -> FastAPI:
    """Minimal app with one endpoint guarded by BearerAuth.verify."""
    test_app = FastAPI()
    auth = BearerAuth(token_map)

    @test_app.get("/me")
    async def me(user_id: str = Depends(auth.verify)) -> dict:
        return {"user_id": user_id}

    return test_app


# ---------------------------------------------------------------------------
# parse_user_tokens
# ---------------------------------------------------------------------------


class TestParseUserTokens:
    """Tests for the USER_TOKENS parser."""

    def test_pairs_are_parsed(self) -> None:
        assert parse_user_tokens("tok-alice:alice,tok-bob:bob") == TOKEN_MAP

    def test_empty_string_gives_empty_map(self) -> None:
        assert parse_user_tokens("") == {}

    def test_whitespace_is_stripped(self) -> None:
        assert parse_user_tokens(" tok-alice : alice , tok-bob:bob ") == TOKEN_MAP

    def test_user_id_may_contain_colon(self) -> None:
        """Only the first colon separates token from user id."""
        assert parse_user_tokens("tok:org:alice") == {"tok": "org:alice"}

    def test_malformed_entries_are_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="wattlog.auth.bearer"):
            result = parse_user_tokens("tok-alice:alice,garbage,:nobody,tok-x:,tok-bob:bob")

        assert result == TOKEN_MAP
        assert "malformed" in caplog.text


# ---------------------------------------------------------------------------
# verify_bearer_token
# ---------------------------------------------------------------------------


class TestVerifyBearerToken:
    """Tests for token lookup."""

    def test_known_token_returns_user(self) -> None:
        assert verify_bearer_token("tok-bob", TOKEN_MAP) == "bob"

    def test_unknown_token_returns_none(self) -> None:
        assert verify_bearer_token("tok-eve", TOKEN_MAP) is None

    def test_empty_token_returns_none(self) -> None:
        assert verify_bearer_token("", TOKEN_MAP) is None

    def test_prefix_of_token_is_rejected(self) -> None:
        assert verify_bearer_token("tok-ali", TOKEN_MAP) is None

    def test_uses_compare_digest(self) -> None:
        with patch("wattlog.auth.bearer.secrets.compare_digest", return_value=False) as mock_cmp:
            result = verify_bearer_token("tok-alice", TOKEN_MAP)

        assert mock_cmp.call_count == len(TOKEN_MAP)
        assert result is None


# ---------------------------------------------------------------------------
# BearerAuth.verify as a FastAPI dependency
# ---------------------------------------------------------------------------


class TestBearerAuthDependency:
    """Tests for BearerAuth.verify mounted on a route."""

    def test_valid_token_resolves_user(self) -> None:
        client = TestClient(_protected_app(TOKEN_MAP))

        response = client.get("/me", headers={"Authorization": "Bearer tok-alice"})

        assert response.status_code == 200
        assert response.json() == {"user_id": "alice"}

    def test_invalid_token_is_401(self) -> None:
        client = TestClient(_protected_app(TOKEN_MAP))

        response = client.get("/me", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_missing_header_is_401(self) -> None:
        client = TestClient(_protected_app(TOKEN_MAP))
        assert client.get("/me").status_code == 401

    def test_non_bearer_scheme_is_401(self) -> None:
        client = TestClient(_protected_app(TOKEN_MAP))

        response = client.get("/me", headers={"Authorization": "Basic tok-alice"})

        assert response.status_code == 401
