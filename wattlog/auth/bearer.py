"""
Bearer token authentication for the HTTP API.

Tokens are configured through USER_TOKENS as comma-separated
``token:user_id`` pairs. A valid token resolves to the user whose daily
usage documents the request may read and write. Identity management
itself is out of scope; this is a static token map.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""

import logging
import secrets

from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)


def parse_user_tokens(raw: str) -> dict[str, str]:
    """Parse ``"tokA:user1,tokB:user2"`` into ``{"tokA": "user1", ...}``.

    Whitespace around tokens and user ids is stripped. Entries without a
    colon, or with an empty token or user id, are skipped.
    """
    token_map: dict[str, str] = {}
    for pair in raw.split(","):
        if ":" not in pair:
            if pair.strip():
                logger.warning("Skipping malformed USER_TOKENS entry")
            continue
        token, user_id = pair.split(":", 1)
        token, user_id = token.strip(), user_id.strip()
        if token and user_id:
            token_map[token] = user_id
    return token_map


def verify_bearer_token(token: str, token_map: dict[str, str]) -> str | None:
    """Return the user_id for *token*, or None if it is not configured.

    Every configured token is compared with ``secrets.compare_digest``.
    """
    if not token:
        return None
    user_id = None
    for known_token, known_user in token_map.items():
        if secrets.compare_digest(token.encode(), known_token.encode()):
            user_id = known_user
    return user_id


_bearer_scheme = HTTPBearer(auto_error=False)


class BearerAuth:
    """Token map wrapper exposing a FastAPI dependency.

    Args:
        token_map: Mapping of token -> user_id.
    """

    def __init__(self, token_map: dict[str, str]) -> None:
        self.token_map = token_map

    async def verify(
        self,
        credentials: HTTPAuthorizationCredentials | None = Security(_bearer_scheme),
    ) -> str:
        """FastAPI dependency: validates the Bearer token, returns user_id.

        Raises:
            HTTPException: 401 if credentials are missing or invalid.
        """
        if credentials is None:
            raise HTTPException(
                status_code=401,
                detail="Missing authorization credentials.",
                headers={"WWW-Authenticate": "Bearer"},
            )
        user_id = verify_bearer_token(credentials.credentials, self.token_map)
        if user_id is None:
            raise HTTPException(
                status_code=401,
                detail="Invalid or expired token.",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return user_id
