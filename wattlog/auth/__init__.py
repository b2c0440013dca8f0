"""
Authentication package for Bearer token validation.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""

from wattlog.auth.bearer import BearerAuth, parse_user_tokens, verify_bearer_token

__all__ = ["BearerAuth", "parse_user_tokens", "verify_bearer_token"]
